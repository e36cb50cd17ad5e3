import time

import pytest

from mac_setup.privilege import SudoKeepAlive, privilege_session


def test_cached_credentials_skip_prompt(runner):
    with privilege_session(runner, interval=0.01) as keepalive:
        assert keepalive is None
    assert runner.commands == [["sudo", "-n", "true"]]


def test_prompt_starts_refresher_until_block_exits(runner):
    runner.respond("sudo", "-n", "true", rc=1)

    with privilege_session(runner, interval=0.01) as keepalive:
        assert runner.ran("sudo", "-v")
        assert keepalive.running
        time.sleep(0.1)

    assert not keepalive.running
    refreshes = runner.commands.count(["sudo", "-n", "true"])
    assert refreshes > 1
    time.sleep(0.05)
    assert runner.commands.count(["sudo", "-n", "true"]) == refreshes


def test_refresher_stops_on_error(runner):
    runner.respond("sudo", "-n", "true", rc=1)

    with pytest.raises(RuntimeError):
        with privilege_session(runner, interval=0.01) as keepalive:
            raise RuntimeError("task failed")

    assert not keepalive.running


def test_refused_prompt_is_not_fatal(runner):
    runner.respond("sudo", "-n", "true", rc=1)
    runner.respond("sudo", "-v", rc=1)

    with privilege_session(runner, interval=0.01) as keepalive:
        assert keepalive is None


def test_stop_without_start(runner):
    keepalive = SudoKeepAlive(runner, interval=0.01)
    keepalive.stop()
    assert not keepalive.running
