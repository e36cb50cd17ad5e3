import subprocess

import pytest

from mac_setup import ui
from mac_setup.command import CommandRunner


@pytest.fixture
def completed(monkeypatch):
    """Replace subprocess.run with one returning the given result."""

    def set_result(returncode=0, stdout="", stderr=""):
        def fake_run(argv, **kwargs):
            return subprocess.CompletedProcess(argv, returncode, stdout, stderr)

        monkeypatch.setattr("mac_setup.command.subprocess.run", fake_run)

    return set_result


def test_stderr_with_brackets_is_only_a_warning(completed):
    completed(returncode=1, stderr="Error: failed [/opt/homebrew]")

    with ui.console.capture() as capture:
        result = CommandRunner().try_run(["brew", "install", "x"], warning="Failed to install x")

    assert result is None
    assert "[/opt/homebrew]" in capture.get()


def test_bracketed_text_is_printed_literally():
    with ui.console.capture() as capture:
        ui.print_warning("Could not run ([Errno 2] No such file)")
    assert "[Errno 2]" in capture.get()


def test_label_replaces_inline_script_in_echo(completed):
    completed()
    script = "#!/bin/bash\nset -u\necho secret-installer-body\n"

    with ui.console.capture() as capture:
        CommandRunner().run(["/bin/bash", "-c", script], capture_output=False, label="install.sh")

    out = capture.get()
    assert "Running: install.sh" in out
    assert "secret-installer-body" not in out


def test_missing_executable_is_a_warning(monkeypatch):
    def fake_run(argv, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", argv[0])

    monkeypatch.setattr("mac_setup.command.subprocess.run", fake_run)

    assert CommandRunner().try_run(["nope"], warning="nope failed") is None
    assert CommandRunner().succeeds(["nope"]) is False
