import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from mac_setup.command import CommandRunner
from mac_setup.ui import print_step, print_success, print_warning

logger = logging.getLogger("mac_setup")


class SudoKeepAlive:
    """
    Refreshes the sudo timestamp every ``interval`` seconds until stopped.

    The refresher is a daemon thread waiting on a stop event, so it ends with
    whatever started it instead of polling for a parent process.
    """

    def __init__(self, runner: CommandRunner, interval: float = 60.0):
        self.runner = runner
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            if not self.runner.succeeds(["sudo", "-n", "true"]):
                logger.debug("sudo refresh failed")

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._loop, name="sudo-keepalive", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()


@contextmanager
def privilege_session(runner: CommandRunner, interval: float = 60.0) -> Iterator[Optional[SudoKeepAlive]]:
    """
    Make sure sudo works for the duration of the ``with`` block.

    When cached credentials are already valid nothing is prompted and no
    refresher is started. Otherwise the user is asked once and the timestamp
    is kept fresh until the block exits. A refused prompt is only a warning;
    later privileged steps will report their own failures.
    """
    print_step("Checking sudo access...")
    if runner.succeeds(["sudo", "-n", "true"]):
        print_success("Sudo access confirmed")
        yield None
        return

    print_warning("This script may need sudo access for some operations.")
    print_warning("You might be prompted for your password.")
    if runner.try_run(["sudo", "-v"], warning="Could not obtain sudo access", capture_output=False) is None:
        yield None
        return

    keepalive = SudoKeepAlive(runner, interval)
    keepalive.start()
    try:
        yield keepalive
    finally:
        keepalive.stop()
