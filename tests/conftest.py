"""
Shared test fixtures: a temporary HOME and a recording command runner.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest

from mac_setup.command import CommandRunner
from mac_setup.config import Config
from mac_setup.context import Environment, SetupContext

Response = Union[Tuple[int, str], Callable[[List[str]], Tuple[int, str]]]


@dataclass
class Call:
    argv: List[str]
    env: Optional[Environment]
    input_text: Optional[str]
    label: Optional[str] = None


def _contains(argv: List[str], key: Tuple[str, ...]) -> bool:
    n = len(key)
    return any(tuple(argv[i : i + n]) == key for i in range(len(argv) - n + 1))


class FakeRunner(CommandRunner):
    """
    Records every command instead of executing it.

    ``responses`` maps an argument sequence to ``(returncode, stdout)`` or to a
    callable producing one. The longest key found as a contiguous slice of the
    command wins; unmatched commands succeed with empty output.
    """

    def __init__(self, responses: Optional[Dict[Tuple[str, ...], Response]] = None):
        self.responses: Dict[Tuple[str, ...], Response] = dict(responses or {})
        self.available: set = set()
        self.calls: List[Call] = []

    def respond(self, *key: str, rc: int = 0, stdout: str = "") -> None:
        self.responses[tuple(key)] = (rc, stdout)

    def run(
        self,
        cmd,
        env=None,
        check=True,
        capture_output=True,
        input_text=None,
        timeout=None,
        label=None,
    ) -> subprocess.CompletedProcess:
        argv = [str(part) for part in cmd]
        self.calls.append(Call(argv, env, input_text, label))
        matches = [key for key in self.responses if _contains(argv, key)]
        rc, out = 0, ""
        if matches:
            response = self.responses[max(matches, key=len)]
            rc, out = response(argv) if callable(response) else response
        if check and rc != 0:
            raise subprocess.CalledProcessError(rc, argv, output=out, stderr="boom")
        return subprocess.CompletedProcess(argv, rc, out, "")

    def which(self, name, env=None):
        return f"/usr/local/bin/{name}" if name in self.available else None

    @property
    def commands(self) -> List[List[str]]:
        return [c.argv for c in self.calls]

    def ran(self, *key: str) -> bool:
        return any(_contains(argv, key) for argv in self.commands)

    def calls_with(self, *key: str) -> List[Call]:
        return [c for c in self.calls if _contains(c.argv, key)]


@pytest.fixture(autouse=True)
def _no_agent(monkeypatch):
    monkeypatch.delenv("SSH_AUTH_SOCK", raising=False)
    monkeypatch.delenv("SSH_AGENT_PID", raising=False)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config(home: Path, tmp_path: Path) -> Config:
    return Config(
        HOME=home,
        BREW_PREFIX=tmp_path / "homebrew",
        GIT_USER_NAME="Test User",
        GIT_USER_EMAIL="test@example.com",
        SUDO_REFRESH_INTERVAL=0.01,
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def ctx(config: Config, runner: FakeRunner) -> SetupContext:
    return SetupContext(config=config, runner=runner)
