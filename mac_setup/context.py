import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

from mac_setup.command import CommandRunner
from mac_setup.config import Config
from mac_setup.profile import ManagedFile


@dataclass(frozen=True)
class Environment:
    """
    Process environment seen by the commands a task runs.

    Version managers and Homebrew normally ``eval`` their init output into the
    calling shell. Here each initializer returns a new Environment instead, so
    later steps of the same run see the manager without touching os.environ.
    """

    variables: Dict[str, str] = field(default_factory=dict)
    path_prefix: Tuple[str, ...] = ()

    def with_vars(self, **variables: str) -> "Environment":
        merged = dict(self.variables)
        merged.update(variables)
        return replace(self, variables=merged)

    def prepend_path(self, *dirs: str) -> "Environment":
        """Put ``dirs`` in front of PATH, most recent call first. Repeats are dropped."""
        new = tuple(str(d) for d in dirs)
        kept = tuple(d for d in self.path_prefix if d not in new)
        return replace(self, path_prefix=new + kept)

    def get(self, name: str, base: Optional[Mapping[str, str]] = None) -> Optional[str]:
        return self.to_dict(base).get(name)

    def to_dict(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        env = dict(os.environ if base is None else base)
        env.update(self.variables)
        if self.path_prefix:
            current = [p for p in env.get("PATH", "").split(os.pathsep) if p]
            prefix = list(self.path_prefix)
            env["PATH"] = os.pathsep.join(prefix + [p for p in current if p not in prefix])
        return env


@dataclass
class SetupContext:
    config: Config
    runner: CommandRunner
    env: Environment = field(default_factory=Environment)
    profiles: Dict[Path, ManagedFile] = field(default_factory=dict)

    def with_env(self, env: Environment) -> "SetupContext":
        return replace(self, env=env)

    def profile(self, path: Path) -> ManagedFile:
        """The run-wide handle for a shell profile, so it is backed up only once."""
        if path not in self.profiles:
            self.profiles[path] = ManagedFile(path, backup_on_write=True)
        return self.profiles[path]
