"""
Idempotent shell profile editing.

A profile is brought to its end state by an ordered list of edit rules. Each
rule checks for its own effect before changing anything, so applying the same
list twice leaves the text exactly as one application did.
"""

import datetime
import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from mac_setup.config import Config

logger = logging.getLogger("mac_setup")


@dataclass(frozen=True)
class DeleteLines:
    """Drop lines matching ``pattern``, except a line equal to ``keep``."""

    pattern: str
    keep: Optional[str] = None

    def apply(self, lines: List[str]) -> List[str]:
        regex = re.compile(self.pattern)
        return [l for l in lines if l == self.keep or not regex.search(l)]


@dataclass(frozen=True)
class InsertAfter:
    """Insert ``line`` after the first line matching ``anchor`` if it is missing."""

    anchor: str
    line: str

    def apply(self, lines: List[str]) -> List[str]:
        if self.line in lines:
            return lines
        regex = re.compile(self.anchor)
        for i, existing in enumerate(lines):
            if regex.search(existing):
                return lines[: i + 1] + [self.line] + lines[i + 1 :]
        return lines


@dataclass(frozen=True)
class ReplaceOrAppend:
    """Rewrite every line matching ``pattern`` as ``line``; append it if none match."""

    pattern: str
    line: str

    def apply(self, lines: List[str]) -> List[str]:
        regex = re.compile(self.pattern)
        if not any(regex.search(l) for l in lines):
            return lines + [self.line]
        return [self.line if regex.search(l) else l for l in lines]


@dataclass(frozen=True)
class AppendIfAbsent:
    """Append ``block`` unless ``marker`` already appears, separated by a blank line."""

    marker: str
    block: str

    def apply(self, lines: List[str]) -> List[str]:
        if any(self.marker in l for l in lines):
            return lines
        return lines + ([""] if lines else []) + self.block.splitlines()


EditRule = Union[DeleteLines, InsertAfter, ReplaceOrAppend, AppendIfAbsent]


def apply_edits(text: str, rules: Sequence[EditRule]) -> str:
    lines = text.splitlines()
    for rule in rules:
        lines = rule.apply(lines)
    return "\n".join(lines) + "\n" if lines else ""


# ----------------------------------------------------------------
# Rule sets
# ----------------------------------------------------------------
def brew_shellenv_line(config: Config) -> str:
    return f'eval "$({config.BREW_PREFIX}/bin/brew shellenv)"'


def zprofile_rules(config: Config) -> List[EditRule]:
    return [AppendIfAbsent("brew shellenv", brew_shellenv_line(config))]


def zshrc_rules(config: Config) -> List[EditRule]:
    """
    Rules that turn ~/.zshrc into the managed layout.

    Order matters: the Oh My Zsh theme and plugins are set first, then aliases
    and tool init lines, and the brew-installed zsh plugins and Powerlevel10k
    are sourced last so they load after Oh My Zsh.
    """
    theme = f'ZSH_THEME="{config.ZSH_THEME}"'
    share = config.BREW_PREFIX / "share"
    aliases = "\n".join(f'alias {name}="{value}"' for name, value in config.ALIASES.items())
    first_alias = next(iter(config.ALIASES), "g")
    return [
        DeleteLines(r"^ZSH_THEME=", keep=theme),
        InsertAfter(r"^export ZSH=", theme),
        ReplaceOrAppend(r"^plugins=", f"plugins=({' '.join(config.ZSH_PLUGINS)})"),
        AppendIfAbsent(f"alias {first_alias}=", f"# Custom aliases\n{aliases}"),
        AppendIfAbsent("brew shellenv", brew_shellenv_line(config)),
        AppendIfAbsent("zoxide init", 'eval "$(zoxide init zsh)"'),
        AppendIfAbsent(
            "# Homebrew Zsh plugins",
            "# Homebrew Zsh plugins\n"
            f"source {share}/zsh-autosuggestions/zsh-autosuggestions.zsh\n"
            f"source {share}/zsh-syntax-highlighting/zsh-syntax-highlighting.zsh",
        ),
        AppendIfAbsent(
            "powerlevel10k.zsh-theme",
            f"# Powerlevel10k theme\nsource {share}/powerlevel10k/powerlevel10k.zsh-theme",
        ),
    ]


# ----------------------------------------------------------------
# Profile files
# ----------------------------------------------------------------
class ManagedFile:
    """A text file edited through rules, backed up once before its first change."""

    def __init__(self, path: Union[str, Path], backup_on_write: bool = False):
        self.path = Path(path)
        self.backup_on_write = backup_on_write
        self.backup_path: Optional[Path] = None

    def read(self) -> str:
        try:
            return self.path.read_text()
        except FileNotFoundError:
            return ""

    def backup(self) -> Optional[Path]:
        """
        Copy the file to ``<name>.backup.<timestamp>``.

        Runs at most once per instance and never overwrites an existing
        backup; a clash gets a numeric suffix instead.
        """
        if self.backup_path is not None or not self.path.is_file():
            return self.backup_path
        timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
        candidate = self.path.with_name(f"{self.path.name}.backup.{timestamp}")
        n = 1
        while candidate.exists():
            candidate = self.path.with_name(f"{self.path.name}.backup.{timestamp}.{n}")
            n += 1
        shutil.copy2(self.path, candidate)
        logger.debug(f"Backed up {self.path} to {candidate}")
        self.backup_path = candidate
        return candidate

    def apply(self, rules: Sequence[EditRule]) -> bool:
        """Apply ``rules`` and write the file if anything changed. Returns True on change."""
        before = self.read()
        after = apply_edits(before, rules)
        if after == before:
            return False
        if self.backup_on_write:
            self.backup()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(after)
        logger.debug(f"Updated {self.path}")
        return True
