import getpass
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# (domain, key, type flag, value) as passed to `defaults write`
DefaultsWrite = Tuple[str, str, str, str]


@dataclass
class Config:
    HOME: Path = field(default_factory=Path.home)
    REQUIRED_ARCH: str = "arm64"
    LOG_FILE: Optional[Path] = None

    BREW_PREFIX: Path = Path("/opt/homebrew")
    BREW_INSTALL_URL: str = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
    OH_MY_ZSH_INSTALL_URL: str = (
        "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
    )

    SUDO_REFRESH_INTERVAL: float = 60.0

    DEV_TOOLS: List[str] = field(default_factory=lambda: [
        "git", "wget", "jq", "tree", "htop", "ripgrep", "fd",
        "neovim", "tmux", "fzf", "zoxide",
    ])
    ZSH_PACKAGES: List[str] = field(default_factory=lambda: [
        "zsh-autosuggestions", "zsh-syntax-highlighting", "powerlevel10k",
    ])
    APPS: List[str] = field(default_factory=lambda: [
        "google-chrome", "brave-browser", "visual-studio-code", "iterm2",
        "raycast", "notion", "rectangle", "spotify",
    ])
    DOCKER_CASK: str = "docker"

    ZSH_THEME: str = "robbyrussell"
    ZSH_PLUGINS: List[str] = field(default_factory=lambda: [
        "git", "docker", "kubectl", "fzf", "zoxide", "extract",
    ])
    ALIASES: Dict[str, str] = field(default_factory=lambda: {
        "g": "git",
        "ll": "ls -lah",
        "..": "cd ..",
        "...": "cd ../..",
    })

    GIT_USER_NAME: Optional[str] = None
    GIT_USER_EMAIL: Optional[str] = None
    GIT_SETTINGS: Dict[str, str] = field(default_factory=lambda: {
        "init.defaultBranch": "main",
        "pull.rebase": "true",
        "rerere.enabled": "true",
        "core.editor": "nano",
    })

    PYTHON_VERSION_PATTERN: str = r"^\s*(3\.\d+\.\d+)\s*$"
    RUBY_VERSION_PATTERN: str = r"^\s*(\d+\.\d+\.\d+)\s*$"
    NODE_VERSION_PATTERN: str = r"^\s*(?:->)?\s*v(\d+\.\d+\.\d+)(?:\s+\*)?\s+\(.*LTS"

    MACOS_DEFAULTS: List[DefaultsWrite] = field(default_factory=lambda: [
        # Finder
        ("com.apple.finder", "AppleShowAllFiles", "bool", "true"),
        ("com.apple.finder", "ShowPathbar", "bool", "true"),
        ("com.apple.finder", "ShowStatusBar", "bool", "true"),
        ("com.apple.finder", "_FXShowPosixPathInTitle", "bool", "true"),
        # Trackpad: three-finger drag
        ("com.apple.AppleMultitouchTrackpad", "TrackpadThreeFingerDrag", "bool", "true"),
        ("com.apple.driver.AppleBluetoothMultitouch.trackpad", "TrackpadThreeFingerDrag", "bool", "true"),
        ("com.apple.AppleMultitouchTrackpad", "Dragging", "bool", "false"),
        # Keyboard repeat
        ("NSGlobalDomain", "KeyRepeat", "int", "2"),
        ("NSGlobalDomain", "InitialKeyRepeat", "int", "15"),
        # Menu bar
        ("com.apple.menuextra.battery", "ShowPercent", "bool", "true"),
        # Text input
        ("NSGlobalDomain", "NSAutomaticCapitalizationEnabled", "bool", "false"),
        ("NSGlobalDomain", "NSAutomaticPeriodSubstitutionEnabled", "bool", "false"),
    ])
    RESTART_PROCESSES: List[str] = field(default_factory=lambda: [
        "Finder", "Dock", "SystemUIServer",
    ])

    SSH_KEY_TYPE: str = "ed25519"

    def __post_init__(self) -> None:
        self.HOME = Path(self.HOME)
        if self.LOG_FILE is None:
            self.LOG_FILE = self.HOME / "Library" / "Logs" / "mac_setup.log"

    @property
    def zshrc(self) -> Path:
        return self.HOME / ".zshrc"

    @property
    def zprofile(self) -> Path:
        return self.HOME / ".zprofile"

    @property
    def oh_my_zsh_dir(self) -> Path:
        return self.HOME / ".oh-my-zsh"

    @property
    def ssh_dir(self) -> Path:
        return self.HOME / ".ssh"

    @property
    def ssh_key_path(self) -> Path:
        return self.ssh_dir / f"id_{self.SSH_KEY_TYPE}"

    @property
    def ssh_config_path(self) -> Path:
        return self.ssh_dir / "config"

    @property
    def ssh_key_comment(self) -> str:
        return self.GIT_USER_EMAIL or f"{getpass.getuser()}@{os.uname().nodename}"

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides: Any) -> "Config":
        """Build a config, letting MAC_SETUP_* variables override the defaults."""
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        if environ.get("MAC_SETUP_HOME"):
            values["HOME"] = Path(environ["MAC_SETUP_HOME"]).expanduser()
        if environ.get("MAC_SETUP_GIT_NAME"):
            values["GIT_USER_NAME"] = environ["MAC_SETUP_GIT_NAME"]
        if environ.get("MAC_SETUP_GIT_EMAIL"):
            values["GIT_USER_EMAIL"] = environ["MAC_SETUP_GIT_EMAIL"]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
