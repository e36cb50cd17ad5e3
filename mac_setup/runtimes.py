"""
Language runtime installers.

Python, Node and Ruby are each installed through a version manager from
Homebrew. They share one sequence:

1. brew-install the manager
2. initialize it for the rest of this run (returned as a new Environment)
3. initialize it in ~/.zshrc for future shells
4. pick the newest matching version, install it and make it the default
5. install the runtime's own package tooling on top

Failures along the way are warnings. Only a missing version stops the sequence
early, since there is nothing to set as default or build on.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from mac_setup import homebrew
from mac_setup.context import Environment, SetupContext
from mac_setup.profile import AppendIfAbsent
from mac_setup.ui import print_step, print_success, print_warning
from mac_setup.versions import latest_version


class RuntimeInstaller(ABC):
    """One version manager plus the runtime it installs."""

    name: str = ""
    packages: Sequence[str] = ()
    init_marker: str = ""
    init_block: str = ""

    @abstractmethod
    def version_pattern(self, ctx: SetupContext) -> str:
        ...

    @abstractmethod
    def activate(self, ctx: SetupContext) -> Environment:
        ...

    @abstractmethod
    def list_command(self, ctx: SetupContext) -> List[str]:
        ...

    @abstractmethod
    def install_command(self, ctx: SetupContext, version: str) -> List[str]:
        ...

    @abstractmethod
    def global_command(self, ctx: SetupContext, version: str) -> List[str]:
        ...

    def aux_commands(self, ctx: SetupContext, version: str) -> List[Tuple[str, List[str]]]:
        return []

    def selected(self, ctx: SetupContext, version: str) -> Environment:
        """Environment once ``version`` is the active one."""
        return ctx.env

    def available_versions(self, ctx: SetupContext) -> List[str]:
        result = ctx.runner.try_run(
            self.list_command(ctx), warning=f"Could not list {self.name} versions", env=ctx.env
        )
        return result.stdout.splitlines() if result is not None else []

    def find_latest(self, ctx: SetupContext) -> Optional[str]:
        return latest_version(self.available_versions(ctx), self.version_pattern(ctx))

    def install(self, ctx: SetupContext) -> SetupContext:
        homebrew.ensure_packages(ctx, self.packages)

        ctx = ctx.with_env(self.activate(ctx))
        ctx.profile(ctx.config.zshrc).apply(
            [AppendIfAbsent(self.init_marker, self.init_block)]
        )

        print_step(f"Finding and installing latest {self.name} version...")
        version = self.find_latest(ctx)
        if version is None:
            print_warning(f"Could not determine latest {self.name} version")
            return ctx

        ctx.runner.try_run(
            self.install_command(ctx, version),
            warning=f"{self.name} installation had issues",
            env=ctx.env,
            capture_output=False,
        )
        ctx.runner.try_run(
            self.global_command(ctx, version),
            warning=f"Could not set global {self.name} version",
            env=ctx.env,
        )
        ctx = ctx.with_env(self.selected(ctx, version))

        for label, cmd in self.aux_commands(ctx, version):
            ctx.runner.try_run(
                cmd,
                warning=f"{label} had issues",
                env=ctx.env,
                capture_output=False,
            )
        print_success(f"{self.name} {version} installed globally")
        return ctx


class PythonInstaller(RuntimeInstaller):
    name = "Python"
    packages = ("pyenv",)
    init_marker = "pyenv init"
    init_block = (
        "# Pyenv\n"
        'export PYENV_ROOT="$HOME/.pyenv"\n'
        'export PATH="$PYENV_ROOT/bin:$PATH"\n'
        'eval "$(pyenv init --path)"\n'
        'eval "$(pyenv init -)"'
    )

    def version_pattern(self, ctx: SetupContext) -> str:
        return ctx.config.PYTHON_VERSION_PATTERN

    def activate(self, ctx: SetupContext) -> Environment:
        root = ctx.config.HOME / ".pyenv"
        return ctx.env.with_vars(PYENV_ROOT=str(root), PYENV_SHELL="zsh").prepend_path(
            str(root / "shims"), str(root / "bin")
        )

    def list_command(self, ctx: SetupContext) -> List[str]:
        return ["pyenv", "install", "--list"]

    def install_command(self, ctx: SetupContext, version: str) -> List[str]:
        return ["pyenv", "install", "-s", version]

    def global_command(self, ctx: SetupContext, version: str) -> List[str]:
        return ["pyenv", "global", version]

    def aux_commands(self, ctx: SetupContext, version: str) -> List[Tuple[str, List[str]]]:
        return [("pip upgrade", ["pyenv", "exec", "python", "-m", "pip", "install", "--upgrade", "pip"])]


class NodeInstaller(RuntimeInstaller):
    name = "Node"
    packages = ("nvm",)
    init_marker = "NVM_DIR"
    init_block = (
        "# NVM\n"
        'export NVM_DIR="$HOME/.nvm"\n'
        '[ -s "/opt/homebrew/opt/nvm/nvm.sh" ] && \\. "/opt/homebrew/opt/nvm/nvm.sh"\n'
        '[ -s "/opt/homebrew/opt/nvm/etc/bash_completion.d/nvm" ] && '
        '\\. "/opt/homebrew/opt/nvm/etc/bash_completion.d/nvm"'
    )

    @staticmethod
    def nvm_dir(ctx: SetupContext) -> Path:
        return ctx.config.HOME / ".nvm"

    def nvm(self, ctx: SetupContext, *args: str) -> List[str]:
        # nvm is a shell function, so every call sources it first.
        nvm_sh = ctx.config.BREW_PREFIX / "opt" / "nvm" / "nvm.sh"
        return ["bash", "-c", f'. "{nvm_sh}" && nvm "$@"', "nvm", *args]

    def version_pattern(self, ctx: SetupContext) -> str:
        return ctx.config.NODE_VERSION_PATTERN

    def activate(self, ctx: SetupContext) -> Environment:
        nvm_dir = self.nvm_dir(ctx)
        nvm_dir.mkdir(parents=True, exist_ok=True)
        return ctx.env.with_vars(NVM_DIR=str(nvm_dir))

    def list_command(self, ctx: SetupContext) -> List[str]:
        return self.nvm(ctx, "ls-remote", "--lts", "--no-colors")

    def install_command(self, ctx: SetupContext, version: str) -> List[str]:
        return self.nvm(ctx, "install", version)

    def global_command(self, ctx: SetupContext, version: str) -> List[str]:
        return self.nvm(ctx, "alias", "default", version)

    def selected(self, ctx: SetupContext, version: str) -> Environment:
        bin_dir = self.nvm_dir(ctx) / "versions" / "node" / f"v{version}" / "bin"
        return ctx.env.prepend_path(str(bin_dir))

    def aux_commands(self, ctx: SetupContext, version: str) -> List[Tuple[str, List[str]]]:
        return [("Yarn installation", ["npm", "install", "-g", "yarn"])]


class RubyInstaller(RuntimeInstaller):
    name = "Ruby"
    packages = ("rbenv", "ruby-build")
    init_marker = "rbenv init"
    init_block = 'eval "$(rbenv init - zsh)"'

    def version_pattern(self, ctx: SetupContext) -> str:
        return ctx.config.RUBY_VERSION_PATTERN

    def activate(self, ctx: SetupContext) -> Environment:
        root = ctx.config.HOME / ".rbenv"
        return ctx.env.with_vars(RBENV_ROOT=str(root), RBENV_SHELL="zsh").prepend_path(
            str(root / "shims")
        )

    def list_command(self, ctx: SetupContext) -> List[str]:
        return ["rbenv", "install", "-l"]

    def install_command(self, ctx: SetupContext, version: str) -> List[str]:
        return ["rbenv", "install", "-s", version]

    def global_command(self, ctx: SetupContext, version: str) -> List[str]:
        return ["rbenv", "global", version]

    def aux_commands(self, ctx: SetupContext, version: str) -> List[Tuple[str, List[str]]]:
        return [
            ("RubyGems update", ["rbenv", "exec", "gem", "update", "--system"]),
            ("Bundler installation", ["rbenv", "exec", "gem", "install", "bundler"]),
        ]


def install_python(ctx: SetupContext) -> SetupContext:
    print_step("Installing pyenv + latest Python...")
    return PythonInstaller().install(ctx)


def install_node(ctx: SetupContext) -> SetupContext:
    print_step("Installing NVM + Node LTS...")
    return NodeInstaller().install(ctx)


def install_ruby(ctx: SetupContext) -> SetupContext:
    print_step("Installing rbenv + latest Ruby...")
    return RubyInstaller().install(ctx)
