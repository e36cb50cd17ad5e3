from dataclasses import dataclass, field
from typing import Iterable, List

from mac_setup.context import Environment, SetupContext
from mac_setup.profile import zprofile_rules
from mac_setup.ui import print_step, print_success


@dataclass
class InstallReport:
    installed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def _cask_flag(cask: bool) -> List[str]:
    return ["--cask"] if cask else []


def is_installed(ctx: SetupContext, package: str, cask: bool = False) -> bool:
    return ctx.runner.succeeds(["brew", "list", *_cask_flag(cask), package], env=ctx.env)


def ensure_packages(
    ctx: SetupContext, packages: Iterable[str], cask: bool = False, verbose: bool = False
) -> InstallReport:
    """
    Install each package that `brew list` does not already know about.

    Packages are handled in the order given. A failed install is reported as a
    warning and the loop moves on; this never raises for a single package.
    """
    report = InstallReport()
    for package in packages:
        if is_installed(ctx, package, cask=cask):
            report.skipped.append(package)
            continue
        if verbose:
            print_step(f"Installing {package}...")
        result = ctx.runner.try_run(
            ["brew", "install", *_cask_flag(cask), package],
            warning=f"Failed to install {package}",
            env=ctx.env,
            capture_output=False,
        )
        if result is None:
            report.failed.append(package)
        else:
            report.installed.append(package)
    return report


def shellenv(ctx: SetupContext) -> Environment:
    """What `brew shellenv` would export, as an Environment for this run."""
    prefix = ctx.config.BREW_PREFIX
    return ctx.env.with_vars(
        HOMEBREW_PREFIX=str(prefix),
        HOMEBREW_CELLAR=str(prefix / "Cellar"),
        HOMEBREW_REPOSITORY=str(prefix),
    ).prepend_path(str(prefix / "bin"), str(prefix / "sbin"))


def install_brew(ctx: SetupContext) -> SetupContext:
    """Install Homebrew if needed, wire it into this run and ~/.zprofile, then update."""
    print_step("Checking Homebrew...")
    brew_bin = ctx.config.BREW_PREFIX / "bin" / "brew"
    if ctx.runner.which("brew", env=ctx.env) is None:
        print_step("Installing Homebrew...")
        script = ctx.runner.try_run(
            ["curl", "-fsSL", ctx.config.BREW_INSTALL_URL],
            warning="Could not download the Homebrew installer",
            env=ctx.env,
        )
        if script is not None:
            ctx.runner.try_run(
                ["/bin/bash", "-c", script.stdout],
                warning="Homebrew installation had issues",
                env=ctx.env,
                capture_output=False,
                label="Homebrew install.sh",
            )
        if brew_bin.exists():
            ctx = ctx.with_env(shellenv(ctx))
        ctx.profile(ctx.config.zprofile).apply(zprofile_rules(ctx.config))
        print_success("Homebrew installed")
    else:
        print_success("Homebrew already installed")
        if brew_bin.exists():
            ctx = ctx.with_env(shellenv(ctx))

    print_step("Updating Homebrew...")
    ctx.runner.try_run(["brew", "update"], warning="Brew update had issues (non-fatal)", env=ctx.env)
    ctx.runner.try_run(["brew", "upgrade"], warning="Brew upgrade had issues (non-fatal)", env=ctx.env)
    return ctx


def cleanup(ctx: SetupContext) -> SetupContext:
    print_step("Cleaning up...")
    ctx.runner.try_run(["brew", "cleanup"], env=ctx.env)
    print_success("Cleanup complete")
    return ctx
