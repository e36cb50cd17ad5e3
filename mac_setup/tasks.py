import sys

from mac_setup import homebrew
from mac_setup.context import SetupContext
from mac_setup.profile import zshrc_rules
from mac_setup.ui import print_step, print_success, print_warning


# ----------------------------------------------------------------
# Xcode Command Line Tools
# ----------------------------------------------------------------
def install_xcode(ctx: SetupContext) -> SetupContext:
    print_step("Checking Xcode Command Line Tools...")
    if ctx.runner.succeeds(["xcode-select", "-p"], env=ctx.env):
        print_success("Xcode CLI already installed")
        return ctx

    print_step("Installing Xcode Command Line Tools...")
    ctx.runner.try_run(
        ["xcode-select", "--install"],
        warning="Could not start the Xcode installer",
        env=ctx.env,
        capture_output=False,
    )
    print_warning("Please complete the Xcode installation in the dialog, then re-run this script.")
    sys.exit(0)


# ----------------------------------------------------------------
# Dev Essentials + Git Config
# ----------------------------------------------------------------
def configure_git(ctx: SetupContext) -> None:
    print_step("Configuring Git...")
    settings = {}
    if ctx.config.GIT_USER_NAME:
        settings["user.name"] = ctx.config.GIT_USER_NAME
    if ctx.config.GIT_USER_EMAIL:
        settings["user.email"] = ctx.config.GIT_USER_EMAIL
    settings.update(ctx.config.GIT_SETTINGS)
    for key, value in settings.items():
        ctx.runner.try_run(["git", "config", "--global", key, value], env=ctx.env)


def install_dev_tools(ctx: SetupContext) -> SetupContext:
    print_step("Installing Dev Essentials...")
    homebrew.ensure_packages(ctx, ctx.config.DEV_TOOLS)

    fzf_install = ctx.config.BREW_PREFIX / "opt" / "fzf" / "install"
    if fzf_install.is_file():
        ctx.runner.try_run([str(fzf_install), "--all", "--no-bash", "--no-fish"], env=ctx.env)

    configure_git(ctx)
    print_success("Dev tools & Git configured")
    return ctx


# ----------------------------------------------------------------
# Oh My Zsh + Plugins + Powerlevel10k
# ----------------------------------------------------------------
def install_oh_my_zsh(ctx: SetupContext) -> bool:
    if ctx.config.oh_my_zsh_dir.is_dir():
        print_success("Oh My Zsh already installed")
        return True

    print_step("Installing Oh My Zsh...")
    script = ctx.runner.try_run(
        ["curl", "-fsSL", ctx.config.OH_MY_ZSH_INSTALL_URL],
        warning="Oh My Zsh installation had issues",
        env=ctx.env,
    )
    if script is None:
        return False
    env = ctx.env.with_vars(RUNZSH="no", CHSH="no", KEEP_ZSHRC="yes")
    done = ctx.runner.try_run(
        ["sh", "-c", script.stdout],
        warning="Oh My Zsh installation had issues",
        env=env,
        capture_output=False,
        label="Oh My Zsh install.sh",
    )
    return done is not None


def configure_zshrc(ctx: SetupContext) -> None:
    ctx.profile(ctx.config.zshrc).apply(zshrc_rules(ctx.config))
    if not (ctx.config.HOME / ".p10k.zsh").exists():
        print_warning("Run 'p10k configure' after restart to set up Powerlevel10k")


def setup_zsh(ctx: SetupContext) -> SetupContext:
    print_step("Setting up Zsh environment...")
    ctx.profile(ctx.config.zshrc).backup()

    if not install_oh_my_zsh(ctx):
        return ctx

    print_step("Installing Zsh plugins + Powerlevel10k...")
    homebrew.ensure_packages(ctx, ctx.config.ZSH_PACKAGES)

    configure_zshrc(ctx)
    print_success("Zsh + Powerlevel10k configured")
    return ctx


# ----------------------------------------------------------------
# Docker Desktop + Apps
# ----------------------------------------------------------------
def install_docker(ctx: SetupContext) -> SetupContext:
    print_step("Installing Docker Desktop...")
    report = homebrew.ensure_packages(ctx, [ctx.config.DOCKER_CASK], cask=True)
    if report.skipped:
        print_success("Docker Desktop already installed")
    elif report.installed:
        print_success("Docker Desktop installed")
        print_warning("You'll need to open Docker Desktop manually to complete setup")
    return ctx


def install_apps(ctx: SetupContext) -> SetupContext:
    print_step("Installing Applications...")
    homebrew.ensure_packages(ctx, ctx.config.APPS, cask=True, verbose=True)
    print_success("Apps installed")
    return ctx
