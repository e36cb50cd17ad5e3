import pytest

from mac_setup import tasks


def test_xcode_present_continues(ctx, runner):
    assert tasks.install_xcode(ctx) is ctx
    assert not runner.ran("xcode-select", "--install")


def test_xcode_missing_starts_installer_and_exits(ctx, runner):
    runner.respond("xcode-select", "-p", rc=2)

    with pytest.raises(SystemExit) as exc:
        tasks.install_xcode(ctx)

    assert exc.value.code == 0
    assert runner.ran("xcode-select", "--install")


def test_dev_tools_install_and_git_identity(ctx, runner, config):
    runner.respond("brew", "list", "ripgrep", rc=1)
    fzf_install = config.BREW_PREFIX / "opt" / "fzf" / "install"
    fzf_install.parent.mkdir(parents=True)
    fzf_install.write_text("")

    tasks.install_dev_tools(ctx)

    assert runner.ran("brew", "install", "ripgrep")
    assert not runner.ran("brew", "install", "git")
    assert [str(fzf_install), "--all", "--no-bash", "--no-fish"] in runner.commands
    assert ["git", "config", "--global", "user.name", "Test User"] in runner.commands
    assert ["git", "config", "--global", "user.email", "test@example.com"] in runner.commands
    assert ["git", "config", "--global", "init.defaultBranch", "main"] in runner.commands


def test_git_identity_skipped_when_unset(ctx, runner, config):
    config.GIT_USER_NAME = None
    config.GIT_USER_EMAIL = None

    tasks.configure_git(ctx)

    assert not runner.ran("user.name")
    assert not runner.ran("user.email")
    assert runner.ran("pull.rebase", "true")


def test_setup_zsh_installs_framework_and_profile(ctx, runner, config):
    runner.respond("curl", "-fsSL", config.OH_MY_ZSH_INSTALL_URL, stdout="echo omz")
    config.zshrc.write_text('export ZSH="$HOME/.oh-my-zsh"\nplugins=(git)\n')

    tasks.setup_zsh(ctx)

    omz = runner.calls_with("sh", "-c", "echo omz")[0]
    assert omz.env.variables == {"RUNZSH": "no", "CHSH": "no", "KEEP_ZSHRC": "yes"}
    assert omz.label == "Oh My Zsh install.sh"
    text = config.zshrc.read_text()
    assert 'ZSH_THEME="robbyrussell"' in text
    assert "powerlevel10k.zsh-theme" in text
    assert len(list(config.HOME.glob(".zshrc.backup.*"))) == 1


def test_setup_zsh_skips_existing_framework(ctx, runner, config):
    config.oh_my_zsh_dir.mkdir()
    tasks.setup_zsh(ctx)
    assert not runner.ran("curl")
    assert config.zshrc.exists()


def test_setup_zsh_stops_when_framework_fails(ctx, runner, config):
    runner.respond("curl", "-fsSL", config.OH_MY_ZSH_INSTALL_URL, rc=22)

    tasks.setup_zsh(ctx)

    assert not runner.ran("brew", "list", "powerlevel10k")
    assert not config.zshrc.exists()


def test_docker_cask(ctx, runner):
    runner.respond("brew", "list", "--cask", "docker", rc=1)
    tasks.install_docker(ctx)
    assert runner.ran("brew", "install", "--cask", "docker")


def test_apps_continue_past_failures(ctx, runner, config):
    for app in config.APPS:
        runner.respond("brew", "list", "--cask", app, rc=1)
    runner.respond("brew", "install", "--cask", "notion", rc=1)

    tasks.install_apps(ctx)

    installs = [argv[-1] for argv in runner.commands if argv[:3] == ["brew", "install", "--cask"]]
    assert installs == config.APPS
