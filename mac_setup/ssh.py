import os
import re
from typing import Dict, Optional

from mac_setup.context import SetupContext
from mac_setup.profile import AppendIfAbsent, ManagedFile
from mac_setup.ui import NordColors, console, display_panel, print_step, print_success, print_warning

AGENT_VAR_RE = re.compile(r"(SSH_AUTH_SOCK|SSH_AGENT_PID)=([^;]+);")


def parse_agent_output(output: str) -> Dict[str, str]:
    """Pull SSH_AUTH_SOCK / SSH_AGENT_PID out of `ssh-agent -s` output."""
    return dict(AGENT_VAR_RE.findall(output))


def client_config_stanza(ctx: SetupContext) -> str:
    return (
        "Host *\n"
        "  AddKeysToAgent yes\n"
        "  UseKeychain yes\n"
        f"  IdentityFile ~/.ssh/{ctx.config.ssh_key_path.name}"
    )


def read_public_key(ctx: SetupContext) -> Optional[str]:
    pub = ctx.config.ssh_key_path.with_suffix(".pub")
    try:
        return pub.read_text().strip()
    except FileNotFoundError:
        return None


def copy_to_clipboard(ctx: SetupContext, text: str) -> bool:
    return ctx.runner.try_run(["pbcopy"], env=ctx.env, input_text=text) is not None


def show_public_key(ctx: SetupContext) -> None:
    key = read_public_key(ctx)
    if key is None:
        print_warning(f"Public key not found: {ctx.config.ssh_key_path}.pub")
        return
    console.print(f"[{NordColors.SNOW_STORM_1}]{key}[/]")
    if copy_to_clipboard(ctx, key):
        print_success("Public key copied to clipboard")


def add_to_agent(ctx: SetupContext) -> SetupContext:
    """Register the key with an ssh-agent, starting one for this run if none is reachable."""
    if not ctx.env.get("SSH_AUTH_SOCK"):
        started = ctx.runner.try_run(["ssh-agent", "-s"], env=ctx.env)
        if started is not None:
            ctx = ctx.with_env(ctx.env.with_vars(**parse_agent_output(started.stdout)))
    ctx.runner.try_run(["ssh-add", str(ctx.config.ssh_key_path)], env=ctx.env)
    return ctx


def generate_ssh_key(ctx: SetupContext, generate: bool, show_existing: bool = False) -> SetupContext:
    """
    Create ~/.ssh/id_ed25519 unless it already exists.

    Args:
        ctx: Setup context
        generate: The user's answer to "Generate SSH key now?"
        show_existing: Whether to print and copy an existing public key

    Returns:
        The context, with ssh-agent variables when an agent was started
    """
    if not generate:
        print_warning("SSH key generation skipped")
        return ctx

    key_path = ctx.config.ssh_key_path
    if key_path.exists():
        print_warning(f"SSH key already exists: {key_path}")
        if show_existing:
            show_public_key(ctx)
        return ctx

    print_step("Generating SSH key...")
    ssh_dir = ctx.config.ssh_dir
    ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    os.chmod(ssh_dir, 0o700)

    result = ctx.runner.try_run(
        [
            "ssh-keygen",
            "-t", ctx.config.SSH_KEY_TYPE,
            "-C", ctx.config.ssh_key_comment,
            "-f", str(key_path),
            "-N", "",
        ],
        warning="SSH key generation failed",
        env=ctx.env,
        capture_output=False,
    )
    if result is None:
        return ctx

    ctx = add_to_agent(ctx)

    config_path = ctx.config.ssh_config_path
    if ManagedFile(config_path).apply([AppendIfAbsent(key_path.name, client_config_stanza(ctx))]):
        os.chmod(config_path, 0o600)

    key = read_public_key(ctx)
    if key is not None:
        if copy_to_clipboard(ctx, key):
            print_success("SSH key generated and copied to clipboard")
        print_warning("Add this key to GitHub/GitLab:")
        display_panel(key, NordColors.SNOW_STORM_1, title="Public key")
    return ctx
