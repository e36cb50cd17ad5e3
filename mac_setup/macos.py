from mac_setup.context import SetupContext
from mac_setup.ui import print_step, print_success


def defaults_command(domain: str, key: str, kind: str, value: str) -> list:
    return ["defaults", "write", domain, key, f"-{kind}", value]


def apply_macos_tweaks(ctx: SetupContext) -> SetupContext:
    """Write the preference overrides, then restart the UI processes that read them."""
    print_step("Applying macOS tweaks...")
    for domain, key, kind, value in ctx.config.MACOS_DEFAULTS:
        ctx.runner.try_run(
            defaults_command(domain, key, kind, value),
            warning=f"Could not set {domain} {key}",
            env=ctx.env,
        )

    # killall fails for processes that are not running; ignored.
    for process in ctx.config.RESTART_PROCESSES:
        ctx.runner.try_run(["killall", process], env=ctx.env)

    print_success("macOS tweaks applied")
    return ctx
