import sys
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from rich.panel import Panel
from rich.prompt import Confirm
from rich.text import Text

from mac_setup import homebrew, macos, runtimes, ssh, tasks
from mac_setup.context import SetupContext
from mac_setup.privilege import privilege_session
from mac_setup.ui import NordColors, console, print_error, print_success, print_warning

Task = Callable[[SetupContext], Optional[SetupContext]]


@dataclass(frozen=True)
class MenuOption:
    key: str
    label: str
    tasks: Tuple[str, ...] = ()
    elevate: bool = False


EXIT_KEY = "11"

MENU_OPTIONS: Dict[str, MenuOption] = {
    option.key: option
    for option in [
        MenuOption(
            "1",
            "🚀 Full setup (recommended)",
            (
                "xcode", "brew", "zsh", "dev_tools", "python", "node", "ruby",
                "docker", "apps", "macos_tweaks", "cleanup", "ssh",
            ),
            elevate=True,
        ),
        MenuOption("2", "🔧 Core system only (Xcode + Brew + Zsh)", ("xcode", "brew", "zsh"), elevate=True),
        MenuOption("3", "🛠️  Dev tools only", ("brew", "dev_tools")),
        MenuOption("4", "🐍 Python only", ("brew", "python")),
        MenuOption("5", "📦 Node only", ("brew", "node")),
        MenuOption("6", "💎 Ruby only", ("brew", "ruby")),
        MenuOption("7", "📱 Apps only", ("brew", "apps")),
        MenuOption("8", "🐳 Docker only", ("brew", "docker")),
        MenuOption("9", "⚙️  Apply macOS Tweaks", ("macos_tweaks",)),
        MenuOption("10", "🧹 Cleanup Homebrew", ("cleanup",)),
        MenuOption(EXIT_KEY, "❌ Exit"),
    ]
}


def ssh_prompt(ctx: SetupContext) -> SetupContext:
    """Ask the yes/no questions, then hand the answers to the key generator."""
    console.print()
    generate = Confirm.ask(f"[bold {NordColors.FROST_2}]Generate SSH key now?[/]", default=False)
    show_existing = False
    if generate and ctx.config.ssh_key_path.exists():
        show_existing = Confirm.ask(f"[bold {NordColors.FROST_2}]View public key?[/]", default=False)
    return ssh.generate_ssh_key(ctx, generate=generate, show_existing=show_existing)


def default_registry() -> Dict[str, Task]:
    return {
        "xcode": tasks.install_xcode,
        "brew": homebrew.install_brew,
        "zsh": tasks.setup_zsh,
        "dev_tools": tasks.install_dev_tools,
        "python": runtimes.install_python,
        "node": runtimes.install_node,
        "ruby": runtimes.install_ruby,
        "docker": tasks.install_docker,
        "apps": tasks.install_apps,
        "macos_tweaks": macos.apply_macos_tweaks,
        "cleanup": homebrew.cleanup,
        "ssh": ssh_prompt,
    }


def print_menu() -> None:
    lines = [f"{option.key:>2}) {option.label}" for option in MENU_OPTIONS.values()]
    console.print(
        Panel.fit(
            Text("\n".join(lines), style=NordColors.SNOW_STORM_1),
            title=f"[bold {NordColors.FROST_2}]MACBOOK SETUP - INTERACTIVE[/]",
            border_style=NordColors.FROST_3,
            padding=(1, 2),
        )
    )


def read_choice() -> str:
    return console.input(
        f"[bold {NordColors.FROST_2}]Select an option (1-{len(MENU_OPTIONS)}): [/]"
    ).strip()


def resolve(choice: str) -> MenuOption:
    """Look up a menu selection, exiting with status 1 if it is not one."""
    option = MENU_OPTIONS.get(choice.strip())
    if option is None:
        print_error("Invalid option")
        sys.exit(1)
    return option


def run_tasks(
    ctx: SetupContext, names: List[str], registry: Dict[str, Task]
) -> SetupContext:
    for name in names:
        ctx = registry[name](ctx) or ctx
    return ctx


def dispatch(
    choice: str,
    ctx: SetupContext,
    registry: Optional[Dict[str, Task]] = None,
    session=privilege_session,
) -> SetupContext:
    """
    Run the tasks behind a menu selection, in menu order.

    The selection is validated before anything runs. Options that need sudo
    run their tasks inside a privilege session, which is torn down as soon as
    the last task returns.
    """
    option = resolve(choice)
    if option.key == EXIT_KEY:
        console.print("Goodbye! 👋")
        sys.exit(0)

    registry = registry or default_registry()
    if option.elevate:
        scope = session(ctx.runner, ctx.config.SUDO_REFRESH_INTERVAL)
    else:
        scope = nullcontext()
    with scope:
        ctx = run_tasks(ctx, list(option.tasks), registry)

    console.print()
    print_success("✅ Setup finished!")
    print_warning("🔄 Please restart your terminal (or run 'source ~/.zshrc') to activate all changes.")
    console.print()
    return ctx
