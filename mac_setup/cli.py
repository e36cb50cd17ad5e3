import signal
import sys
from pathlib import Path
from typing import Any, Optional

import click
from rich.traceback import install as install_rich_traceback

from mac_setup import VERSION
from mac_setup.command import CommandRunner
from mac_setup.config import Config
from mac_setup.context import SetupContext
from mac_setup.guard import ensure_arm64
from mac_setup.log import setup_logger
from mac_setup.menu import dispatch, print_menu, read_choice
from mac_setup.ui import NordColors, console, create_header, print_error, print_message


# ----------------------------------------------------------------
# Signal Handling
# ----------------------------------------------------------------
def signal_handler(sig: int, frame: Any) -> None:
    sig_name = signal.Signals(sig).name
    print_message(f"Process interrupted by {sig_name}", NordColors.YELLOW, "⚠")
    sys.exit(128 + sig)


def install_signal_handlers() -> None:
    for sig in (signal.SIGINT, signal.SIGTERM, signal.SIGHUP):
        signal.signal(sig, signal_handler)


# ----------------------------------------------------------------
# Main Entry Point
# ----------------------------------------------------------------
@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=VERSION)
@click.option("--debug", is_flag=True, help="Echo the full command log to the console.")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write the run log (default: ~/Library/Logs/mac_setup.log).",
)
def main(debug: bool, log_file: Optional[Path]) -> None:
    """
    Provision a fresh Apple Silicon Mac from an interactive menu.

    Installs Homebrew, Oh My Zsh, Python/Node/Ruby, apps and Docker, applies
    macOS tweaks and creates an SSH key.
    """
    config = Config.from_env(LOG_FILE=log_file)
    ensure_arm64(config.REQUIRED_ARCH)

    install_rich_traceback(show_locals=False)
    install_signal_handlers()
    setup_logger(config.LOG_FILE, debug=debug)

    ctx = SetupContext(config=config, runner=CommandRunner())
    try:
        console.print(create_header())
        print_menu()
        dispatch(read_choice(), ctx)
    except KeyboardInterrupt:
        print_message("Process interrupted by user.", NordColors.YELLOW, "⚠")
        sys.exit(130)
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
