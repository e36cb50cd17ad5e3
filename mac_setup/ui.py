import logging
import shutil
from typing import Optional

import pyfiglet
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.style import Style
from rich.text import Text

from mac_setup import APP_NAME, APP_SUBTITLE, VERSION


# ----------------------------------------------------------------
# Nord-Themed Colors
# ----------------------------------------------------------------
class NordColors:
    """Nord color palette for consistent theming throughout the application."""

    SNOW_STORM_1 = "#D8DEE9"
    SNOW_STORM_2 = "#E5E9F0"
    FROST_1 = "#8FBCBB"
    FROST_2 = "#88C0D0"
    FROST_3 = "#81A1C1"
    FROST_4 = "#5E81AC"
    RED = "#BF616A"
    YELLOW = "#EBCB8B"
    GREEN = "#A3BE8C"


console: Console = Console(highlight=False)
logger = logging.getLogger("mac_setup")


# ----------------------------------------------------------------
# Console Helpers
# ----------------------------------------------------------------
def create_header() -> Panel:
    """
    Render the application banner with pyfiglet inside a Nord panel.

    The font is picked from the terminal width, and each line of the ASCII art
    cycles through the frost shades.
    """
    term_width, _ = shutil.get_terminal_size((80, 24))
    font = "slant" if term_width >= 80 else "small"
    try:
        ascii_art = pyfiglet.Figlet(font=font, width=max(term_width - 10, 40)).renderText(
            APP_NAME
        )
    except pyfiglet.FontNotFound:
        ascii_art = APP_NAME

    frost = [
        NordColors.FROST_1,
        NordColors.FROST_2,
        NordColors.FROST_3,
        NordColors.FROST_4,
    ]
    lines = [line for line in ascii_art.splitlines() if line.strip()]
    styled = Text("\n").join(
        Text(line, style=f"bold {frost[i % len(frost)]}") for i, line in enumerate(lines)
    )
    return Panel(
        styled,
        border_style=Style(color=NordColors.FROST_1),
        box=box.ROUNDED,
        padding=(1, 2),
        title=f"[bold {NordColors.SNOW_STORM_2}]v{VERSION}[/]",
        title_align="right",
        subtitle=f"[bold {NordColors.SNOW_STORM_1}]{APP_SUBTITLE}[/]",
        subtitle_align="center",
    )


def print_message(text: str, style: str = NordColors.FROST_2, prefix: str = "•") -> None:
    console.print(f"[{style}]{prefix} {escape(text)}[/{style}]")


def print_step(message: str) -> None:
    """Print a step description."""
    logger.info(message)
    print_message(message, NordColors.FROST_3, "▶")


def print_success(message: str) -> None:
    """Print a success message."""
    logger.info(message)
    print_message(message, NordColors.GREEN, "✓")


def print_warning(message: str) -> None:
    """Print a warning message."""
    logger.warning(message)
    print_message(message, NordColors.YELLOW, "⚠")


def print_error(message: str) -> None:
    """Print an error message."""
    logger.error(message)
    print_message(message, NordColors.RED, "✗")


def display_panel(
    message: str, style: str = NordColors.FROST_2, title: Optional[str] = None
) -> None:
    """
    Display a message in a styled panel.

    Args:
        message: The message to display
        style: The color style to use
        title: Optional panel title
    """
    panel = Panel(
        Text(message, style=f"bold {style}"),
        border_style=Style(color=style),
        padding=(1, 2),
        title=f"[bold {style}]{title}[/]" if title else None,
    )
    console.print(panel)
