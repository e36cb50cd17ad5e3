import logging
import os
import sys
from pathlib import Path
from typing import Union

from rich.logging import RichHandler

from mac_setup.ui import console

LOGGER_NAME = "mac_setup"


def setup_logger(log_file: Union[str, Path], debug: bool = False) -> logging.Logger:
    """
    Configure the ``mac_setup`` logger.

    Everything goes to ``log_file`` at DEBUG level. The console already gets the
    styled step/success/warning lines, so a RichHandler is only attached when
    ``debug`` is set, to surface the command trace as well.
    """
    log_file = Path(log_file).expanduser()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()
    logger.addHandler(logging.NullHandler())

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
    except OSError as e:
        print(f"Warning: could not open log file {log_file}: {e}", file=sys.stderr)
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("[%(asctime)s] [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(file_handler)
        try:
            os.chmod(str(log_file), 0o600)
        except OSError as e:
            logger.warning(f"Could not set permissions on log file {log_file}: {e}")

    if debug:
        console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        console_handler.setLevel(logging.DEBUG)
        logger.addHandler(console_handler)

    return logger
