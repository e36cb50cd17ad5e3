import platform
import sys

from mac_setup.ui import print_error


def ensure_arm64(required: str = "arm64") -> None:
    """Exit with status 1 unless running on Apple Silicon."""
    if platform.machine() != required:
        print_error("This script is for Apple Silicon only.")
        sys.exit(1)
