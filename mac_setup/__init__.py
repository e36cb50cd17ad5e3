"""
macOS Setup
--------------------------------------------------

Interactive provisioning for a fresh Apple Silicon Mac: Homebrew, Oh My Zsh,
language runtimes, applications, macOS preference tweaks and an SSH key, all
driven from a numbered menu.
"""

import logging

VERSION = "1.0.0"
APP_NAME = "Mac Setup"
APP_SUBTITLE = "Apple Silicon Provisioning"

logging.getLogger("mac_setup").addHandler(logging.NullHandler())
