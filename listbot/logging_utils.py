"""Console logging for listbot.

Every line starts with a bracketed tag naming its kind, so lines stay
readable with LISTBOT_NO_COLOR set. With colors on, the whole line is tinted
and dropped callbacks show up in red.
"""

import os
from enum import Enum


class Color(Enum):
    """Escape sequences for the four kinds of log line listbot prints."""

    RED = "\033[91m"       # log_error: dropped callbacks, transport failures
    GREEN = "\033[92m"     # log_success: keyboard edited
    CYAN = "\033[96m"      # log_info: startup, list created
    GRAY = "\033[90m"      # log_debug: per-event detail

    BOLD = "\033[1m"
    RESET = "\033[0m"


LOG_TAG_INFO = "[i]"
LOG_TAG_SUCCESS = "[✓]"
LOG_TAG_ERROR = "[!]"
LOG_TAG_DEBUG = "[.]"


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Tint ``text`` for the terminal; returns it untouched when LISTBOT_NO_COLOR is set."""
    if os.getenv("LISTBOT_NO_COLOR"):
        return text

    prefix = (Color.BOLD.value if bold else "") + color.value
    return f"{prefix}{text}{Color.RESET.value}"


def debug_enabled() -> bool:
    return os.getenv("LISTBOT_DEBUG", "").lower() == "true"


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))


def log_success(message: str) -> None:
    """Log a success (green)."""
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_error(message: str) -> None:
    """Log an error or dropped event (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_debug(message: str) -> None:
    """Log debug detail (gray), only when LISTBOT_DEBUG=true."""
    if debug_enabled():
        print(colored(f"{LOG_TAG_DEBUG} {message}", Color.GRAY))
