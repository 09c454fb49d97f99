"""Terminal and log-file formatting -- ANSI colors and timestamps.

Provides consistent color-coded CLI output and plain timestamped lines
for ``--log`` files.
"""

import sys
from datetime import datetime

_RESET = '\033[0m'
_DIM = '\033[2m'

_GREEN = '\033[32m'
_YELLOW = '\033[33m'

_BOLD_RED = '\033[1;31m'
_BOLD_CYAN = '\033[1;36m'


def _is_tty():
    """Check if stdout is a terminal (not piped)."""
    try:
        return sys.stdout.isatty()
    except AttributeError:
        return False


# Module-level flag -- set once at import time
_USE_COLOR = _is_tty()


def set_color_enabled(enabled: bool):
    """Override automatic color detection."""
    global _USE_COLOR
    _USE_COLOR = enabled


def _c(code: str, text: str) -> str:
    """Apply ANSI code if color is enabled."""
    if _USE_COLOR:
        return f'{code}{text}{_RESET}'
    return text


# ---------------------------------------------------------------------------
# CLI formatting helpers
# ---------------------------------------------------------------------------

def cli_header(text: str) -> str:
    """Bold cyan header line."""
    return _c(_BOLD_CYAN, text)


def cli_success(text: str) -> str:
    """Green text for located photos."""
    return _c(_GREEN, text)


def cli_warning(text: str) -> str:
    """Yellow text for photos without a position."""
    return _c(_YELLOW, text)


def cli_error(text: str) -> str:
    """Red text for errors."""
    return _c(_BOLD_RED, text)


def cli_dim(text: str) -> str:
    return _c(_DIM, text)


def cli_separator() -> str:
    """A visual separator line."""
    return _c(_DIM, '-' * 60)


def cli_progress(index: int, total: int, name: str) -> str:
    """Per-photo prefix for batch output, e.g. ``  [3/12] berth_a12.jpg``."""
    return f'  [{index}/{total}] {name}'


# ---------------------------------------------------------------------------
# Log file formatting (always plain text with timestamps and levels)
# ---------------------------------------------------------------------------

def _timestamp() -> str:
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _log_line(level: str, msg: str) -> str:
    tag = f'[{level}]'
    return f'[{_timestamp()}] {tag:<7} {msg}'


def log_info(msg: str) -> str:
    """Format a log file INFO line."""
    return _log_line('INFO', msg)


def log_warn(msg: str) -> str:
    return _log_line('WARN', msg)


def log_error(msg: str) -> str:
    return _log_line('ERROR', msg)
