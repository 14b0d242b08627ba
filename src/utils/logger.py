"""Terminal-safe output and timestamped log lines.

Detects terminal encoding and provides ASCII alternatives for Unicode icons
so output never crashes on terminals that don't support UTF-8. Log lines go
to stderr as ``[timestamp] LEVEL: message``.
"""
import sys
import locale
import traceback
from datetime import datetime, timezone
from typing import Callable, Optional

from src.config import get_config


# Unicode to ASCII icon mapping for non-UTF-8 terminals
ICON_MAP = {
    '✓': '[OK]',
    '✔': '[OK]',
    '✗': '[FAIL]',
    '✘': '[FAIL]',
    '⚠': '[WARN]',
    '→': '->',
    '←': '<-',
    '⇒': '=>',
    '…': '...',
    '•': '*',
    '│': '|',
    '─': '-',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except Exception:
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding().replace('_', '-') in ('utf-8', 'utf8')


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode icons with ASCII equivalents if terminal doesn't support UTF-8.

    Args:
        text: Text potentially containing Unicode icons

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)

    return sanitized


def create_safe_print() -> Callable:
    """Create a print function that automatically sanitizes output."""
    def safe_print(*args, **kwargs):
        sanitized_args = [
            sanitize_for_terminal(arg) if isinstance(arg, str) else arg
            for arg in args
        ]
        print(*sanitized_args, **kwargs)

    return safe_print


safe_print = create_safe_print()


def _debug_enabled() -> bool:
    return get_config().debug


def _log(level: str, message: str) -> None:
    timestamp = datetime.now(timezone.utc).isoformat(timespec='seconds')
    safe_print(f"[{timestamp}] {level}: {message}", file=sys.stderr)


def log_info(message: str) -> None:
    _log('INFO', message)


def log_warning(message: str) -> None:
    _log('WARN', message)


def log_error(message: str, error: Optional[BaseException] = None) -> None:
    """Log an error, with the exception's traceback when one is given."""
    _log('ERROR', message)
    if error is not None:
        details = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
        safe_print(f"  Stack: {details.rstrip()}", file=sys.stderr)


def log_debug(message: str) -> None:
    """Log a debug message (only when DARWIN_DEBUG is set)."""
    if _debug_enabled():
        _log('DEBUG', message)
