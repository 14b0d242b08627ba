"""Rich Console wrapper that degrades to ASCII on non-UTF-8 terminals."""
from rich.console import Console
from rich.markup import escape
from typing import Any
from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console that sanitizes Unicode output when the terminal can't render it.

    Also carries the small set of message helpers the CLI uses so every
    command reports errors and warnings the same way.
    """

    def __init__(self, *args, **kwargs):
        self._needs_sanitization = not is_utf8_capable()

        if self._needs_sanitization:
            kwargs['legacy_windows'] = True

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with automatic Unicode sanitization."""
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)

    def print_error(self, message: str) -> None:
        self.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        self.print(f"[bold yellow]Warning:[/bold yellow] {escape(message)}")
