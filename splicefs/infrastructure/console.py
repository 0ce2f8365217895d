"""Transient progress output for verbose traversals."""
from typing import Optional

from rich.console import Console
from rich.status import Status
from rich.text import Text


class ProgressReporter:
    """Shows the entry currently being visited on a single status line.

    The line is cleared when the reporter stops, so nothing is left behind
    on the terminal. When ``enabled`` is false, or the console is not a
    terminal, every method is a no-op.
    """

    MAX_WIDTH = 70

    def __init__(self, enabled: bool = False, console: Optional[Console] = None):
        self.enabled = enabled
        self.console = console or Console(stderr=True)
        self._status: Optional[Status] = None

    def __enter__(self) -> "ProgressReporter":
        if self.enabled and self.console.is_terminal:
            self._status = self.console.status("Reading: ", spinner="line")
            self._status.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def visit(self, text: str) -> None:
        if self._status is None:
            return
        if len(text) > self.MAX_WIDTH:
            text = "..." + text[-(self.MAX_WIDTH - 3):]
        self._status.update(Text(f"Reading: {text}"))
