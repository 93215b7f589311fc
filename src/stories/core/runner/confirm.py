"""
Interactive yes/no confirmation used when auto-confirm is off.
"""

from typing import IO, Protocol

from rich.console import Console
from rich.prompt import Confirm


class Confirmation(Protocol):
    """A human input channel that answers yes/no questions."""

    def ask(self, message: str) -> bool: ...

    def close(self) -> None: ...


class ConsoleConfirmation:
    """
    Asks on the terminal via rich; anything but a yes answer declines.

    Attributes:
        console: Console the question is printed to
        stream: Input stream (stdin when None)
    """

    def __init__(self, console: Console | None = None, stream: IO[str] | None = None) -> None:
        self.console = console or Console()
        self.stream = stream
        self.closed = False

    def ask(self, message: str) -> bool:
        if self.closed:
            raise RuntimeError("Confirmation channel is closed")
        try:
            return Confirm.ask(
                f"[yellow]{message}[/yellow]",
                console=self.console,
                default=False,
                stream=self.stream,
            )
        except EOFError:
            # No one at the terminal: treat as a refusal
            return False

    def close(self) -> None:
        self.closed = True
