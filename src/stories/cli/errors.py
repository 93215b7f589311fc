"""
Standardized error handling and exit codes for the stories CLI.
"""

from enum import IntEnum

from rich.console import Console

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for stories CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Run aborted or generic failure."""

    USER_ERROR = 2
    """Bad input that the user can correct."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Story not found: website-builder",
        ...     solution="stories init",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def print_unknown_agent_error(name: str, known: list[str]) -> None:
    print_error(
        f"Unknown agent: {name}",
        reason=f"Available agents: {', '.join(known)}",
        solution="stories agent add <name> <command>",
    )


def print_agent_not_installed_error(name: str, command: str) -> None:
    print_error(
        f"Agent '{name}' CLI not found: {command}",
        reason="The command is not on PATH",
        solution="stories config agents",
    )
