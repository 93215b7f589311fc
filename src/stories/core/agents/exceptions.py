"""
Custom exceptions for agent registry and invocation.

Exception Hierarchy:
    AgentError (base)
    ├── AgentTimeoutError (no completion within the timeout)
    ├── AgentProcessError (process exited non-zero)
    ├── AgentSpawnError (process failed to start)
    └── BuiltInProviderError (attempt to remove a built-in provider)

Example:
    >>> from stories.core.agents.exceptions import AgentProcessError
    >>> try:
    ...     raise AgentProcessError("claude", 2, "bad flag")
    ... except AgentProcessError as e:
    ...     print(e.exit_code)
    2
"""


class AgentError(Exception):
    """
    Base exception for all agent-related errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class AgentTimeoutError(AgentError):
    """
    Raised when an agent process does not complete within the timeout.

    The child process group is killed before this is raised and any
    partial output is discarded.
    """

    def __init__(self, command: str, timeout: float) -> None:
        super().__init__(
            f"Agent execution timed out after {timeout:g} seconds",
            command=command,
            timeout=timeout,
        )
        self.command = command
        self.timeout = timeout


class AgentProcessError(AgentError):
    """
    Raised when an agent process exits with a non-zero status.

    Attributes:
        command: Executable that was run
        exit_code: Process exit status
        stderr: Captured standard error text
    """

    def __init__(self, command: str, exit_code: int, stderr: str) -> None:
        super().__init__(
            f"Agent execution failed with code {exit_code}: {stderr}",
            command=command,
            exit_code=exit_code,
        )
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class AgentSpawnError(AgentError):
    """
    Raised when an agent process cannot be started at all.

    Covers executable not found, permission denied and other OS-level
    launch failures. Never raised for a process that did start.
    """

    def __init__(self, command: str, reason: str) -> None:
        super().__init__(
            f"Failed to spawn agent process '{command}': {reason}",
            command=command,
        )
        self.command = command
        self.reason = reason


class BuiltInProviderError(AgentError):
    """Raised when trying to remove a built-in provider."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Cannot remove built-in provider: {name}", name=name)
        self.name = name


__all__ = [
    "AgentError",
    "AgentTimeoutError",
    "AgentProcessError",
    "AgentSpawnError",
    "BuiltInProviderError",
]
