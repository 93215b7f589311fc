"""
Custom exceptions for story storage and execution.

Exception Hierarchy:
    StoriesError (base)
    ├── NotFoundError (record lookup failed; aborts a run)
    │   ├── StoryNotFoundError
    │   └── ActivityNotFoundError
    ├── DuplicateRecordError (id already exists)
    └── UnknownPromptError (name not in the prompt library)

Agent failures live in stories.core.agents.exceptions and are absorbed by
the runner rather than propagated.
"""


class StoriesError(Exception):
    """
    Base exception for story storage and execution errors.

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


class NotFoundError(StoriesError):
    """Raised when a story or activity id is unknown."""

    kind = "Record"

    def __init__(self, record_id: str) -> None:
        super().__init__(f"{self.kind} not found: {record_id}", record_id=record_id)
        self.record_id = record_id


class StoryNotFoundError(NotFoundError):
    kind = "Story"


class ActivityNotFoundError(NotFoundError):
    kind = "Activity"


class DuplicateRecordError(StoriesError):
    """Raised when inserting a record whose id already exists."""

    def __init__(self, table: str, record_id: str) -> None:
        super().__init__(
            f"{table} record already exists: {record_id}", table=table, record_id=record_id
        )
        self.table = table
        self.record_id = record_id


class UnknownPromptError(StoriesError):
    """Raised when a prompt template name is not in the library."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown prompt type: {name}", name=name)
        self.name = name


__all__ = [
    "StoriesError",
    "NotFoundError",
    "StoryNotFoundError",
    "ActivityNotFoundError",
    "DuplicateRecordError",
    "UnknownPromptError",
]
