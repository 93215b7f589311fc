"""
SQLite schema for the stories database.

Schema Design:
- stories: Top-level workflows with initial state and expected outcomes
- activities: Units of work inside a story, each with its own mutable state
- steps: Ordered prompts inside an activity
- schema_info: Version tracking for migrations

Foreign keys are declared but not enforced: an activity may reference a
story that does not exist yet (the caller owns that ordering).
"""

import sqlite3

# Schema version for migrations
SCHEMA_VERSION = 1

SCHEMA_DDL = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_info (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    description TEXT
);

CREATE TABLE IF NOT EXISTS stories (
    id TEXT PRIMARY KEY,
    title TEXT,
    description TEXT,
    initial_state JSON,
    expected_outcomes JSON,
    completion_criteria TEXT
);

CREATE TABLE IF NOT EXISTS activities (
    id TEXT PRIMARY KEY,
    story_id TEXT,
    title TEXT,
    description TEXT,
    instructions TEXT,
    prompt_template TEXT,
    state JSON,
    expected_outcome TEXT,
    FOREIGN KEY (story_id) REFERENCES stories(id)
);

CREATE TABLE IF NOT EXISTS steps (
    id TEXT PRIMARY KEY,
    activity_id TEXT,
    order_index INTEGER,
    prompt TEXT,
    input_request TEXT,
    state_update_logic TEXT,
    outcome_check TEXT,
    FOREIGN KEY (activity_id) REFERENCES activities(id)
);

CREATE INDEX IF NOT EXISTS idx_activities_story ON activities(story_id);
CREATE INDEX IF NOT EXISTS idx_steps_activity ON steps(activity_id, order_index);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """
    Create the database schema.

    Idempotent - safe to call multiple times.

    Args:
        conn: SQLite database connection
    """
    conn.executescript(SCHEMA_DDL)

    conn.execute(
        """
        INSERT OR REPLACE INTO schema_info (version, description)
        VALUES (?, ?)
        """,
        (SCHEMA_VERSION, "Initial schema with stories, activities, and steps"),
    )

    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """
    Get the current schema version from the database.

    Returns:
        Current schema version, or None if schema_info table doesn't exist
    """
    try:
        cursor = conn.execute("SELECT MAX(version) AS version FROM schema_info")
        row = cursor.fetchone()
    except sqlite3.OperationalError:
        # schema_info table doesn't exist
        return None

    if row is None:
        return None
    version = row["version"] if isinstance(row, dict) else row[0]
    return int(version) if version is not None else None


def needs_migration(conn: sqlite3.Connection) -> bool:
    """
    Check if database needs migration to current schema version.

    Example:
        >>> import sqlite3
        >>> conn = sqlite3.connect(":memory:")
        >>> needs_migration(conn)
        True
        >>> create_schema(conn)
        >>> needs_migration(conn)
        False
    """
    current_version = get_schema_version(conn)
    if current_version is None:
        return True
    return current_version < SCHEMA_VERSION
