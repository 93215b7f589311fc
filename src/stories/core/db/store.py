"""
SQLite persistence for stories, activities and steps.

The store follows the same connection conventions as the rest of stories:
- WAL mode for readers alongside a writer
- Row factory for dict-like access
- JSON columns encoded with json.dumps and decoded on read

Usage:
    from stories.core.db import StoriesDatabase

    with StoriesDatabase("stories.db") as db:
        for story in db.get_stories():
            print(story.id, story.title)

        db.update_activity_state("scaffold-frontend", {"components_created": True})
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from stories.core.db.models import Activity, Step, Story
from stories.core.db.schema import create_schema, needs_migration
from stories.core.exceptions import DuplicateRecordError

logger = logging.getLogger(__name__)


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """
    Row factory that returns rows as dictionaries.

    Example:
        >>> conn = sqlite3.connect(":memory:")
        >>> conn.row_factory = dict_factory
        >>> conn.execute("SELECT 1 AS one").fetchone()
        {'one': 1}
    """
    fields = [column[0] for column in cursor.description]
    return dict(zip(fields, row))


def configure_connection(conn: sqlite3.Connection) -> None:
    """
    Configure a SQLite connection.

    Settings applied:
    - WAL mode
    - dict_factory for dict-like row access

    Foreign keys are left unenforced: an activity may be created before its
    story.
    """
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = dict_factory


def decode_json(value: Any) -> Any:
    """
    Decode a JSON column value.

    Returns:
        Parsed value, or None if the column is NULL or not valid JSON
    """
    if value is None:
        return None
    if not isinstance(value, (str, bytes)):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return None


def _clean(row: dict[str, Any]) -> dict[str, Any]:
    # NULL text columns fall back to the model defaults
    return {key: value for key, value in row.items() if value is not None}


class StoriesDatabase:
    """
    Story/activity/step store backed by a single SQLite connection.

    Attributes:
        db_path: Path to the database file (":memory:" for in-memory)
    """

    def __init__(self, db_path: Path | str = "stories.db") -> None:
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        # Web workers may open and use the connection on different threads
        self._conn: sqlite3.Connection | None = sqlite3.connect(
            self.db_path, check_same_thread=False
        )
        configure_connection(self._conn)
        if needs_migration(self._conn):
            create_schema(self._conn)

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError("Database is closed")
        return self._conn

    def __enter__(self) -> "StoriesDatabase":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # ------------------------------------------------------------------
    # Stories
    # ------------------------------------------------------------------

    def get_stories(self) -> list[Story]:
        rows = self.conn.execute("SELECT * FROM stories ORDER BY title").fetchall()
        return [self._story_from_row(row) for row in rows]

    def get_story(self, story_id: str) -> Story | None:
        row = self.conn.execute("SELECT * FROM stories WHERE id = ?", (story_id,)).fetchone()
        return self._story_from_row(row) if row else None

    def create_story(self, story: Story) -> None:
        """
        Insert a story.

        Raises:
            DuplicateRecordError: If a story with the same id exists
        """
        self._insert(
            "stories",
            story.id,
            """
            INSERT INTO stories (id, title, description, initial_state,
                                 expected_outcomes, completion_criteria)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                story.id,
                story.title,
                story.description,
                json.dumps(story.initial_state),
                json.dumps(story.expected_outcomes),
                story.completion_criteria,
            ),
        )

    def update_story(self, story: Story) -> bool:
        """
        Overwrite a story's fields.

        Returns:
            True if a story with that id existed
        """
        cursor = self.conn.execute(
            """
            UPDATE stories
            SET title = ?, description = ?, initial_state = ?,
                expected_outcomes = ?, completion_criteria = ?
            WHERE id = ?
            """,
            (
                story.title,
                story.description,
                json.dumps(story.initial_state),
                json.dumps(story.expected_outcomes),
                story.completion_criteria,
                story.id,
            ),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def delete_story(self, story_id: str) -> bool:
        """
        Delete a story together with its activities and their steps.

        Returns:
            True if the story existed
        """
        with self.conn:
            self.conn.execute(
                """
                DELETE FROM steps WHERE activity_id IN
                    (SELECT id FROM activities WHERE story_id = ?)
                """,
                (story_id,),
            )
            self.conn.execute("DELETE FROM activities WHERE story_id = ?", (story_id,))
            cursor = self.conn.execute("DELETE FROM stories WHERE id = ?", (story_id,))
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------

    def get_activities_for_story(self, story_id: str) -> list[Activity]:
        rows = self.conn.execute(
            "SELECT * FROM activities WHERE story_id = ? ORDER BY title", (story_id,)
        ).fetchall()
        return [self._activity_from_row(row) for row in rows]

    def get_activity(self, activity_id: str) -> Activity | None:
        row = self.conn.execute(
            "SELECT * FROM activities WHERE id = ?", (activity_id,)
        ).fetchone()
        return self._activity_from_row(row) if row else None

    def create_activity(self, activity: Activity) -> None:
        self._insert(
            "activities",
            activity.id,
            """
            INSERT INTO activities (id, story_id, title, description, instructions,
                                    prompt_template, state, expected_outcome)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                activity.id,
                activity.story_id,
                activity.title,
                activity.description,
                activity.instructions,
                activity.prompt_template,
                json.dumps(activity.state),
                activity.expected_outcome,
            ),
        )

    def update_activity_state(self, activity_id: str, state: Any) -> None:
        """Replace an activity's state with ``state`` (JSON-encoded)."""
        self.conn.execute(
            "UPDATE activities SET state = ? WHERE id = ?",
            (json.dumps(state), activity_id),
        )
        self.conn.commit()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def get_steps_for_activity(self, activity_id: str) -> list[Step]:
        """Steps in execution order: order_index, then insertion order."""
        rows = self.conn.execute(
            "SELECT * FROM steps WHERE activity_id = ? ORDER BY order_index, rowid",
            (activity_id,),
        ).fetchall()
        return [Step.model_validate(_clean(row)) for row in rows]

    def create_step(self, step: Step) -> None:
        self._insert(
            "steps",
            step.id,
            """
            INSERT INTO steps (id, activity_id, order_index, prompt, input_request,
                               state_update_logic, outcome_check)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                step.id,
                step.activity_id,
                step.order_index,
                step.prompt,
                step.input_request,
                step.state_update_logic,
                step.outcome_check,
            ),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _insert(self, table: str, record_id: str, query: str, params: tuple[Any, ...]) -> None:
        try:
            with self.conn:
                self.conn.execute(query, params)
        except sqlite3.IntegrityError as e:
            raise DuplicateRecordError(table, record_id) from e
        logger.debug("Inserted %s record %s", table, record_id)

    @staticmethod
    def _story_from_row(row: dict[str, Any]) -> Story:
        data = _clean(row)
        data["initial_state"] = decode_json(row.get("initial_state"))
        outcomes = decode_json(row.get("expected_outcomes"))
        data["expected_outcomes"] = outcomes if isinstance(outcomes, dict) else {}
        return Story.model_validate(data)

    @staticmethod
    def _activity_from_row(row: dict[str, Any]) -> Activity:
        data = _clean(row)
        data["state"] = decode_json(row.get("state"))
        return Activity.model_validate(data)
