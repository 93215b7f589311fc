"""
Tests for the SQLite story store.
"""

import sqlite3
from pathlib import Path

import pytest

from stories.core.db import Activity, Step, StoriesDatabase, Story, decode_json
from stories.core.db.schema import SCHEMA_VERSION, get_schema_version
from stories.core.exceptions import DuplicateRecordError


class TestSchema:
    def test_new_database_is_at_current_version(self, db: StoriesDatabase):
        assert get_schema_version(db.conn) == SCHEMA_VERSION

    def test_reopening_keeps_data(self, tmp_path: Path):
        path = tmp_path / "nested" / "stories.db"
        with StoriesDatabase(path) as first:
            first.create_story(Story(id="s", title="S"))
        with StoriesDatabase(path) as second:
            assert second.get_story("s") is not None


class TestStories:
    def test_create_and_get(self, db: StoriesDatabase):
        story = Story(
            id="s",
            title="Title",
            description="Desc",
            initial_state={"a": [1, 2]},
            expected_outcomes={"done": True, "optional": False},
            completion_criteria="All done",
        )
        db.create_story(story)
        assert db.get_story("s") == story

    def test_missing_story_is_none(self, db: StoriesDatabase):
        assert db.get_story("nope") is None

    def test_stories_ordered_by_title(self, db: StoriesDatabase):
        db.create_story(Story(id="2", title="Zulu"))
        db.create_story(Story(id="1", title="Alpha"))
        assert [s.title for s in db.get_stories()] == ["Alpha", "Zulu"]

    def test_duplicate_id_raises(self, db: StoriesDatabase):
        db.create_story(Story(id="s", title="One"))
        with pytest.raises(DuplicateRecordError) as exc_info:
            db.create_story(Story(id="s", title="Two"))
        assert exc_info.value.table == "stories"
        assert db.get_story("s").title == "One"

    def test_update(self, db: StoriesDatabase):
        db.create_story(Story(id="s", title="Old"))
        assert db.update_story(Story(id="s", title="New", expected_outcomes={"x": True}))
        assert db.get_story("s").title == "New"
        assert db.get_story("s").expected_outcomes == {"x": True}

    def test_update_missing_returns_false(self, db: StoriesDatabase):
        assert db.update_story(Story(id="ghost")) is False

    def test_delete_cascades(self, db: StoriesDatabase, sample_story: Story):
        assert db.delete_story("sample") is True
        assert db.get_story("sample") is None
        assert db.get_activities_for_story("sample") == []
        assert db.get_steps_for_activity("act-a") == []

    def test_delete_missing_returns_false(self, db: StoriesDatabase):
        assert db.delete_story("ghost") is False

    def test_invalid_json_column_reads_as_defaults(self, db: StoriesDatabase):
        db.conn.execute(
            "INSERT INTO stories (id, title, initial_state, expected_outcomes) VALUES (?, ?, ?, ?)",
            ("raw", "Raw", "{not json", "[]"),
        )
        db.conn.commit()
        story = db.get_story("raw")
        assert story.initial_state is None
        assert story.expected_outcomes == {}


class TestActivities:
    def test_activities_ordered_by_title(self, db: StoriesDatabase, sample_story: Story):
        assert [a.title for a in db.get_activities_for_story("sample")] == ["Alpha", "Beta"]

    def test_activity_without_story_is_allowed(self, db: StoriesDatabase):
        db.create_activity(Activity(id="orphan", story_id="nowhere", title="Orphan"))
        assert db.get_activity("orphan").story_id == "nowhere"

    def test_update_state_replaces(self, db: StoriesDatabase, sample_story: Story):
        db.update_activity_state("act-a", {"only": "this"})
        assert db.get_activity("act-a").state == {"only": "this"}

    def test_update_state_of_missing_activity_is_noop(self, db: StoriesDatabase):
        db.update_activity_state("ghost", {"x": 1})
        assert db.get_activity("ghost") is None


class TestSteps:
    def test_steps_ordered_by_index(self, db: StoriesDatabase, sample_story: Story):
        assert [s.id for s in db.get_steps_for_activity("act-a")] == ["alpha-1", "alpha-2"]

    def test_equal_indexes_keep_insertion_order(self, db: StoriesDatabase):
        for step_id in ("first", "second", "third"):
            db.create_step(Step(id=step_id, activity_id="a", order_index=1))
        assert [s.id for s in db.get_steps_for_activity("a")] == ["first", "second", "third"]

    def test_object_patch_is_stored_as_text(self, db: StoriesDatabase):
        db.create_step(Step(id="s", activity_id="a", state_update_logic={"x": True}))
        assert db.get_steps_for_activity("a")[0].state_update_logic == '{"x": true}'

    def test_duplicate_step_raises(self, db: StoriesDatabase):
        db.create_step(Step(id="s", activity_id="a"))
        with pytest.raises(DuplicateRecordError):
            db.create_step(Step(id="s", activity_id="a"))


class TestClose:
    def test_close_is_idempotent(self, tmp_path: Path):
        database = StoriesDatabase(tmp_path / "x.db")
        database.close()
        database.close()

    def test_use_after_close_raises(self, tmp_path: Path):
        database = StoriesDatabase(tmp_path / "x.db")
        database.close()
        with pytest.raises(sqlite3.ProgrammingError):
            database.get_stories()


def test_decode_json():
    assert decode_json('{"a": 1}') == {"a": 1}
    assert decode_json(None) is None
    assert decode_json("nope") is None
