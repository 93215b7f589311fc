"""
Tests for the example and test story seeds.
"""

import json

from stories.core.db import StoriesDatabase, Story
from stories.core.seed import (
    create_example_stories,
    create_quick_test,
    create_simple_test_story,
)


class TestExampleStories:
    def test_creates_both_examples(self, db: StoriesDatabase):
        assert create_example_stories(db) == ["website-builder", "code-audit"]

        activities = db.get_activities_for_story("website-builder")
        assert [a.title for a in activities] == ["Apply Styles", "Scaffold Frontend", "Write Tests"]
        for activity in activities:
            assert len(db.get_steps_for_activity(activity.id)) == 2

        audit = db.get_activities_for_story("code-audit")
        assert [a.id for a in audit] == ["analyze-code"]

    def test_every_patch_is_a_json_object(self, db: StoriesDatabase):
        create_example_stories(db)
        for story in db.get_stories():
            for activity in db.get_activities_for_story(story.id):
                for step in db.get_steps_for_activity(activity.id):
                    assert isinstance(json.loads(step.state_update_logic), dict)

    def test_reseeding_is_skipped(self, db: StoriesDatabase):
        create_example_stories(db)
        assert create_example_stories(db) == []
        assert len(db.get_stories()) == 2

    def test_existing_story_id_skips_only_that_story(self, db: StoriesDatabase):
        db.create_story(Story(id="code-audit", title="Mine"))
        assert create_example_stories(db) == ["website-builder"]
        assert db.get_story("code-audit").title == "Mine"


class TestTestStories:
    def test_hello_claude(self, db: StoriesDatabase):
        assert create_simple_test_story(db) == ["hello-claude"]
        steps = db.get_steps_for_activity("test-greeting")
        assert [s.id for s in steps] == ["say-hello", "ask-question"]

    def test_quick_test(self, db: StoriesDatabase):
        assert create_quick_test(db) == ["quick-test"]
        assert create_quick_test(db) == []
        assert db.get_steps_for_activity("instant-test")[0].prompt == (
            'Say "Working!" if you can see this.'
        )
