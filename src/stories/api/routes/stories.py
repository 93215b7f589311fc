"""
Story API routes.

- GET /api/stories - All stories, ordered by title
- GET /api/stories/{id} - One story
- POST /api/stories - Create a story
- PUT /api/stories/{id} - Update a story's fields
- DELETE /api/stories/{id} - Delete a story with its activities and steps
- GET /api/stories/{id}/activities - Activities of a story
"""

from typing import Any

from fastapi import APIRouter, status
from pydantic import BaseModel

from stories.api.deps import DatabaseDep
from stories.core.db import Activity, Story
from stories.core.exceptions import StoryNotFoundError

router = APIRouter()


class StoryUpdate(BaseModel):
    """Request body for PUT /api/stories/{id}; omitted fields are kept."""

    title: str | None = None
    description: str | None = None
    initial_state: Any = None
    expected_outcomes: dict[str, bool] | None = None
    completion_criteria: str | None = None


@router.get("/stories")
def list_stories(db: DatabaseDep) -> list[Story]:
    return db.get_stories()


@router.get("/stories/{story_id}")
def get_story(story_id: str, db: DatabaseDep) -> Story:
    story = db.get_story(story_id)
    if story is None:
        raise StoryNotFoundError(story_id)
    return story


@router.post("/stories", status_code=status.HTTP_201_CREATED)
def create_story(story: Story, db: DatabaseDep) -> Story:
    """
    Create a story.

    Returns 409 if a story with the same id exists.
    """
    db.create_story(story)
    return story


@router.put("/stories/{story_id}")
def update_story(story_id: str, update: StoryUpdate, db: DatabaseDep) -> Story:
    story = db.get_story(story_id)
    if story is None:
        raise StoryNotFoundError(story_id)

    updated = story.model_copy(update=update.model_dump(exclude_unset=True))
    db.update_story(updated)
    return updated


@router.delete("/stories/{story_id}")
def delete_story(story_id: str, db: DatabaseDep) -> dict[str, str]:
    if not db.delete_story(story_id):
        raise StoryNotFoundError(story_id)
    return {"message": "Story deleted", "story_id": story_id}


@router.get("/stories/{story_id}/activities")
def list_activities(story_id: str, db: DatabaseDep) -> list[Activity]:
    # An unknown story simply has no activities
    return db.get_activities_for_story(story_id)
