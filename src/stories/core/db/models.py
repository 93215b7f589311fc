"""
Data models for stories, activities and steps.

A story owns activities; an activity owns ordered steps. Activity state is
an opaque JSON value that the runner treats as an object and rewrites
after every step.
"""

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Story(BaseModel):
    """
    A workflow: an ordered set of activities with expected outcomes.

    Example:
        >>> story = Story(id="hello", title="Hello", expected_outcomes={"greeted": True})
        >>> story.expected_outcomes["greeted"]
        True
    """

    id: str = Field(..., min_length=1, description="Unique, stable story key")
    title: str = ""
    description: str = ""
    initial_state: Any = Field(default_factory=dict)
    expected_outcomes: dict[str, bool] = Field(
        default_factory=dict,
        description="Outcome name -> whether it is required",
    )
    completion_criteria: str = ""


class Activity(BaseModel):
    """
    A unit of work inside a story, carrying its own mutable state.
    """

    id: str = Field(..., min_length=1)
    story_id: str = ""
    title: str = ""
    description: str = ""
    instructions: str = ""
    prompt_template: str = Field(default="", description="Name in the prompt library")
    state: Any = Field(default_factory=dict)
    expected_outcome: str = ""


class Step(BaseModel):
    """
    One prompt in an activity.

    ``input_request`` and ``outcome_check`` are display-only annotations.
    ``state_update_logic`` is JSON object text applied as a shallow patch.
    """

    id: str = Field(..., min_length=1)
    activity_id: str = ""
    order_index: int = 0
    prompt: str = ""
    input_request: str = ""
    state_update_logic: str = ""
    outcome_check: str = ""

    @field_validator("state_update_logic", mode="before")
    @classmethod
    def _encode_patch(cls, value: Any) -> Any:
        # API clients may send the patch as an object instead of text
        if isinstance(value, dict):
            return json.dumps(value)
        if value is None:
            return ""
        return value
