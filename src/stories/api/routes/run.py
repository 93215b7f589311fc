"""
Execution API routes.

- POST /api/stories/{id}/run - Run a whole story
- POST /api/activities/{id}/run - Run one activity

Runs happen synchronously inside the request. The web has no
confirmation channel, so auto-confirm is always on here.
"""

import logging
from typing import Any

from fastapi import APIRouter
from rich.console import Console

from stories.api.deps import ConfigDep, DatabaseDep, RegistryDep
from stories.core.agents import AgentRegistry
from stories.core.config import StoriesConfig
from stories.core.db import StoriesDatabase
from stories.core.runner import StoryRunner

logger = logging.getLogger(__name__)

router = APIRouter()

# Runner progress goes to the server's terminal
console = Console(stderr=True)


def _runner(db: StoriesDatabase, config: StoriesConfig, registry: AgentRegistry) -> StoryRunner:
    web_config = config.model_copy(
        update={"execution": config.execution.model_copy(update={"auto_confirm": True})}
    )
    return StoryRunner(db, web_config, registry, console=console)


@router.post("/stories/{story_id}/run")
def run_story(
    story_id: str, db: DatabaseDep, config: ConfigDep, registry: RegistryDep
) -> dict[str, Any]:
    runner = _runner(db, config, registry)
    try:
        runner.run_story(story_id)
    finally:
        runner.close()

    logger.info("Story %s executed via API", story_id)
    return {"message": "Story execution completed", "story_id": story_id}


@router.post("/activities/{activity_id}/run")
def run_activity(
    activity_id: str, db: DatabaseDep, config: ConfigDep, registry: RegistryDep
) -> dict[str, Any]:
    runner = _runner(db, config, registry)
    try:
        state = runner.run_activity(activity_id)
    finally:
        runner.close()

    logger.info("Activity %s executed via API", activity_id)
    return {"message": "Activity execution completed", "activity_id": activity_id, "state": state}
