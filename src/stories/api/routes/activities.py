"""
Activity and step API routes.

- GET /api/activities/{id} - One activity
- POST /api/activities - Create an activity
- GET /api/activities/{id}/steps - Steps of an activity, in execution order
- POST /api/steps - Create a step
"""

from fastapi import APIRouter, status

from stories.api.deps import DatabaseDep
from stories.core.db import Activity, Step
from stories.core.exceptions import ActivityNotFoundError

router = APIRouter()


@router.get("/activities/{activity_id}")
def get_activity(activity_id: str, db: DatabaseDep) -> Activity:
    activity = db.get_activity(activity_id)
    if activity is None:
        raise ActivityNotFoundError(activity_id)
    return activity


@router.post("/activities", status_code=status.HTTP_201_CREATED)
def create_activity(activity: Activity, db: DatabaseDep) -> Activity:
    db.create_activity(activity)
    return activity


@router.get("/activities/{activity_id}/steps")
def list_steps(activity_id: str, db: DatabaseDep) -> list[Step]:
    return db.get_steps_for_activity(activity_id)


@router.post("/steps", status_code=status.HTTP_201_CREATED)
def create_step(step: Step, db: DatabaseDep) -> Step:
    db.create_step(step)
    return step
