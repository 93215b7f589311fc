"""
FastAPI dependencies shared by the route modules.

The app factory stores the database path, configuration and agent
registry on ``app.state``; each request opens its own store connection.
"""

from collections.abc import Iterator
from typing import Annotated

from fastapi import Depends, Request

from stories.core.agents import AgentRegistry
from stories.core.config import StoriesConfig
from stories.core.db import StoriesDatabase


def get_db(request: Request) -> Iterator[StoriesDatabase]:
    db = StoriesDatabase(request.app.state.db_path)
    try:
        yield db
    finally:
        db.close()


def get_config(request: Request) -> StoriesConfig:
    return request.app.state.config


def get_registry(request: Request) -> AgentRegistry:
    return request.app.state.registry


DatabaseDep = Annotated[StoriesDatabase, Depends(get_db)]
ConfigDep = Annotated[StoriesConfig, Depends(get_config)]
RegistryDep = Annotated[AgentRegistry, Depends(get_registry)]
