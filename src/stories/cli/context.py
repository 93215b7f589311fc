"""
Shared setup for CLI commands: configuration, registry and store.
"""

import typer
from pydantic import ValidationError

from stories.cli.errors import ExitCode, print_error
from stories.core.agents import AgentRegistry, CustomAgentStore
from stories.core.config import StoriesConfig, get_project_config_path, load_config
from stories.core.config.env import load_project_env
from stories.core.db import StoriesDatabase
from stories.utils.logging import setup_logging


def is_debug(ctx: typer.Context | None) -> bool:
    if ctx is None:
        return False
    root = ctx.find_root()
    return bool(root.obj.get("debug", False)) if isinstance(root.obj, dict) else False


def load_settings(ctx: typer.Context | None = None) -> StoriesConfig:
    """
    Load the merged configuration, apply its log level and load the
    project's .env files for the agent CLIs.

    Exits with USER_ERROR when a config file holds an invalid value.
    """
    try:
        config = load_config()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        print_error(
            "Invalid configuration",
            reason=problems,
            solution=f"fix the value in {get_project_config_path()} or ~/.config/stories/config.json",
        )
        raise typer.Exit(ExitCode.USER_ERROR) from None

    setup_logging(config.execution.log_level, debug=is_debug(ctx))
    load_project_env(config)
    return config


def open_registry(config: StoriesConfig) -> AgentRegistry:
    return AgentRegistry.load(CustomAgentStore.project(filename=config.agents_file))


def open_database(config: StoriesConfig) -> StoriesDatabase:
    return StoriesDatabase(config.database.path)
