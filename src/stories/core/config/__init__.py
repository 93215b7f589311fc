"""
Configuration models and loading.

This module provides Pydantic models for stories configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .loader import (
    clear_cache,
    get_project_config_path,
    get_user_config_path,
    get_xdg_config_home,
    load_config,
    save_project_config,
    set_agent_provider,
)
from .models import (
    AgentConfig,
    DatabaseConfig,
    ExecutionConfig,
    StoriesConfig,
)

__all__ = [
    # Models
    "AgentConfig",
    "DatabaseConfig",
    "ExecutionConfig",
    "StoriesConfig",
    # Loader functions
    "clear_cache",
    "get_project_config_path",
    "get_user_config_path",
    "get_xdg_config_home",
    "load_config",
    "save_project_config",
    "set_agent_provider",
]
