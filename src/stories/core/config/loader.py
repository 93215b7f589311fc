"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import StoriesConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILENAME = "stories.config.json"

# Global cache to avoid reloading config multiple times per session
_config_cache: StoriesConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/stories/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "stories" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to stories.config.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / PROJECT_CONFIG_FILENAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 2}})
        {'a': 1, 'b': {'x': 10, 'y': 2}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient to a bad file
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


def _parse_bool(value: str) -> bool:
    return value.lower() not in ("false", "0", "no", "")


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        STORIES_AGENT_PROVIDER - overrides agent.provider
        STORIES_AUTO_CONFIRM - overrides execution.auto_confirm
        STORIES_PAUSE_BETWEEN_STEPS - overrides execution.pause_between_steps
        STORIES_LOG_LEVEL - overrides execution.log_level
        STORIES_DB_PATH - overrides database.path

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if provider := os.environ.get("STORIES_AGENT_PROVIDER"):
        result["agent"] = {**result.get("agent", {}), "provider": provider}

    if auto_confirm := os.environ.get("STORIES_AUTO_CONFIRM"):
        result["execution"] = {
            **result.get("execution", {}),
            "auto_confirm": _parse_bool(auto_confirm),
        }

    if pause_str := os.environ.get("STORIES_PAUSE_BETWEEN_STEPS"):
        try:
            pause = int(pause_str)
            if pause < 0:
                logger.warning(
                    "STORIES_PAUSE_BETWEEN_STEPS must be >= 0, got %d, ignoring", pause
                )
            else:
                result["execution"] = {
                    **result.get("execution", {}),
                    "pause_between_steps": pause,
                }
        except ValueError:
            logger.warning("Invalid STORIES_PAUSE_BETWEEN_STEPS value '%s', ignoring", pause_str)

    if log_level := os.environ.get("STORIES_LOG_LEVEL"):
        if log_level in ("minimal", "normal", "verbose"):
            result["execution"] = {**result.get("execution", {}), "log_level": log_level}
        else:
            logger.warning("Invalid STORIES_LOG_LEVEL value '%s', ignoring", log_level)

    if db_path := os.environ.get("STORIES_DB_PATH"):
        result["database"] = {**result.get("database", {}), "path": db_path}

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return StoriesConfig().model_dump()


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> StoriesConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (STORIES_*)
        2. Project config (stories.config.json)
        3. User config (~/.config/stories/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load stories.config.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated StoriesConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = StoriesConfig(**merged)
    _config_cache = config

    return config


def save_project_config(config: StoriesConfig, project_dir: Path | None = None) -> Path:
    """
    Write configuration to the project config file.

    Args:
        config: Configuration to save
        project_dir: Project directory (defaults to cwd)

    Returns:
        Path to the written file
    """
    path = get_project_config_path(project_dir)
    path.write_text(json.dumps(config.model_dump(), indent=2) + "\n", encoding="utf-8")
    clear_cache()
    return path


def set_agent_provider(
    provider: str, model: str | None = None, project_dir: Path | None = None
) -> StoriesConfig:
    """
    Persist a new agent provider (and optionally model) to the project config.

    Only the project file's own values plus defaults are written back. User
    config and ``STORIES_*`` env overrides stay in their own layers.

    Returns:
        The updated configuration (all layers applied)
    """
    path = get_project_config_path(project_dir)
    agent_updates: dict[str, Any] = {"provider": provider}
    if model:
        agent_updates["model"] = model

    project = deep_merge(
        get_default_config(),
        deep_merge(load_json_file(path) or {}, {"agent": agent_updates}),
    )
    validated = StoriesConfig(**project)

    path.write_text(json.dumps(validated.model_dump(), indent=2) + "\n", encoding="utf-8")
    clear_cache()
    return load_config(project_dir, use_cache=False)


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
