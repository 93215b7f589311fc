"""
Configuration data models for stories.

These models define the structure of stories.config.json and
~/.config/stories/config.json files, with validation and type safety
via Pydantic.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

LogLevel = Literal["minimal", "normal", "verbose"]


class AgentConfig(BaseModel):
    """
    Which command-line agent drives step execution.

    Only ``provider`` affects invocation; the remaining fields are kept so
    config files written by other tools round-trip unchanged.
    """

    model_config = ConfigDict(extra="ignore")

    provider: str = Field(
        default="aichat",
        description="Agent provider name (built-in or custom)"
    )
    model: Optional[str] = Field(
        default=None,
        description="Model hint for the provider"
    )
    temperature: Optional[float] = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature hint"
    )
    max_tokens: Optional[int] = Field(
        default=2000,
        ge=1,
        description="Response length hint"
    )


class ExecutionConfig(BaseModel):
    """
    Control step execution behavior.
    """

    model_config = ConfigDict(extra="ignore")

    pause_between_steps: int = Field(
        default=1000,
        ge=0,
        description="Milliseconds to wait between steps (0 disables)"
    )
    auto_confirm: bool = Field(
        default=True,
        description="Run steps without asking for confirmation"
    )
    log_level: LogLevel = Field(
        default="normal",
        description="Logging verbosity: minimal, normal or verbose"
    )


class DatabaseConfig(BaseModel):
    """
    Where stories, activities and steps are stored.
    """

    model_config = ConfigDict(extra="ignore")

    path: str = Field(
        default="stories.db",
        description="SQLite database file (relative to the project directory)"
    )


class StoriesConfig(BaseModel):
    """
    Main stories configuration model.

    Combines all configuration sections. Loaded from:
    1. Hardcoded defaults
    2. User config (~/.config/stories/config.json)
    3. Project config (./stories.config.json)
    4. Environment variables (STORIES_*)

    Example:
        >>> config = StoriesConfig()
        >>> config.agent.provider
        'aichat'
        >>> config.execution.auto_confirm
        True
    """

    model_config = ConfigDict(extra="ignore")

    agent: AgentConfig = Field(default_factory=AgentConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    agents_file: str = Field(
        default="custom-agents.json",
        description="File holding user-defined agent providers"
    )
