"""
Stories - Structured AI agent workflow runner

A CLI tool that sequences calls to command-line AI agents through
stories, activities and steps persisted in a local database.
"""

__version__ = "1.0.0"

# Re-export core models for convenience
from stories.core.config.models import StoriesConfig
from stories.core.db.models import Activity, Step, Story

__all__ = ["Activity", "Step", "StoriesConfig", "Story", "__version__"]
