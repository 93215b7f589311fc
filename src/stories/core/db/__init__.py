"""
Story storage: models, SQLite schema and the StoriesDatabase store.
"""

from .models import Activity, Step, Story
from .schema import SCHEMA_VERSION, create_schema, needs_migration
from .store import StoriesDatabase, configure_connection, decode_json, dict_factory

__all__ = [
    "Activity",
    "Step",
    "Story",
    "SCHEMA_VERSION",
    "create_schema",
    "needs_migration",
    "StoriesDatabase",
    "configure_connection",
    "decode_json",
    "dict_factory",
]
