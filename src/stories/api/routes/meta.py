"""
Reference data API routes.

- GET /api/prompts - The prompt library
- GET /api/agents - Registered agent providers with availability
"""

from typing import Any

from fastapi import APIRouter

from stories.api.deps import ConfigDep, RegistryDep
from stories.core.agents import command_available
from stories.core.prompts import list_prompts

router = APIRouter()


@router.get("/prompts")
def prompts() -> list[dict[str, str]]:
    return [{"name": name, "prompt": prompt} for name, prompt in list_prompts()]


@router.get("/agents")
def agents(registry: RegistryDep, config: ConfigDep) -> list[dict[str, Any]]:
    """List providers as the CLI's ``agent list`` does."""
    return [
        {
            "name": entry.name,
            "label": entry.descriptor.label,
            "command": entry.descriptor.command,
            "is_custom": entry.is_custom,
            "available": command_available(entry.descriptor),
            "current": entry.name == config.agent.provider,
        }
        for entry in registry.list_all()
    ]
