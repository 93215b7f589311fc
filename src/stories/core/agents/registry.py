"""
Agent provider registry and custom-agent storage.

The registry keeps two ordered maps: the built-in providers (fixed at
import time) and the custom providers (loaded from custom-agents.json).
Lookups apply custom-over-built-in precedence; built-ins can never be
removed.

Storage location:
- Project: ./custom-agents.json (relative to the project directory)

Example:
    store = CustomAgentStore.project()
    registry = AgentRegistry.load(store)

    registry.register(ProviderDescriptor.custom("mychat", "mychat"))
    provider = registry.lookup("mychat")

    for agent in registry.list_all():
        print(agent.name, agent.is_custom)
"""

import json
import logging
import tempfile
from pathlib import Path

from pydantic import ValidationError

from stories.core.agents.exceptions import BuiltInProviderError
from stories.core.agents.models import (
    CustomAgentEntry,
    ProviderDescriptor,
    RegisteredAgent,
)

logger = logging.getLogger(__name__)

CUSTOM_AGENTS_FILENAME = "custom-agents.json"

BUILTIN_PROVIDERS: dict[str, ProviderDescriptor] = {
    "aichat": ProviderDescriptor.builtin("aichat", "AI Chat", "aichat"),
    "claude": ProviderDescriptor.builtin("claude", "Claude CLI", "claude", "-p"),
    "gpt": ProviderDescriptor.builtin("gpt", "GPT CLI", "gpt"),
    "gemini": ProviderDescriptor.builtin("gemini", "Gemini CLI", "gemini", "--prompt"),
    "ollama": ProviderDescriptor.builtin(
        "ollama", "Ollama (Local)", "ollama", "run", "llama2"
    ),
    "llm": ProviderDescriptor.builtin("llm", "Universal LLM CLI", "llm"),
}


class CustomAgentStore:
    """
    Storage layer for user-defined agent providers.

    The whole custom set is rewritten on every save (last writer wins).
    Uses atomic writes to prevent corruption during saves.

    Attributes:
        agents_file: Path to the custom-agents JSON file
    """

    def __init__(self, agents_file: Path | str) -> None:
        self.agents_file = Path(agents_file)

    def load(self) -> dict[str, ProviderDescriptor]:
        """
        Load custom providers from disk.

        Returns an empty mapping if the file doesn't exist. A malformed file
        is logged and treated as empty so a bad edit never blocks the CLI.

        Returns:
            Mapping of provider name to descriptor, in file order
        """
        if not self.agents_file.exists():
            return {}

        try:
            with open(self.agents_file, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("top-level value must be an object")
            return {
                name: CustomAgentEntry.model_validate(entry).to_descriptor(name)
                for name, entry in data.items()
            }
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("Failed to load custom agents from %s: %s", self.agents_file, e)
            return {}

    def save(self, agents: dict[str, ProviderDescriptor]) -> Path:
        """
        Write the full custom set to disk with an atomic write.

        Args:
            agents: Mapping of provider name to descriptor

        Returns:
            Path to the saved file

        Raises:
            OSError: If the file cannot be written
        """
        self.agents_file.parent.mkdir(parents=True, exist_ok=True)

        serialized = {
            name: CustomAgentEntry.from_descriptor(descriptor).model_dump(by_alias=True)
            for name, descriptor in agents.items()
        }
        json_str = json.dumps(serialized, indent=2)

        # Write to temp file in same directory, then rename over the target
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=self.agents_file.parent,
            delete=False,
            suffix=".tmp",
        ) as tmp:
            tmp.write(json_str)
            tmp.flush()
            tmp_path = Path(tmp.name)

        tmp_path.replace(self.agents_file)

        return self.agents_file

    @classmethod
    def project(
        cls, project_dir: Path | None = None, filename: str = CUSTOM_AGENTS_FILENAME
    ) -> "CustomAgentStore":
        """
        Create a store for the project-level custom agents file.

        Args:
            project_dir: Project directory (defaults to current directory)
            filename: File name inside the project directory

        Returns:
            CustomAgentStore for ./custom-agents.json
        """
        if project_dir is None:
            project_dir = Path.cwd()
        return cls(project_dir / filename)


class AgentRegistry:
    """
    Resolves provider names to launch recipes.

    Construct with AgentRegistry.load() to read the custom set once at
    startup, then pass the instance to whatever needs it.

    Attributes:
        store: Custom agent storage (None keeps customs in memory only)
    """

    def __init__(
        self,
        store: CustomAgentStore | None = None,
        custom: dict[str, ProviderDescriptor] | None = None,
        builtins: dict[str, ProviderDescriptor] | None = None,
    ) -> None:
        self.store = store
        self._builtins = dict(BUILTIN_PROVIDERS if builtins is None else builtins)
        self._custom = dict(custom or {})

    @classmethod
    def load(cls, store: CustomAgentStore) -> "AgentRegistry":
        """Create a registry with the custom set read from ``store``."""
        return cls(store=store, custom=store.load())

    def lookup(self, name: str) -> ProviderDescriptor | None:
        """
        Resolve a provider name.

        Custom providers shadow built-ins of the same name.

        Returns:
            The descriptor, or None if the name is unknown
        """
        if name in self._custom:
            return self._custom[name]
        return self._builtins.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._custom or name in self._builtins

    def is_builtin(self, name: str) -> bool:
        return name in self._builtins

    def register(self, descriptor: ProviderDescriptor) -> None:
        """
        Insert or overwrite a custom provider and persist the custom set.

        No check is made that the command exists; that is probed lazily.
        """
        self._custom[descriptor.name] = descriptor
        self._persist()
        logger.debug("Registered custom agent %s (%s)", descriptor.name, descriptor.command)

    def unregister(self, name: str) -> bool:
        """
        Remove a custom provider.

        Returns:
            True if removed, False if no custom provider has that name

        Raises:
            BuiltInProviderError: If ``name`` is a built-in provider
        """
        if name in self._builtins:
            raise BuiltInProviderError(name)
        if name not in self._custom:
            return False

        del self._custom[name]
        self._persist()
        return True

    def list_all(self) -> list[RegisteredAgent]:
        """
        List every provider: built-ins in declaration order, then customs
        in insertion order.
        """
        agents = [
            RegisteredAgent(name=name, descriptor=descriptor, is_custom=False)
            for name, descriptor in self._builtins.items()
        ]
        agents.extend(
            RegisteredAgent(name=name, descriptor=descriptor, is_custom=True)
            for name, descriptor in self._custom.items()
        )
        return agents

    def names(self) -> list[str]:
        """Provider names in listing order (a name may appear twice)."""
        return [agent.name for agent in self.list_all()]

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save(self._custom)
