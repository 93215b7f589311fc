"""
Pytest configuration and shared fixtures.

Provides a temporary store with a sample story tree, a recording stub
agent, an in-temp-dir agent registry and an isolated config environment.
"""

import io
from collections.abc import Iterator
from pathlib import Path

import pytest
from rich.console import Console

from stories.core.agents import AgentError, AgentRegistry, CustomAgentStore
from stories.core.config import StoriesConfig, clear_cache
from stories.core.config.models import AgentConfig, ExecutionConfig
from stories.core.db import Activity, Step, StoriesDatabase, Story

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user config, STORIES_* variables and the config cache out of tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for name in (
        "STORIES_AGENT_PROVIDER",
        "STORIES_AUTO_CONFIRM",
        "STORIES_PAUSE_BETWEEN_STEPS",
        "STORIES_LOG_LEVEL",
        "STORIES_DB_PATH",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary project directory that is also the working directory."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


# ==============================================================================
# Store Fixtures
# ==============================================================================


@pytest.fixture
def db(tmp_path: Path):
    """A fresh store in a temporary file."""
    database = StoriesDatabase(tmp_path / "stories.db")
    yield database
    database.close()


@pytest.fixture
def sample_story(db: StoriesDatabase) -> Story:
    """
    Two activities ("Alpha", "Beta") with two steps each.

    Step prompts are "alpha 1", "alpha 2", "beta 1", "beta 2"; each step's
    patch records that it ran.
    """
    story = Story(
        id="sample",
        title="Sample Story",
        description="A story for tests",
        initial_state={"started": False},
        expected_outcomes={"done": True},
        completion_criteria="Both activities ran",
    )
    db.create_story(story)

    # Inserted out of title order to exercise ordering
    for activity_id, title in (("act-b", "Beta"), ("act-a", "Alpha")):
        db.create_activity(
            Activity(
                id=activity_id,
                story_id="sample",
                title=title,
                description=f"{title} activity",
                state={},
                expected_outcome=f"{title} done",
            )
        )

    for activity_id, word in (("act-a", "alpha"), ("act-b", "beta")):
        for index in (2, 1):
            db.create_step(
                Step(
                    id=f"{word}-{index}",
                    activity_id=activity_id,
                    order_index=index,
                    prompt=f"{word} {index}",
                    state_update_logic=f'{{"{word}_{index}": true}}',
                    outcome_check=f"{word} {index} checked",
                )
            )
    return story


# ==============================================================================
# Agent Fixtures
# ==============================================================================


class StubInvoker:
    """Records prompts and replies from a script; raises AgentError items."""

    def __init__(self, responses: list[object] | None = None) -> None:
        self.responses = list(responses or [])
        self.prompts: list[str] = []

    def execute(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.responses.pop(0) if self.responses else f"ok: {prompt}"
        if isinstance(reply, AgentError):
            raise reply
        return str(reply)


@pytest.fixture
def stub_invoker() -> StubInvoker:
    return StubInvoker()


@pytest.fixture
def registry(tmp_path: Path) -> AgentRegistry:
    """A registry whose custom agents live in a temporary file."""
    return AgentRegistry.load(CustomAgentStore(tmp_path / "custom-agents.json"))


@pytest.fixture
def fast_config() -> StoriesConfig:
    """Auto-confirm on, no pause, and a provider that never resolves."""
    return StoriesConfig(
        agent=AgentConfig(provider="no-such-agent"),
        execution=ExecutionConfig(pause_between_steps=0, auto_confirm=True),
    )


@pytest.fixture
def console() -> Console:
    """A console that records into memory."""
    return Console(file=io.StringIO(), width=120, color_system=None)
