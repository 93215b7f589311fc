"""
Story execution engine.

Walks Story -> Activities -> Steps, one step at a time, and drives each
step through the configured agent. All rendering goes to a rich Console;
signal handling and exit codes stay in the CLI.

Per step:
    1. Ask for confirmation when auto-confirm is off (refusal skips the
       step: no agent call, no state change)
    2. Invoke the agent with the step prompt, or print it in simulation
       mode when no agent is available
    3. Record ``last_agent_response`` / ``step_completed`` on success or
       ``step_error`` on failure
    4. Shallow-merge the step's state-update patch
    5. Persist the activity state
    6. Pause between steps

Only unknown story/activity ids abort a run. Agent failures, malformed
patches and skipped steps are absorbed and the run moves on.

Resuming is not tracked per step: ``continue_story`` re-runs every
activity from its first step over the accumulated state.

Usage:
    >>> runner = StoryRunner(db, config, registry)
    >>> try:
    ...     runner.run_story("website-builder")
    ... finally:
    ...     runner.close()
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

from rich.console import Console

from stories.core.agents.exceptions import AgentError
from stories.core.agents.invoker import AgentInvoker, probe_available
from stories.core.agents.registry import AgentRegistry
from stories.core.config.models import StoriesConfig
from stories.core.db.models import Activity, Step
from stories.core.db.store import StoriesDatabase
from stories.core.exceptions import ActivityNotFoundError, StoryNotFoundError
from stories.core.runner.confirm import Confirmation, ConsoleConfirmation

logger = logging.getLogger(__name__)

RESPONSE_PREVIEW_CHARS = 200


class Invoker(Protocol):
    """Anything that turns a prompt into a response (AgentInvoker or a stub)."""

    def execute(self, prompt: str) -> str: ...


def load_state(raw: Any) -> dict[str, Any]:
    """
    Normalize a persisted activity state into a fresh dict.

    Absent, unparsable and non-object values all load as an empty object.

    Example:
        >>> load_state('{"a": 1}')
        {'a': 1}
        >>> load_state("[1, 2]")
        {}
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Activity state is not valid JSON, starting from {}")
            return {}
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        logger.warning("Activity state is %s, not an object; starting from {}", type(raw).__name__)
        return {}
    return dict(raw)


def merge_state_patch(state: dict[str, Any], patch_text: str) -> dict[str, Any]:
    """
    Shallow-merge a JSON object patch over ``state``.

    Keys in the patch overwrite existing keys; nested values are replaced,
    not merged.

    Args:
        state: Current state (not modified)
        patch_text: JSON object literal

    Returns:
        The merged state (a new dict)

    Raises:
        ValueError: If the patch is not valid JSON or not an object

    Example:
        >>> merge_state_patch({"k": "old", "j": 1}, '{"k": "new"}')
        {'k': 'new', 'j': 1}
    """
    try:
        patch = json.loads(patch_text)
    except json.JSONDecodeError:
        raise ValueError(f"Invalid state update logic: {patch_text}") from None
    if not isinstance(patch, dict):
        raise ValueError(f"State update logic is not a JSON object: {patch_text}")
    return {**state, **patch}


class StoryRunner:
    """
    Runs stories and activities against a command-line agent.

    The agent is resolved lazily on first run from ``config.agent.provider``.
    An unknown provider, or one whose command is not on PATH, switches the
    runner to simulation mode for its whole lifetime.

    Attributes:
        db: Story store
        config: Configuration snapshot taken at construction
        registry: Agent provider registry
    """

    def __init__(
        self,
        db: StoriesDatabase,
        config: StoriesConfig,
        registry: AgentRegistry,
        *,
        invoker: Invoker | None = None,
        console: Console | None = None,
        confirmation_factory: Callable[[], Confirmation] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.db = db
        self.config = config
        self.registry = registry
        self.console = console or Console()
        self._invoker = invoker
        self._agent_initialized = invoker is not None
        self._confirmation_factory = confirmation_factory or (
            lambda: ConsoleConfirmation(self.console)
        )
        self._confirmation: Confirmation | None = None
        self._sleep = sleep

    @property
    def simulation_mode(self) -> bool:
        self._ensure_agent()
        return self._invoker is None

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def run_story(self, story_id: str) -> None:
        """
        Run every activity of a story, ordered by title.

        Raises:
            StoryNotFoundError: If the story does not exist
        """
        self._ensure_agent()

        story = self.db.get_story(story_id)
        if story is None:
            raise StoryNotFoundError(story_id)

        logger.info("Running story %s", story_id)
        self.console.print(f"[bold blue]📖 Story: {story.title}[/bold blue]")
        self.console.print(f"[dim]{story.description}[/dim]")
        self.console.print()

        for activity in self.db.get_activities_for_story(story_id):
            self.run_activity(activity.id)

    def continue_story(self, story_id: str) -> None:
        """
        Continue a story.

        Step progress is not tracked, so this re-runs the whole story over
        the state accumulated so far.
        """
        self.console.print(
            "[yellow]Resuming from the last completed step is not supported; "
            "re-running the story from the start.[/yellow]"
        )
        self.run_story(story_id)

    def run_activity(self, activity_id: str) -> dict[str, Any]:
        """
        Run an activity's steps in order, persisting state after each step.

        Returns:
            The final activity state

        Raises:
            ActivityNotFoundError: If the activity does not exist
        """
        self._ensure_agent()

        activity = self.db.get_activity(activity_id)
        if activity is None:
            raise ActivityNotFoundError(activity_id)

        logger.info("Running activity %s", activity_id)
        self.console.print(f"[bold cyan]⚡ Activity: {activity.title}[/bold cyan]")
        self.console.print(f"[dim]{activity.description}[/dim]")
        if activity.instructions:
            self.console.print(f"[yellow]📋 Instructions: {activity.instructions}[/yellow]")
        self.console.print()

        state = load_state(activity.state)
        steps = self.db.get_steps_for_activity(activity_id)

        for number, step in enumerate(steps, start=1):
            self.console.print(
                f"[magenta]🔸 Step {number}: {step.prompt or 'Executing step...'}[/magenta]"
            )
            if step.input_request:
                self.console.print(f"[blue]📥 Input needed: {step.input_request}[/blue]")

            state = self.execute_step(step, state, activity)
            self.db.update_activity_state(activity_id, state)

            self.console.print(f"[green]✓ Step {number} completed[/green]")
            self.console.print()

        self.console.print(f'[bold green]✅ Activity "{activity.title}" completed![/bold green]')
        self.console.print(f"[dim]Expected outcome: {activity.expected_outcome}[/dim]")
        self.console.print()
        return state

    def execute_step(
        self, step: Step, state: dict[str, Any], activity: Activity | None = None
    ) -> dict[str, Any]:
        """
        Execute one step against a working copy of the state.

        Args:
            step: Step to execute
            state: State before the step (not modified)
            activity: Owning activity, for log context

        Returns:
            State after the step
        """
        updated = dict(state)
        execution = self.config.execution

        if state:
            self.console.print(f"[dim]📊 Current state: {json.dumps(state, indent=2)}[/dim]")

        if not execution.auto_confirm and step.prompt:
            if not self._confirm("Execute this step?"):
                self.console.print("[yellow]⏭️  Skipping step...[/yellow]")
                logger.info("Step %s skipped by user", step.id)
                return updated

        if step.prompt and self._invoker is not None:
            updated.update(self._call_agent(step))
        elif step.prompt:
            self.console.print(f"[yellow]🎭 SIMULATION MODE: {step.prompt}[/yellow]")
            self.console.print(
                "[dim]   (No agent configured - install aichat, claude, etc.)[/dim]"
            )

        if step.state_update_logic:
            try:
                updated = merge_state_patch(updated, step.state_update_logic)
                self.console.print(f"[cyan]🔄 State updated: {step.state_update_logic}[/cyan]")
            except ValueError as e:
                logger.warning(
                    "Step %s in %s: %s",
                    step.id,
                    activity.id if activity else step.activity_id,
                    e,
                )
                self.console.print(
                    f"[yellow]⚠️  Invalid state update logic: {step.state_update_logic}[/yellow]"
                )

        if step.outcome_check:
            self.console.print(f"[green]✅ Outcome check: {step.outcome_check}[/green]")

        if execution.pause_between_steps > 0:
            self._sleep(execution.pause_between_steps / 1000)

        return updated

    def close(self) -> None:
        """Release the confirmation channel. Safe to call more than once."""
        if self._confirmation is not None:
            self._confirmation.close()
            self._confirmation = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _call_agent(self, step: Step) -> dict[str, Any]:
        assert self._invoker is not None
        self.console.print("[blue]🤖 Calling agent...[/blue]")
        try:
            response = self._invoker.execute(step.prompt)
        except AgentError as e:
            logger.warning("Agent failed on step %s: %s", step.id, e)
            self.console.print(f"[red]❌ Agent execution failed: {e}[/red]")
            return {"step_error": str(e)}

        preview = response[:RESPONSE_PREVIEW_CHARS]
        if len(response) > RESPONSE_PREVIEW_CHARS:
            preview += "..."
        self.console.print("[green]✅ Agent response received:[/green]")
        self.console.print(preview, style="cyan", markup=False)
        return {"last_agent_response": response, "step_completed": True}

    def _ensure_agent(self) -> None:
        if self._agent_initialized:
            return
        self._agent_initialized = True

        provider_name = self.config.agent.provider
        provider = self.registry.lookup(provider_name)
        if provider is None:
            self.console.print(
                f"[yellow]⚠️  Agent provider '{provider_name}' not found. "
                "Running in simulation mode.[/yellow]"
            )
            return

        if not probe_available(self.registry, provider_name):
            self.console.print(
                f"[yellow]⚠️  Agent CLI '{provider.command}' not found. "
                "Running in simulation mode.[/yellow]"
            )
            self.console.print("[dim]   Install it or run: stories config agents[/dim]")
            return

        self._invoker = AgentInvoker(provider)
        logger.info("Agent initialized: %s", provider.name)
        self.console.print(f"[green]🤖 Agent initialized: {provider.label}[/green]")

    def _confirm(self, message: str) -> bool:
        if self._confirmation is None:
            self._confirmation = self._confirmation_factory()
        return self._confirmation.ask(message)
