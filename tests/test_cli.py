"""
Tests for the stories CLI commands.

Every test runs in a temporary project directory whose config points at
an agent that is never installed, so runs happen in simulation mode.
"""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from stories.cli import app
from stories.core.db import StoriesDatabase

runner = CliRunner()


@pytest.fixture
def project(project_dir: Path) -> Path:
    (project_dir / "stories.config.json").write_text(
        json.dumps(
            {
                "agent": {"provider": "no-such-agent"},
                "execution": {"pause_between_steps": 0, "auto_confirm": True},
            }
        )
    )
    return project_dir


def read_project_config(project: Path) -> dict:
    return json.loads((project / "stories.config.json").read_text())


class TestBanner:
    def test_bare_invocation_shows_banner(self, project: Path):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "Top Level Commands" in result.output
        assert "stories init" in result.output

    def test_version(self, project: Path):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "stories version 1.0.0" in result.output


class TestStoryCommands:
    def test_list_empty(self, project: Path):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "No stories found" in result.output

    def test_init_then_list(self, project: Path):
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert "website-builder" in result.output

        result = runner.invoke(app, ["ls"])
        assert result.exit_code == 0
        assert "Website Builder" in result.output
        assert "ID: hello-claude" in result.output

    def test_init_twice_reports_skips(self, project: Path):
        runner.invoke(app, ["init"])
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_run_unknown_story(self, project: Path):
        result = runner.invoke(app, ["run", "ghost"])
        assert result.exit_code == 1
        assert "Story not found: ghost" in result.output

    def test_run_story_in_simulation_mode(self, project: Path):
        runner.invoke(app, ["test"])

        result = runner.invoke(app, ["run", "quick-test"])

        assert result.exit_code == 0, result.output
        assert "SIMULATION MODE" in result.output
        assert "Story completed successfully" in result.output
        with StoriesDatabase(project / "stories.db") as db:
            assert db.get_activity("instant-test").state == {"done": True}

    def test_continue_story(self, project: Path):
        runner.invoke(app, ["test"])
        result = runner.invoke(app, ["continue", "quick-test"])
        assert result.exit_code == 0
        assert "Story continued successfully" in result.output

    def test_run_activity(self, project: Path):
        runner.invoke(app, ["test"])
        result = runner.invoke(app, ["activity", "test-greeting"])
        assert result.exit_code == 0
        assert "Activity completed successfully" in result.output

    def test_run_unknown_activity(self, project: Path):
        result = runner.invoke(app, ["activity", "ghost"])
        assert result.exit_code == 1
        assert "Activity not found: ghost" in result.output

    def test_interrupt_exits_130(self, project: Path):
        runner.invoke(app, ["test"])
        with patch(
            "stories.cli.story.StoryRunner.run_story", side_effect=KeyboardInterrupt
        ):
            result = runner.invoke(app, ["run", "quick-test"])
        assert result.exit_code == 130
        assert "Shutting down" in result.output


class TestAgentCommands:
    def test_list_shows_builtins(self, project: Path):
        result = runner.invoke(app, ["agent", "list"])
        assert result.exit_code == 0
        assert "claude" in result.output
        assert "(built-in)" in result.output

    def test_bare_agent_lists(self, project: Path):
        result = runner.invoke(app, ["agent"])
        assert result.exit_code == 0
        assert "Available AI Agents" in result.output

    def test_add_and_remove_custom(self, project: Path):
        result = runner.invoke(app, ["agent", "add", "mychat", "mychat", "--args", "-q {prompt}"])
        assert result.exit_code == 0
        assert "Added custom agent: mychat" in result.output

        saved = json.loads((project / "custom-agents.json").read_text())
        assert saved["mychat"]["argsTemplate"] == "-q {prompt}"

        result = runner.invoke(app, ["agent", "list"])
        assert "(custom)" in result.output

        result = runner.invoke(app, ["agent", "remove", "mychat"])
        assert result.exit_code == 0
        assert "Removed agent: mychat" in result.output

    def test_remove_unknown_warns(self, project: Path):
        result = runner.invoke(app, ["agent", "remove", "ghost"])
        assert result.exit_code == 0
        assert "Agent not found: ghost" in result.output

    def test_remove_builtin_fails(self, project: Path):
        result = runner.invoke(app, ["agent", "remove", "claude"])
        assert result.exit_code == 2
        assert "Cannot remove built-in provider: claude" in result.output

    def test_switch_unknown_fails(self, project: Path):
        result = runner.invoke(app, ["agent", "switch", "ghost"])
        assert result.exit_code == 2
        assert "Unknown agent: ghost" in result.output

    def test_switch_to_uninstalled_fails(self, project: Path):
        runner.invoke(app, ["agent", "add", "ghost", "stories-no-such-agent-cli"])
        result = runner.invoke(app, ["agent", "switch", "ghost"])
        assert result.exit_code == 2
        assert read_project_config(project)["agent"]["provider"] == "no-such-agent"

    def test_switch_to_installed_agent(self, project: Path):
        runner.invoke(app, ["agent", "add", "py", sys.executable])
        result = runner.invoke(app, ["agent", "switch", "py"])
        assert result.exit_code == 0, result.output
        assert "Switched to agent: py" in result.output
        assert read_project_config(project)["agent"]["provider"] == "py"

    def test_list_checks_each_row_by_its_own_command(
        self, project: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(
            "stories.core.agents.invoker.shutil.which",
            lambda cmd: cmd if cmd == sys.executable else None,
        )
        runner.invoke(app, ["agent", "add", "claude", sys.executable])

        result = runner.invoke(app, ["agent", "list"])
        assert result.exit_code == 0
        assert "✅ claude (custom)" in result.output
        assert "❌ claude (built-in)" in result.output


class TestConfigCommands:
    def test_show(self, project: Path):
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Provider: no-such-agent" in result.output
        assert "Pause between steps: 0ms" in result.output

    def test_agents_report(self, project: Path):
        result = runner.invoke(app, ["config", "agents"])
        assert result.exit_code == 0
        assert "Not installed" in result.output

    def test_set_agent(self, project: Path):
        runner.invoke(app, ["agent", "add", "py", sys.executable])
        result = runner.invoke(app, ["config", "set-agent", "py", "--model", "small"])
        assert result.exit_code == 0
        agent = read_project_config(project)["agent"]
        assert agent["provider"] == "py"
        assert agent["model"] == "small"

    def test_set_unknown_agent(self, project: Path):
        result = runner.invoke(app, ["config", "set-agent", "ghost"])
        assert result.exit_code == 2


def test_prompts_names(project: Path):
    result = runner.invoke(app, ["prompts", "--names"])
    assert result.exit_code == 0
    assert result.output.split() == [
        "generate-ui",
        "lint-code",
        "create-component",
        "setup-database",
        "write-tests",
        "refactor-code",
        "debug-issue",
        "optimize-performance",
        "validate-outcome",
        "update-state",
    ]


def test_ui_serves_configured_database(project: Path):
    with patch("uvicorn.run") as run_server:
        result = runner.invoke(app, ["ui", "--no-open", "--port", "4000"])

    assert result.exit_code == 0, result.output
    fastapi_app = run_server.call_args.args[0]
    assert fastapi_app.state.db_path == "stories.db"
    assert run_server.call_args.kwargs["port"] == 4000


def test_invalid_config_value_exits_with_user_error(project: Path):
    (project / "stories.config.json").write_text(
        json.dumps({"execution": {"log_level": "loud", "pause_between_steps": -1}})
    )

    result = runner.invoke(app, ["list"])

    assert result.exit_code == 2
    assert "Invalid configuration" in result.output
    assert "log_level" in result.output
