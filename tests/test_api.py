"""
Tests for the web API.

Uses FastAPI's TestClient against an app bound to a temporary database.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from stories.api import create_app
from stories.core.agents import AgentRegistry, ProviderDescriptor
from stories.core.config import StoriesConfig
from stories.core.config.models import ExecutionConfig
from stories.core.db import StoriesDatabase, Story


@pytest.fixture
def client(
    db: StoriesDatabase, fast_config: StoriesConfig, registry: AgentRegistry, tmp_path: Path
) -> TestClient:
    app = create_app(db.db_path, config=fast_config, registry=registry, web_dist=tmp_path / "none")
    return TestClient(app)


class TestStories:
    def test_list_empty(self, client: TestClient):
        response = client.get("/api/stories")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_and_get(self, client: TestClient, sample_story: Story):
        assert [s["id"] for s in client.get("/api/stories").json()] == ["sample"]

        response = client.get("/api/stories/sample")
        assert response.status_code == 200
        assert response.json()["expected_outcomes"] == {"done": True}

    def test_get_missing(self, client: TestClient):
        response = client.get("/api/stories/ghost")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Story not found: ghost"
        assert body["error_code"] == "NOT_FOUND"

    def test_create(self, client: TestClient, db: StoriesDatabase):
        response = client.post("/api/stories", json={"id": "new", "title": "New"})
        assert response.status_code == 201
        assert response.json()["title"] == "New"
        assert db.get_story("new") is not None

    def test_create_duplicate(self, client: TestClient, sample_story: Story):
        response = client.post("/api/stories", json={"id": "sample", "title": "Again"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE"

    def test_create_invalid(self, client: TestClient):
        response = client.post("/api/stories", json={"title": "No id"})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_update_keeps_omitted_fields(self, client: TestClient, sample_story: Story):
        response = client.put("/api/stories/sample", json={"title": "Renamed"})
        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Renamed"
        assert body["description"] == "A story for tests"

    def test_update_missing(self, client: TestClient):
        assert client.put("/api/stories/ghost", json={"title": "x"}).status_code == 404

    def test_delete(self, client: TestClient, sample_story: Story, db: StoriesDatabase):
        response = client.delete("/api/stories/sample")
        assert response.status_code == 200
        assert db.get_story("sample") is None
        assert client.delete("/api/stories/sample").status_code == 404


class TestActivitiesAndSteps:
    def test_activities_for_story(self, client: TestClient, sample_story: Story):
        titles = [a["title"] for a in client.get("/api/stories/sample/activities").json()]
        assert titles == ["Alpha", "Beta"]

    def test_get_activity(self, client: TestClient, sample_story: Story):
        assert client.get("/api/activities/act-a").json()["title"] == "Alpha"
        assert client.get("/api/activities/ghost").status_code == 404

    def test_steps_in_order(self, client: TestClient, sample_story: Story):
        ids = [s["id"] for s in client.get("/api/activities/act-b/steps").json()]
        assert ids == ["beta-1", "beta-2"]

    def test_create_activity_and_step(self, client: TestClient, db: StoriesDatabase):
        response = client.post(
            "/api/activities", json={"id": "a", "story_id": "s", "title": "A", "state": {"k": 1}}
        )
        assert response.status_code == 201

        response = client.post(
            "/api/steps",
            json={"id": "s1", "activity_id": "a", "prompt": "go", "state_update_logic": {"x": 1}},
        )
        assert response.status_code == 201
        assert response.json()["state_update_logic"] == '{"x": 1}'
        assert db.get_steps_for_activity("a")[0].prompt == "go"


class TestRun:
    def test_run_story(self, client: TestClient, sample_story: Story, db: StoriesDatabase):
        response = client.post("/api/stories/sample/run")
        assert response.status_code == 200
        assert response.json()["story_id"] == "sample"
        assert db.get_activity("act-b").state == {"beta_1": True, "beta_2": True}

    def test_run_missing_story(self, client: TestClient):
        response = client.post("/api/stories/ghost/run")
        assert response.status_code == 404

    def test_run_activity_returns_state(self, client: TestClient, sample_story: Story):
        response = client.post("/api/activities/act-a/run")
        assert response.status_code == 200
        assert response.json()["state"] == {"alpha_1": True, "alpha_2": True}

    def test_run_forces_auto_confirm(
        self, db: StoriesDatabase, registry: AgentRegistry, sample_story: Story, tmp_path: Path
    ):
        config = StoriesConfig(
            execution=ExecutionConfig(auto_confirm=False, pause_between_steps=0),
            agent={"provider": "no-such-agent"},
        )
        client = TestClient(
            create_app(db.db_path, config=config, registry=registry, web_dist=tmp_path / "none")
        )

        response = client.post("/api/activities/act-a/run")

        assert response.status_code == 200
        assert response.json()["state"]["alpha_2"] is True


class TestMeta:
    def test_prompts(self, client: TestClient):
        prompts = client.get("/api/prompts").json()
        assert prompts[0]["name"] == "generate-ui"
        assert len(prompts) == 10

    def test_agents(self, client: TestClient):
        agents = {a["name"]: a for a in client.get("/api/agents").json()}
        assert agents["claude"]["is_custom"] is False
        assert agents["claude"]["command"] == "claude"
        assert not any(a["current"] for a in agents.values())

    def test_shadowed_builtin_reports_its_own_availability(
        self, client: TestClient, registry: AgentRegistry, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setattr(
            "stories.core.agents.invoker.shutil.which",
            lambda cmd: cmd if cmd == sys.executable else None,
        )
        registry.register(ProviderDescriptor.custom("claude", sys.executable))

        rows = [a for a in client.get("/api/agents").json() if a["name"] == "claude"]

        assert [(a["is_custom"], a["available"]) for a in rows] == [(False, False), (True, True)]

    def test_health(self, client: TestClient):
        assert client.get("/health").json() == {"status": "healthy"}


def test_serves_web_build(db: StoriesDatabase, fast_config: StoriesConfig, tmp_path: Path):
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "index.html").write_text("<h1>Stories</h1>")

    client = TestClient(create_app(db.db_path, config=fast_config, web_dist=dist))

    assert "Stories" in client.get("/").text
    assert client.get("/api/stories").status_code == 200
