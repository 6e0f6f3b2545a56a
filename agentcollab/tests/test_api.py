"""
Tests for the FastAPI routers.

The shared service is replaced with one over in-memory stores and a
scripted completion service.
"""

import json

import pytest
from fastapi.testclient import TestClient

from agentcollab.collaboration.collaboration_api import get_service
from agentcollab.events.sse import SSE_DONE, iter_sse_payloads
from agentcollab.main import app
from agentcollab.tests.fakes import ScriptedCompletion, build_service, make_agent


@pytest.fixture
def completion():
    return ScriptedCompletion(
        generation=json.dumps(
            {
                "name": "Generated",
                "description": "Made from a prompt",
                "expertise": "everything",
                "personality": "Calm",
                "systemPrompt": "You are Generated.",
            }
        )
    )


@pytest.fixture
def agents():
    return [make_agent("Lead Coordinator", "coordination"), make_agent("Helper", "research")]


@pytest.fixture
def service(agents, completion):
    return build_service(agents, completion)


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create_collaboration(client, agents):
    response = client.post(
        "/api/collaborations",
        json={
            "name": "Launch",
            "description": "Plan the launch",
            "selectedAgents": [a.id for a in agents],
        },
    )
    assert response.status_code == 201
    return response.json()


# ============================================================================
# App
# ============================================================================


class TestApp:
    """Tests for the app-level endpoints."""

    def test_health(self, client):
        """Health check reports healthy."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root_lists_endpoints(self, client):
        """Root endpoint describes the API."""
        data = client.get("/").json()
        assert data["endpoints"]["collaborations"] == "/api/collaborations"


# ============================================================================
# Agents
# ============================================================================


class TestAgentsApi:
    """Tests for /api/agents."""

    def test_create_and_get(self, client):
        """Created agents are returned in camelCase and can be fetched."""
        response = client.post(
            "/api/agents",
            json={"name": "Writer", "expertise": "copy", "systemPrompt": "You write."},
        )
        assert response.status_code == 201
        created = response.json()
        assert created["systemPrompt"] == "You write."

        fetched = client.get(f"/api/agents/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Writer"

    def test_list(self, client, agents):
        """All stored agents are listed."""
        names = {a["name"] for a in client.get("/api/agents").json()}
        assert names == {a.name for a in agents}

    def test_generate(self, client, service):
        """Generated agents are stored."""
        response = client.post("/api/agents/generate", json={"prompt": "Someone helpful"})

        assert response.status_code == 201
        assert response.json()["name"] == "Generated"
        assert service.agents.load(response.json()["id"]) is not None

    def test_generate_failure_is_bad_gateway(self, client, completion):
        """Unusable generator output maps to 502."""
        completion.generation = "not json"
        response = client.post("/api/agents/generate", json={"prompt": "Someone"})
        assert response.status_code == 502

    def test_delete(self, client, agents):
        """Deleting removes the agent; deleting again is 404."""
        assert client.delete(f"/api/agents/{agents[1].id}").status_code == 200
        assert client.get(f"/api/agents/{agents[1].id}").status_code == 404
        assert client.delete(f"/api/agents/{agents[1].id}").status_code == 404


# ============================================================================
# Collaborations
# ============================================================================


class TestCollaborationsApi:
    """Tests for /api/collaborations."""

    def test_create_and_list(self, client, agents):
        """A created collaboration is active and listed."""
        created = _create_collaboration(client, agents)

        assert created["status"] == "active"
        assert created["selectedAgents"] == [a.id for a in agents]
        assert [c["id"] for c in client.get("/api/collaborations").json()] == [created["id"]]

    def test_create_without_agents(self, client):
        """No selected agents is a bad request."""
        response = client.post(
            "/api/collaborations",
            json={"name": "Launch", "description": "Plan", "selectedAgents": []},
        )
        assert response.status_code == 400

    def test_get_unknown(self, client):
        """Unknown collaborations are 404."""
        assert client.get("/api/collaborations/missing").status_code == 404

    def test_send_message_runs_to_completion(self, client, agents):
        """The synchronous endpoint returns the completed collaboration and its events."""
        created = _create_collaboration(client, agents)

        response = client.post(
            f"/api/collaborations/{created['id']}/messages", json={"message": "Draft a tagline"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["collaboration"]["status"] == "completed"
        assert data["collaboration"]["finalResult"] == "integration by Lead Coordinator"
        assert [e["type"] for e in data["events"]][-1] == "complete"

    def test_stream(self, client, agents):
        """The stream carries every event and ends with [DONE]."""
        created = _create_collaboration(client, agents)

        response = client.post(
            f"/api/collaborations/{created['id']}/stream", json={"message": "Draft a tagline"}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.text.endswith(SSE_DONE)
        payloads = list(iter_sse_payloads(response.text.splitlines()))
        assert [p["type"] for p in payloads] == [
            "phase",
            "message",
            "phase",
            "agent_working",
            "message",
            "phase",
            "message",
            "complete",
        ]
        assert payloads[0]["agentName"] == "Lead Coordinator"
        assert payloads[4]["message"]["agentName"] == "Helper"

        stored = client.get(f"/api/collaborations/{created['id']}").json()
        assert stored["status"] == "completed"
        assert len(stored["messages"]) == 4

    def test_stream_empty_message(self, client, agents):
        """A blank message is rejected before the stream opens."""
        created = _create_collaboration(client, agents)
        response = client.post(
            f"/api/collaborations/{created['id']}/stream", json={"message": "  "}
        )
        assert response.status_code == 400

    def test_stream_unknown_collaboration(self, client):
        """Streaming into an unknown collaboration is 404."""
        response = client.post("/api/collaborations/missing/stream", json={"message": "hi"})
        assert response.status_code == 404

    def test_stream_completed_collaboration(self, client, agents):
        """A completed collaboration accepts no new messages."""
        created = _create_collaboration(client, agents)
        client.post(f"/api/collaborations/{created['id']}/messages", json={"message": "first"})

        response = client.post(
            f"/api/collaborations/{created['id']}/stream", json={"message": "second"}
        )

        assert response.status_code == 409
        stored = client.get(f"/api/collaborations/{created['id']}").json()
        assert [m["content"] for m in stored["messages"] if m["role"] == "user"] == ["first"]

    def test_stream_without_valid_agents(self, client, service, agents):
        """A roster whose agents are all gone is a bad request."""
        created = _create_collaboration(client, agents)
        for agent in agents:
            service.agents.delete(agent.id)

        response = client.post(
            f"/api/collaborations/{created['id']}/stream", json={"message": "hi"}
        )

        assert response.status_code == 400
