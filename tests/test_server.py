"""
Тесты HTTP-адаптера (starlette TestClient).
"""

import asyncio

import pytest
from starlette.testclient import TestClient

from assistant_service.agents.general import EXECUTOR_REPLY
from assistant_service.config import AssistantConfig
from assistant_service.core import AgentResult, FunctionAgent
from assistant_service.orchestrator import Assistant, InMemoryConversationStore, build_default_assistant
from assistant_service.server import create_app


@pytest.fixture
def store():
    return InMemoryConversationStore()


@pytest.fixture
def client(store):
    config = AssistantConfig()
    app = create_app(config=config, assistant=build_default_assistant(config), store=store)
    with TestClient(app) as test_client:
        yield test_client


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_list_agents_only_visible(client):
    response = client.get("/api/agents")

    assert response.status_code == 200
    assert response.json() == {
        "agents": [
            {"id": "todo", "description": "Connects to ClickUp MCP, summarizes tasks, and proposes help."},
            {"id": "finance", "description": "Connects to Flowtly to summarize financial metrics."},
        ]
    }


@pytest.mark.parametrize(
    "payload",
    [{}, {"input": ""}, {"input": 42}, {"userId": "web"}, {"userId": 7}],
)
def test_route_missing_input(client, payload):
    response = client.post("/api/route", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing input"}


def test_route_invalid_json(client):
    response = client.post("/api/route", content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing input"}


def test_route_to_executor(client):
    response = client.post("/api/route", json={"input": "hello there"})

    assert response.status_code == 200
    assert response.json() == {
        "agentId": "executor",
        "reply": EXECUTOR_REPLY,
        "metadata": {"input": "hello there"},
    }


def test_route_tasks_without_provider(client):
    response = client.post("/api/route", json={"input": "summarize my tasks"})

    body = response.json()
    assert body["agentId"] == "todo"
    assert body["metadata"] == {"connected": False}


def test_route_persists_conversation(client, store):
    client.post("/api/route", json={"input": "hello there", "userId": "u-1"})

    document = asyncio.run(store.get("global"))

    assert document["memory"]["lastAgentId"] == "executor"
    assert document["memory"]["lastReply"] == EXECUTOR_REPLY
    assert document["updatedAt"] == document["memory"]["updatedAt"]
    assert [message["role"] for message in document["messages"]] == ["user", "agent"]
    assert document["messages"][0]["text"] == "hello there"
    assert "agentId" not in document["messages"][0]
    assert document["messages"][1]["agentId"] == "executor"


def test_messages_trimmed_to_limit():
    store = InMemoryConversationStore()
    config = AssistantConfig(store_max_messages=3, store_doc_id="trim")
    app = create_app(config=config, assistant=build_default_assistant(config), store=store)

    with TestClient(app) as client:
        for text in ("one", "two", "three"):
            client.post("/api/route", json={"input": text})

    messages = asyncio.run(store.get("trim"))["messages"]
    assert [message["text"] for message in messages] == [EXECUTOR_REPLY, "three", EXECUTOR_REPLY]


def test_user_id_passed_to_agents(store):
    assistant = Assistant()
    assistant.register(
        FunctionAgent("whoami", can_handle=lambda ctx: True, handle=lambda ctx: AgentResult(reply=ctx.user_id))
    )
    app = create_app(config=AssistantConfig(), assistant=assistant, store=store)

    with TestClient(app) as client:
        explicit = client.post("/api/route", json={"input": "hi", "userId": "u-42"}).json()
        default = client.post("/api/route", json={"input": "hi"}).json()

    assert explicit["reply"] == "u-42"
    assert default["reply"] == "web"


def test_handler_failure_returns_500(store):
    def failing(ctx):
        raise RuntimeError("agent crashed")

    assistant = Assistant()
    assistant.register(FunctionAgent("boom", can_handle=lambda ctx: True, handle=failing))
    app = create_app(config=AssistantConfig(), assistant=assistant, store=store)

    with TestClient(app) as client:
        response = client.post("/api/route", json={"input": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "agent crashed"}
    assert asyncio.run(store.get("global")) == {}


def test_empty_registry_returns_500(store):
    app = create_app(config=AssistantConfig(), assistant=Assistant(), store=store)

    with TestClient(app) as client:
        response = client.post("/api/route", json={"input": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "No agents registered"}


def test_route_whitespace_input_is_routed(client):
    response = client.post("/api/route", json={"input": "   "})

    assert response.status_code == 200
    assert response.json()["agentId"] == "executor"


def test_route_invalid_user_id(client):
    """Нестроковый userId при валидном input — отдельная ошибка."""
    response = client.post("/api/route", json={"input": "hello", "userId": 7})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid userId"}


def test_route_keeps_stored_memory_keys(client, store):
    asyncio.run(store.set_merge("global", {"memory": {"theme": "dark", "lastAgentId": "todo"}}))

    client.post("/api/route", json={"input": "hello there"})

    memory = asyncio.run(store.get("global"))["memory"]
    assert memory["theme"] == "dark"
    assert memory["lastAgentId"] == "executor"


class FailingWriteStore(InMemoryConversationStore):
    async def set_merge(self, doc_id, data):
        raise RuntimeError("store unavailable")


def test_store_write_failure_returns_json_500():
    config = AssistantConfig()
    app = create_app(config=config, assistant=build_default_assistant(config), store=FailingWriteStore())

    with TestClient(app) as client:
        response = client.post("/api/route", json={"input": "hello there"})

    assert response.status_code == 500
    assert response.json() == {"error": "store unavailable"}
