"""
HTTP-адаптер для `maciek-assistant`.

Поднимает FastAPI-приложение с эндпоинтами:
- GET  /healthz    — проверка готовности контейнера;
- GET  /api/agents — список видимых агентов;
- POST /api/route  — маршрутизация одного сообщения через Assistant.

Запускается командой:
uvicorn assistant_service.server:app --host 0.0.0.0 --port ${PORT:-8080}
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from . import __version__
from .config import AssistantConfig, build_agent_memory
from .core import AgentContext, AgentMemory
from .orchestrator import (
    AgentInfo,
    AgentListResponse,
    Assistant,
    ConversationStore,
    InMemoryConversationStore,
    RouteRequest,
    RouteResponse,
    StoredMessage,
    StoredState,
    build_default_assistant,
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_USER_ID = "web"
MISSING_INPUT_ERROR = "Missing input"
INVALID_USER_ID_ERROR = "Invalid userId"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _trim_messages(messages: list[StoredMessage], max_messages: int) -> list[StoredMessage]:
    """Оставить последние max_messages сообщений; при max_messages <= 0 история не режется."""
    if max_messages > 0 and len(messages) > max_messages:
        return messages[-max_messages:]
    return messages


async def _close_providers(memory: AgentMemory) -> None:
    for provider in (memory.task_provider, memory.finance_provider):
        aclose = getattr(provider, "aclose", None)
        if aclose is not None:
            await aclose()


def create_app(
    config: Optional[AssistantConfig] = None,
    assistant: Optional[Assistant] = None,
    store: Optional[ConversationStore] = None,
) -> FastAPI:
    """
    Собрать FastAPI-приложение.

    Args:
        config: Конфигурация процесса. Если не указана, берётся из окружения.
        assistant: Диспетчер. Если не указан, собирается стандартный.
        store: Хранилище диалога. По умолчанию in-memory.
    """
    config = config or AssistantConfig.from_env()
    assistant = assistant or build_default_assistant(config)
    store = store or InMemoryConversationStore()
    base_memory = build_agent_memory(config)

    logger.info(
        "Assistant ready: agents=%s, tasks=%s, finance=%s, intent_router=%s",
        list(assistant.registry),
        "on" if base_memory.task_provider else "off",
        "on" if base_memory.finance_provider else "off",
        "on" if assistant.intent_router else "off",
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await _close_providers(base_memory)

    app = FastAPI(
        title="maciek-assistant",
        version=__version__,
        description="HTTP-адаптер диспетчера агентов личного ассистента.",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.cors_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.assistant = assistant
    app.state.store = store
    app.state.config = config

    @app.get("/healthz")
    async def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/agents")
    async def list_agents() -> dict[str, Any]:
        response = AgentListResponse(
            agents=[AgentInfo(id=agent.id, description=agent.description) for agent in assistant.list_agents()]
        )
        return response.model_dump()

    @app.post("/api/route")
    async def route_message(request: Request) -> JSONResponse:
        try:
            payload: Any = await request.json()
        except ValueError:
            payload = None

        try:
            route_request = RouteRequest.model_validate(payload if isinstance(payload, dict) else {})
        except ValidationError as exc:
            invalid_fields = {error["loc"][0] for error in exc.errors() if error["loc"]}
            error = MISSING_INPUT_ERROR if "input" in invalid_fields else INVALID_USER_ID_ERROR
            return JSONResponse(status_code=400, content={"error": error})

        user_id = route_request.user_id or DEFAULT_USER_ID
        doc_id = config.store_doc_id

        try:
            state = StoredState.model_validate(await store.get(doc_id))
            context = AgentContext(
                user_id=user_id,
                input=route_request.input,
                memory=base_memory.model_copy(),
            )
            outcome = await assistant.route(context)

            now = _utc_now_iso()
            reply = outcome.result.reply
            messages = _trim_messages(
                [
                    *state.messages,
                    StoredMessage(role="user", text=route_request.input, at=now),
                    StoredMessage(role="agent", text=reply, agent_id=outcome.agent.id, at=now),
                ],
                config.store_max_messages,
            )
            await store.set_merge(
                doc_id,
                {
                    "memory": {
                        **state.memory,
                        "lastAgentId": outcome.agent.id,
                        "lastReply": reply,
                        "updatedAt": now,
                    },
                    "messages": [message.model_dump(by_alias=True, exclude_none=True) for message in messages],
                    "updatedAt": now,
                },
            )
        except Exception as exc:
            logger.exception("Route request failed")
            return JSONResponse(status_code=500, content={"error": str(exc)})

        response = RouteResponse(agent_id=outcome.agent.id, reply=reply, metadata=outcome.result.metadata)
        return JSONResponse(content=response.model_dump(by_alias=True))

    return app


app = create_app()
