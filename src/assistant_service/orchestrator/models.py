"""
HTTP-модели — вход и выход HTTP-оболочки диспетчера.

Определяет структуры данных для:
- RouteRequest / RouteResponse — маршрутизация одного сообщения
- AgentInfo / AgentListResponse — список видимых агентов
- StoredMessage / StoredState — документ диалога в хранилище
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class RouteRequest(BaseModel):
    """
    Входящий запрос маршрутизации.

    Attributes:
        input: Текст сообщения пользователя (непустая строка).
        user_id: Идентификатор пользователя ("web" по умолчанию).
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"input": "summarize my tasks", "userId": "web"}},
    )

    input: StrictStr = Field(
        ...,
        description="Текст сообщения пользователя",
        min_length=1,
    )

    user_id: Optional[StrictStr] = Field(
        default=None,
        alias="userId",
        description="Идентификатор пользователя",
    )


class RouteResponse(BaseModel):
    """Ответ маршрутизации: выбранный агент и его ответ."""

    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(..., alias="agentId")
    reply: str
    metadata: Optional[dict[str, Any]] = None


class AgentInfo(BaseModel):
    """Видимый агент для списка в UI."""

    id: str
    description: str


class AgentListResponse(BaseModel):
    agents: list[AgentInfo] = Field(default_factory=list)


class StoredMessage(BaseModel):
    """
    Сообщение в истории диалога.

    Attributes:
        role: user — сообщение пользователя, agent — ответ агента.
        text: Текст сообщения.
        agent_id: id агента, если role == "agent".
        at: Время в ISO-8601.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    role: Literal["user", "agent"]
    text: str
    agent_id: Optional[str] = Field(default=None, alias="agentId")
    at: str


class StoredState(BaseModel):
    """
    Документ диалога в хранилище.

    Attributes:
        memory: Сохраняемая память диалога (lastAgentId, lastReply, updatedAt).
        messages: История сообщений (обрезается до последних N).
        updated_at: Время последнего обновления.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    memory: dict[str, Any] = Field(default_factory=dict)
    messages: list[StoredMessage] = Field(default_factory=list)
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
