"""
IntentRouter — выбор агента по тексту запроса и описаниям агентов.

Роутер опционален. Порядок разрешения на каждый запрос:
1. Явное переопределение в AgentContext.memory.intent_router
   (вызывающий код или тест подставляет детерминированную маршрутизацию).
2. LLMIntentRouter — создаётся только если в конфигурации есть ключ
   reasoning-сервиса.
3. Иначе роутера нет, диспетчер сразу сканирует предикаты.

Любой сбой роутера (сеть, не-2xx, невалидный JSON, нет agentId)
диспетчер трактует как "решения нет".
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

if TYPE_CHECKING:
    from ..core import AgentContext, BaseAgent
    from ..llm import ReasoningClient

logger = logging.getLogger(__name__)


class IntentDecision(BaseModel):
    """
    Решение роутера: какой агент должен обработать запрос.

    Создаётся один раз на запрос, не переиспользуется и не повторяется.

    Attributes:
        agent_id: id выбранного агента (в JSON — ключ "agentId").
        reason: Краткое объяснение выбора.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    agent_id: StrictStr = Field(
        ...,
        alias="agentId",
        description="id выбранного агента",
    )

    reason: Optional[str] = Field(
        default=None,
        description="Краткое объяснение выбора",
    )

    @field_validator("reason", mode="before")
    @classmethod
    def _reason_text_only(cls, value: Any) -> Optional[str]:
        """Нестроковое объяснение отбрасывается, решение остаётся в силе."""
        return value if isinstance(value, str) else None


class IntentRouter(Protocol):
    """
    Протокол роутера намерений.

    Любая корутинная функция `(context, agents) -> IntentDecision | None`
    удовлетворяет протоколу.
    """

    async def __call__(
        self,
        context: AgentContext,
        agents: Sequence[BaseAgent],
    ) -> Optional[IntentDecision]:
        ...


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """
    Найти первый JSON-объект в свободном тексте.

    Сервис может обернуть JSON в прозу или markdown, поэтому разбор
    начинается с каждой открывающей фигурной скобки по очереди.

    Args:
        text: Ответ reasoning-сервиса.

    Returns:
        Первый разобранный словарь или None.
    """
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start >= 0:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None


def parse_decision(text: str) -> Optional[IntentDecision]:
    """
    Извлечь IntentDecision из ответа сервиса.

    Returns:
        Решение или None, если JSON нет либо в нём нет строкового agentId.
    """
    payload = extract_json_object(text)
    if payload is None:
        return None
    try:
        return IntentDecision.model_validate(payload)
    except ValidationError:
        logger.debug("Routing payload without a valid agentId: %s", payload)
        return None


ROUTING_PROMPT = (
    "You are a routing assistant for a multi-agent system.\n"
    "Pick the best agent id for the user's request.\n"
    'Return ONLY valid JSON: {{"agentId": "<id>", "reason": "<short reason>"}}.\n'
    "\n"
    "User input: {user_input}\n"
    "Agents:\n"
    "{agent_list}"
)


class LLMIntentRouter:
    """
    Роутер намерений на базе внешнего reasoning-сервиса.

    Отправляет текст запроса и пары (id, description) всех агентов,
    включая скрытые, и разбирает JSON из ответа.

    Attributes:
        client: Клиент reasoning-сервиса.
    """

    def __init__(self, client: ReasoningClient) -> None:
        self.client = client

    def build_prompt(self, context: AgentContext, agents: Sequence[BaseAgent]) -> str:
        """Сформировать промпт маршрутизации."""
        agent_list = "\n".join(f"- {agent.id}: {agent.description}" for agent in agents)
        return ROUTING_PROMPT.format(
            user_input=json.dumps(context.input, ensure_ascii=False),
            agent_list=agent_list,
        )

    async def __call__(
        self,
        context: AgentContext,
        agents: Sequence[BaseAgent],
    ) -> Optional[IntentDecision]:
        """
        Выбрать агента для запроса.

        Raises:
            openai.APIError: Сетевые и HTTP-ошибки сервиса пробрасываются,
                их гасит диспетчер.
        """
        text = await self.client.generate(
            self.build_prompt(context, agents),
            temperature=0.0,
        )
        if not text:
            return None
        return parse_decision(text)

    def __repr__(self) -> str:
        return f"<LLMIntentRouter(client={self.client!r})>"


def build_intent_router(client: Optional[ReasoningClient]) -> Optional[LLMIntentRouter]:
    """Создать LLM-роутер, если reasoning-клиент сконфигурирован."""
    if client is None:
        return None
    return LLMIntentRouter(client)
