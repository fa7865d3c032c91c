"""
Assistant — диспетчер запросов между агентами.

Отвечает за:
1. Владение реестром агентов
2. Выбор агента: роутер намерений → первый подходящий предикат → агент по умолчанию
3. Вызов обработчика выбранного агента и возврат его результата без изменений
"""

from __future__ import annotations

import logging
import time
from typing import Any, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError

from ..agents import create_default_agents
from ..config import AssistantConfig
from ..core import (
    AgentContext,
    AgentRegistry,
    AgentResult,
    BaseAgent,
    NoAgentsRegisteredError,
)
from ..llm import build_reasoning_client
from .intent_router import IntentDecision, IntentRouter, build_intent_router

logger = logging.getLogger(__name__)


class RouteOutcome(BaseModel):
    """
    Итог маршрутизации одного запроса.

    Attributes:
        agent: Выбранный агент.
        result: Результат его обработчика (без пост-обработки).
        routed_by: Как выбран агент: intent (роутер), predicate (скан
            предикатов) или default (первый зарегистрированный).
        reason: Объяснение роутера, если агент выбран им.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    agent: BaseAgent
    result: AgentResult
    routed_by: Literal["intent", "predicate", "default"]
    reason: Optional[str] = None


class Assistant:
    """
    Диспетчер: реестр агентов плюс алгоритм выбора.

    Сканирование предикатов идёт строго в порядке регистрации, первый
    совпавший агент побеждает. Агент с предикатом "всегда True" делает
    недостижимыми для скана всех агентов, зарегистрированных после него.

    Attributes:
        registry: Реестр агентов.
        intent_router: Роутер из конфигурации процесса (может отсутствовать).
    """

    def __init__(
        self,
        registry: Optional[AgentRegistry] = None,
        intent_router: Optional[IntentRouter] = None,
    ) -> None:
        """
        Инициализация диспетчера.

        Args:
            registry: Реестр агентов. Если не указан, создаётся пустой.
            intent_router: Роутер намерений по умолчанию. Переопределение
                из AgentContext.memory имеет приоритет.
        """
        self.registry = registry or AgentRegistry()
        self.intent_router = intent_router

    def register(self, agent: BaseAgent) -> None:
        """
        Зарегистрировать агента.

        Raises:
            DuplicateAgentIdError: Если id уже занят; реестр не меняется.
        """
        self.registry.register(agent)

    def list_agents(self) -> list[BaseAgent]:
        """Видимые агенты в порядке регистрации."""
        return self.registry.list_visible()

    def resolve_intent_router(self, context: AgentContext) -> Optional[IntentRouter]:
        """Роутер для запроса: переопределение из памяти, иначе из конфигурации."""
        override = context.memory.intent_router
        if override is not None:
            return override
        return self.intent_router

    async def route(self, context: AgentContext) -> RouteOutcome:
        """
        Выбрать агента и выполнить его обработчик.

        Args:
            context: Контекст запроса.

        Returns:
            RouteOutcome с агентом и его результатом.

        Raises:
            NoAgentsRegisteredError: Реестр пуст.
            Exception: Неожиданные ошибки обработчика пробрасываются как есть.
        """
        start_time = time.perf_counter()
        agents = self.registry.list_all()

        selected: Optional[BaseAgent] = None
        routed_by: Literal["intent", "predicate", "default"] = "default"
        reason: Optional[str] = None

        router = self.resolve_intent_router(context)
        if router is not None:
            decision = await self._ask_router(router, context, agents)
            if decision is not None:
                selected = self.registry.get(decision.agent_id)
                if selected is not None:
                    routed_by = "intent"
                    reason = decision.reason
                else:
                    logger.info(
                        "Intent router picked unknown agent '%s', falling back to predicates",
                        decision.agent_id,
                    )

        if selected is None:
            selected = next((agent for agent in agents if agent.can_handle(context)), None)
            if selected is not None:
                routed_by = "predicate"

        if selected is None:
            if not agents:
                raise NoAgentsRegisteredError()
            selected = agents[0]
            routed_by = "default"

        logger.info(
            "Routing request from user '%s' to agent '%s' (by %s)",
            context.user_id,
            selected.id,
            routed_by,
        )

        result = await selected.handle(context)

        logger.info(
            "Agent '%s' replied in %.2fms",
            selected.id,
            (time.perf_counter() - start_time) * 1000,
        )
        return RouteOutcome(agent=selected, result=result, routed_by=routed_by, reason=reason)

    async def _ask_router(
        self,
        router: IntentRouter,
        context: AgentContext,
        agents: Sequence[BaseAgent],
    ) -> Optional[IntentDecision]:
        """
        Спросить роутер, подавив любые его сбои.

        Returns:
            Валидное решение или None.
        """
        try:
            decision: Any = await router(context, agents)
        except Exception as exc:
            logger.warning(
                "Intent router failed, falling back to predicates: %s: %s",
                type(exc).__name__,
                exc,
            )
            return None

        if decision is None or isinstance(decision, IntentDecision):
            return decision

        try:
            return IntentDecision.model_validate(decision)
        except ValidationError:
            logger.warning("Intent router returned a malformed decision: %r", decision)
            return None

    def __repr__(self) -> str:
        return f"<Assistant(registry={self.registry!r}, intent_router={self.intent_router!r})>"


def build_default_assistant(config: Optional[AssistantConfig] = None) -> Assistant:
    """
    Собрать диспетчер со стандартным набором агентов.

    Роутер намерений и LLM-сводки finance включаются только при наличии
    ключа reasoning-сервиса в конфигурации.

    Args:
        config: Конфигурация процесса. Если не указана, берётся из окружения.
    """
    config = config or AssistantConfig.from_env()
    reasoning_client = build_reasoning_client(config)

    assistant = Assistant(intent_router=build_intent_router(reasoning_client))
    for agent in create_default_agents(summarizer=reasoning_client):
        assistant.register(agent)
    return assistant
