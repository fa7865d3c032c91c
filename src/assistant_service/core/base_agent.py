"""
BaseAgent — абстрактный базовый класс для всех агентов.

Агент — именованная единица логики ответа с предикатом релевантности
(`can_handle`) и обработчиком (`handle`). Агенты неизменяемы после создания,
реестр хранит их по ссылке.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Union

from .context import AgentContext
from .result import AgentResult


class BaseAgent(ABC):
    """
    Абстрактный базовый класс для всех агентов.

    Наследники:
        - TodoAgent — сводка задач из ClickUp
        - FinanceAgent — сводка финансовых метрик из Flowtly
        - StaticReplyAgent — planner / researcher / executor

    Attributes:
        _id: Уникальный идентификатор агента (ключ в реестре, основа равенства).
        _description: Описание назначения; единственный сигнал для роутера намерений.
        _visible: Показывать ли агента пользователю в списке агентов.
    """

    def __init__(self, agent_id: str, description: str = "", visible: bool = True) -> None:
        """
        Инициализация базового агента.

        Args:
            agent_id: Уникальный идентификатор агента.
            description: Человекочитаемое описание назначения.
            visible: False — агент участвует только в маршрутизации.
        """
        self._id = agent_id
        self._description = description
        self._visible = visible

    @property
    def id(self) -> str:
        """Уникальный идентификатор агента."""
        return self._id

    @property
    def description(self) -> str:
        """Описание назначения агента (передаётся роутеру намерений)."""
        return self._description

    @property
    def visible(self) -> bool:
        """Показывается ли агент в списке агентов."""
        return self._visible

    @abstractmethod
    def can_handle(self, context: AgentContext) -> bool:
        """
        Предикат релевантности.

        Чистая синхронная функция контекста, не должна бросать исключений.
        Обычно — поиск ключевых слов во входном тексте.
        """

    @abstractmethod
    async def handle(self, context: AgentContext) -> AgentResult:
        """
        Сформировать ответ на запрос.

        Ожидаемые сбои (провайдер не настроен, недоступен) не выбрасываются,
        а превращаются в AgentResult с metadata.connected = False.
        Неожиданные исключения пробрасываются вызывающему.
        """

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BaseAgent):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        """Строковое представление агента."""
        return (
            f"<{self.__class__.__name__}("
            f"id={self.id!r}, "
            f"visible={self.visible!r})>"
        )

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.id!r})"


Handler = Callable[[AgentContext], Union[AgentResult, Awaitable[AgentResult]]]


class FunctionAgent(BaseAgent):
    """
    Агент из пары функций: предиката и обработчика.

    Обработчик может быть как обычной функцией, так и корутиной.

    Example:
        >>> echo = FunctionAgent(
        ...     "echo",
        ...     "Repeats the input.",
        ...     can_handle=lambda ctx: ctx.input.startswith("echo"),
        ...     handle=lambda ctx: AgentResult(reply=ctx.input),
        ... )
    """

    def __init__(
        self,
        agent_id: str,
        description: str = "",
        *,
        can_handle: Callable[[AgentContext], bool],
        handle: Handler,
        visible: bool = True,
    ) -> None:
        super().__init__(agent_id, description, visible)
        self._predicate = can_handle
        self._handler = handle

    def can_handle(self, context: AgentContext) -> bool:
        return bool(self._predicate(context))

    async def handle(self, context: AgentContext) -> AgentResult:
        result = self._handler(context)
        if inspect.isawaitable(result):
            result = await result
        return result
