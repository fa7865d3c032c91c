"""
AgentRegistry — упорядоченный реестр агентов.

Порядок регистрации — это приоритет сканирования предикатов при
маршрутизации, поэтому реестр хранит агентов строго в порядке добавления.
Повторная регистрация id — фатальная ошибка конфигурации.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import TYPE_CHECKING, Iterator, Optional

from .exceptions import DuplicateAgentIdError

if TYPE_CHECKING:
    from .base_agent import BaseAgent


logger = logging.getLogger(__name__)


class AgentRegistry:
    """
    Реестр агентов с thread-safe доступом.

    После старта процесса реестр только читается, поэтому параллельные
    запросы не требуют дополнительной синхронизации.

    Attributes:
        _agents: Агенты по id в порядке регистрации.
        _lock: Блокировка для thread-safe операций.

    Example:
        >>> registry = AgentRegistry()
        >>> registry.register(TodoAgent())
        >>> registry.register(FinanceAgent())
        >>> [agent.id for agent in registry.list_visible()]
        ['todo', 'finance']
    """

    def __init__(self) -> None:
        """Инициализация пустого реестра."""
        self._agents: dict[str, BaseAgent] = {}
        self._lock = Lock()

    def register(self, agent: BaseAgent) -> None:
        """
        Добавить агента в конец реестра.

        Args:
            agent: Экземпляр агента.

        Raises:
            DuplicateAgentIdError: Если агент с таким id уже зарегистрирован.
        """
        with self._lock:
            if agent.id in self._agents:
                raise DuplicateAgentIdError(agent.id)
            self._agents[agent.id] = agent
            logger.info(
                "Registered agent '%s' (visible=%s, position=%d)",
                agent.id,
                agent.visible,
                len(self._agents),
            )

    def get(self, agent_id: str) -> Optional[BaseAgent]:
        """
        Получить агента по id.

        Returns:
            Экземпляр агента или None, если не найден.
        """
        with self._lock:
            return self._agents.get(agent_id)

    def list_all(self) -> list[BaseAgent]:
        """Все агенты, включая скрытые, в порядке регистрации."""
        with self._lock:
            return list(self._agents.values())

    def list_visible(self) -> list[BaseAgent]:
        """Видимые пользователю агенты в порядке регистрации."""
        with self._lock:
            return [agent for agent in self._agents.values() if agent.visible]

    def __len__(self) -> int:
        """Количество зарегистрированных агентов."""
        with self._lock:
            return len(self._agents)

    def __contains__(self, agent_id: str) -> bool:
        """Проверить, зарегистрирован ли агент с данным id."""
        with self._lock:
            return agent_id in self._agents

    def __iter__(self) -> Iterator[str]:
        """Итератор по id агентов в порядке регистрации."""
        with self._lock:
            return iter(list(self._agents.keys()))

    def __repr__(self) -> str:
        """Строковое представление реестра."""
        with self._lock:
            ids = list(self._agents.keys())
        return f"<AgentRegistry(agents={ids})>"
