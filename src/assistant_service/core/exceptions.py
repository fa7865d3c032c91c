"""
Иерархия исключений assistant-service.

Ошибки конфигурации реестра (дубликат id, пустой реестр) фатальны и
пробрасываются вызывающему. Ошибки провайдеров сводятся к одному типу
ProviderError, чтобы агенты ловили их без разбора транспортных деталей.
"""

from __future__ import annotations

from typing import Any, Optional


class AssistantError(Exception):
    """Базовый класс для всех ошибок assistant-service."""

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class DuplicateAgentIdError(AssistantError, ValueError):
    """Агент с таким id уже зарегистрирован."""

    def __init__(self, agent_id: str) -> None:
        super().__init__(f"Agent already registered: {agent_id}")
        self.agent_id = agent_id


class NoAgentsRegisteredError(AssistantError, LookupError):
    """Маршрутизация вызвана на пустом реестре."""

    def __init__(self) -> None:
        super().__init__("No agents registered")


class ProviderError(AssistantError):
    """
    Единый сигнал отказа внешнего провайдера данных.

    Выбрасывается адаптерами при не-2xx ответе, сетевой ошибке или
    некорректном ответе. Текст ошибки содержит статус и тело ответа,
    чтобы агент мог вернуть его в metadata.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message, details={"status_code": status_code, "body": body})
        self.provider = provider
        self.status_code = status_code
        self.body = body

    def __repr__(self) -> str:  # pragma: no cover - мелкий хелпер
        return (
            f"{self.__class__.__name__}(provider={self.provider!r}, "
            f"message={self.message!r}, status_code={self.status_code!r})"
        )
