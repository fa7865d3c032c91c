"""
AgentResult — ответ агента на один запрос.

Ровно один агент формирует результат на запрос; диспетчер возвращает его
вызывающему без изменений.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AgentResult(BaseModel):
    """
    Результат обработки запроса агентом.

    Attributes:
        reply: Текст ответа пользователю.
        handoff: Подсказка — id агента, которому стоит передать диалог дальше.
        metadata: Дополнительные данные (connected, error, taskCount и т.п.).
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "reply": "Summary: 3 total, 1 overdue, 0 without due dates.",
                    "handoff": None,
                    "metadata": {"connected": True, "taskCount": 3},
                },
                {
                    "reply": "I could not reach Flowtly. Check the provider configuration.",
                    "handoff": None,
                    "metadata": {"connected": False, "error": "Flowtly MCP error: 502"},
                },
            ]
        }
    )

    reply: str = Field(
        ...,
        description="Текст ответа пользователю",
    )

    handoff: Optional[str] = Field(
        default=None,
        description="Подсказка о следующем агенте",
    )

    metadata: Optional[dict[str, Any]] = Field(
        default=None,
        description="Дополнительные данные ответа",
    )

    @classmethod
    def connected(cls, reply: str, **metadata: Any) -> AgentResult:
        """Ответ агента, успешно получившего данные провайдера."""
        return cls(reply=reply, metadata={"connected": True, **metadata})

    @classmethod
    def disconnected(cls, reply: str, error: Optional[str] = None) -> AgentResult:
        """
        Ответ агента без данных провайдера.

        Args:
            reply: Инструкция по настройке или извинение.
            error: Диагностика сбоя; не задаётся, если провайдер не настроен
                и сетевой вызов не выполнялся.
        """
        metadata: dict[str, Any] = {"connected": False}
        if error is not None:
            metadata["error"] = error
        return cls(reply=reply, metadata=metadata)
