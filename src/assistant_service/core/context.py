"""
AgentContext — контекст одного входящего запроса.

Создаётся на каждый запрос, ядром не сохраняется. Несёт идентификатор
пользователя, исходный текст и изменяемую "память" — набор типизированных
слотов для провайдеров и переопределения роутера намерений.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from .providers import FinanceProvider, TaskProvider


class AgentMemory(BaseModel):
    """
    Разделяемые зависимости запроса.

    Отсутствие слота означает "не настроено": агент вернёт инструкцию
    по подключению, а диспетчер обойдётся без переопределения роутера.

    Attributes:
        task_provider: Провайдер задач для агента todo.
        finance_provider: Провайдер финансового среза для агента finance.
        intent_router: Явный роутер намерений (async callable), имеет
            приоритет над роутером из конфигурации.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    task_provider: Optional[TaskProvider] = None
    finance_provider: Optional[FinanceProvider] = None
    intent_router: Optional[Callable[..., Awaitable[Any]]] = None


class AgentContext(BaseModel):
    """
    Контекст запроса, передаваемый роутеру и агентам.

    Attributes:
        user_id: Идентификатор пользователя ("local" для CLI, "web" для HTTP).
        input: Исходный текст запроса.
        memory: Типизированные слоты зависимостей запроса.
    """

    user_id: str = Field(
        default="local",
        description="Идентификатор пользователя",
    )

    input: str = Field(
        ...,
        description="Исходный текст запроса на естественном языке",
        min_length=1,
    )

    memory: AgentMemory = Field(
        default_factory=AgentMemory,
        description="Провайдеры и переопределение роутера для этого запроса",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "web",
                "input": "summarize my tasks",
                "memory": {},
            }
        }
    )
