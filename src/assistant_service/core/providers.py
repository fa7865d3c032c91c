"""
Контракты провайдеров данных (Provider Adapter).

Каждый провайдер реализует ровно одну возможность своей предметной области:
- TaskProvider.list_tasks — текущий список задач (ClickUp)
- FinanceProvider.get_snapshot — текущий финансовый срез (Flowtly)

Агенты находят провайдер в AgentContext.memory по типу слота и проверяют его
через isinstance, а не по наличию метода.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from .context import AgentContext


class TodoTask(BaseModel):
    """
    Задача из таск-трекера в нормализованном виде.

    Attributes:
        id: Идентификатор задачи в трекере.
        name: Название задачи.
        status: Текстовый статус (open, in progress, ...).
        due_at: Срок в ISO-8601 (UTC), если задан.
        priority: Приоритет (urgent, high, normal, low).
        url: Ссылка на задачу.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    status: Optional[str] = None
    due_at: Optional[str] = Field(default=None, alias="dueAt")
    priority: Optional[str] = None
    url: Optional[str] = None


class FinanceMetric(BaseModel):
    """Одна метрика финансового среза: подпись, значение и изменение."""

    label: str
    value: Union[int, float, str]
    delta: Optional[str] = None


class FinanceSnapshot(BaseModel):
    """
    Финансовый срез на момент времени.

    Attributes:
        as_of: Дата/время среза (строка как её вернул провайдер).
        metrics: Список метрик.
        notes: Свободные текстовые примечания.
    """

    model_config = ConfigDict(populate_by_name=True)

    as_of: Optional[str] = Field(default=None, alias="asOf")
    metrics: list[FinanceMetric] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)

    @field_validator("metrics", "notes", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class TaskProvider(ABC):
    """Провайдер списка задач."""

    name: str = "tasks"

    @abstractmethod
    async def list_tasks(self, context: AgentContext) -> list[TodoTask]:
        """
        Получить актуальный список задач.

        Raises:
            ProviderError: При любом сбое удалённого источника.
        """


class FinanceProvider(ABC):
    """Провайдер финансового среза."""

    name: str = "finance"

    @abstractmethod
    async def get_snapshot(self, context: AgentContext) -> FinanceSnapshot:
        """
        Получить актуальный финансовый срез.

        Raises:
            ProviderError: При любом сбое удалённого источника.
        """
