"""
ClickUpProvider — провайдер задач поверх ClickUp REST API v2.

Запрашивает задачи по каждому отслеживаемому списку параллельно и
возвращает их в нормализованном виде. Сбой любого из запросов
проваливает весь вызов: частичный список не возвращается.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import ProviderError
from ..core.providers import TaskProvider, TodoTask

if TYPE_CHECKING:
    from ..core.context import AgentContext

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.clickup.com/api/v2"
MS_PER_DAY = 24 * 60 * 60 * 1000


class ClickUpConfig(BaseModel):
    """
    Настройки подключения к ClickUp.

    Attributes:
        api_token: Персональный токен (передаётся в Authorization как есть).
        list_ids: Отслеживаемые списки задач.
        assignee_id: Фильтр по исполнителю.
        include_closed: Включать ли закрытые задачи (None — не передавать).
        due_in_days: Только задачи со сроком раньше, чем now + N дней.
        base_url: Базовый URL API.
        timeout_seconds: Тайм-аут HTTP-запроса.
    """

    model_config = ConfigDict(frozen=True)

    api_token: str = Field(..., min_length=1)
    list_ids: list[str] = Field(..., min_length=1)
    assignee_id: Optional[str] = None
    include_closed: Optional[bool] = None
    due_in_days: Optional[float] = None
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = Field(default=30.0, gt=0)


class ClickUpProvider(TaskProvider):
    """
    HTTP-клиент ClickUp, реализующий TaskProvider.

    Attributes:
        config: Настройки подключения.
        _client: httpx.AsyncClient (создаётся лениво или передаётся в тестах).

    Example:
        >>> provider = ClickUpProvider(ClickUpConfig(api_token="pk_1", list_ids=["901"]))
        >>> tasks = await provider.list_tasks(context)
    """

    name = "clickup"

    def __init__(
        self,
        config: ClickUpConfig,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Args:
            config: Настройки подключения.
            client: Предварительно сконфигурированный httpx-клиент (для тестов).
        """
        self.config = config
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._client

    async def aclose(self) -> None:
        """Закрыть собственный HTTP-клиент."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def build_params(self, now_ms: int) -> dict[str, str]:
        """
        Сформировать query-параметры запроса задач.

        Args:
            now_ms: Текущее время в миллисекундах epoch.
        """
        params: dict[str, str] = {}
        if self.config.assignee_id:
            params["assignees[]"] = self.config.assignee_id
        if self.config.include_closed is not None:
            params["include_closed"] = "true" if self.config.include_closed else "false"
        if self.config.due_in_days is not None:
            params["due_date_lt"] = str(now_ms + int(self.config.due_in_days * MS_PER_DAY))
        return params

    async def list_tasks(self, context: AgentContext) -> list[TodoTask]:
        """
        Получить задачи по всем отслеживаемым спискам.

        Raises:
            ProviderError: Если хотя бы один запрос списка не удался.
        """
        client = await self._get_client()
        params = self.build_params(int(time.time() * 1000))

        batches = await asyncio.gather(
            *(self._fetch_list(client, list_id, params) for list_id in self.config.list_ids)
        )
        return [task for batch in batches for task in batch]

    async def _fetch_list(
        self,
        client: httpx.AsyncClient,
        list_id: str,
        params: dict[str, str],
    ) -> list[TodoTask]:
        url = f"{self.config.base_url.rstrip('/')}/list/{list_id}/task"
        headers = {
            "Authorization": self.config.api_token,
            "Content-Type": "application/json",
        }
        start_time = time.perf_counter()

        try:
            response = await client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(
                f"ClickUp API request failed for list {list_id}: {type(exc).__name__}: {exc}",
                provider=self.name,
            ) from exc

        if not response.is_success:
            raise ProviderError(
                f"ClickUp API error for list {list_id}: {response.status_code} {response.text}",
                provider=self.name,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
            raw_tasks = data.get("tasks") or []
            tasks = [self.to_task(raw) for raw in raw_tasks]
        except (ValueError, TypeError, AttributeError, KeyError, ValidationError) as exc:
            raise ProviderError(
                f"ClickUp API returned malformed tasks for list {list_id}: {exc}",
                provider=self.name,
                status_code=response.status_code,
                body=response.text,
            ) from exc

        logger.info(
            "ClickUp list %s returned %d tasks in %.2fms",
            list_id,
            len(tasks),
            (time.perf_counter() - start_time) * 1000,
        )
        return tasks

    @staticmethod
    def to_task(raw: dict[str, Any]) -> TodoTask:
        """Преобразовать задачу ClickUp в TodoTask."""
        status = raw.get("status") or {}
        priority = raw.get("priority") or {}
        due_date = raw.get("due_date")

        due_at: Optional[str] = None
        if due_date:
            due = datetime.fromtimestamp(int(due_date) / 1000, tz=timezone.utc)
            due_at = due.isoformat(timespec="milliseconds").replace("+00:00", "Z")

        return TodoTask(
            id=str(raw["id"]),
            name=raw["name"],
            status=status.get("status"),
            due_at=due_at,
            priority=priority.get("priority") or priority.get("name"),
            url=raw.get("url"),
        )

    def __repr__(self) -> str:
        return f"<ClickUpProvider(lists={self.config.list_ids!r})>"
