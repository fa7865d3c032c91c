"""
FlowtlyProvider — провайдер финансового среза через MCP-endpoint Flowtly.

Один POST-запрос с инструментом `finance.snapshot`; ответ вида
{"output": {...}} или {"error": "..."}.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import ProviderError
from ..core.providers import FinanceProvider, FinanceSnapshot

if TYPE_CHECKING:
    from ..core.context import AgentContext

logger = logging.getLogger(__name__)

SNAPSHOT_TOOL = "finance.snapshot"


class FlowtlyConfig(BaseModel):
    """
    Настройки подключения к Flowtly.

    Attributes:
        base_url: URL MCP-endpoint.
        api_key: Bearer-токен (необязателен).
        client_id: OAuth client id, передаётся в input инструмента.
        client_secret: OAuth client secret, передаётся в input инструмента.
        workspace_id: Рабочее пространство Flowtly.
        timeout_seconds: Тайм-аут HTTP-запроса.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(..., min_length=1)
    api_key: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    workspace_id: Optional[str] = None
    timeout_seconds: float = Field(default=30.0, gt=0)


class FlowtlyProvider(FinanceProvider):
    """
    HTTP-клиент Flowtly, реализующий FinanceProvider.

    Attributes:
        config: Настройки подключения.
        _client: httpx.AsyncClient (создаётся лениво или передаётся в тестах).
    """

    name = "flowtly"

    def __init__(
        self,
        config: FlowtlyConfig,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
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

    def build_payload(self) -> dict[str, Any]:
        """Тело запроса инструмента; незаданные поля не передаются."""
        tool_input = {
            "workspaceId": self.config.workspace_id,
            "clientId": self.config.client_id,
            "clientSecret": self.config.client_secret,
        }
        return {
            "tool": SNAPSHOT_TOOL,
            "input": {key: value for key, value in tool_input.items() if value is not None},
        }

    async def get_snapshot(self, context: AgentContext) -> FinanceSnapshot:
        """
        Получить текущий финансовый срез.

        Raises:
            ProviderError: При не-2xx ответе, сетевой ошибке или пустом output.
        """
        client = await self._get_client()
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        start_time = time.perf_counter()
        try:
            response = await client.post(
                self.config.base_url,
                json=self.build_payload(),
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise ProviderError(
                f"Flowtly MCP request failed: {type(exc).__name__}: {exc}",
                provider=self.name,
            ) from exc

        if not response.is_success:
            raise ProviderError(
                f"Flowtly MCP error: {response.status_code} {response.text}",
                provider=self.name,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(
                f"Flowtly MCP returned invalid JSON: {exc}",
                provider=self.name,
                status_code=response.status_code,
                body=response.text,
            ) from exc

        output = data.get("output") if isinstance(data, dict) else None
        if not output:
            error = data.get("error") if isinstance(data, dict) else None
            raise ProviderError(
                error or "Flowtly MCP returned no output",
                provider=self.name,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            snapshot = FinanceSnapshot.model_validate(output)
        except ValidationError as exc:
            raise ProviderError(
                f"Flowtly MCP returned a malformed snapshot: {exc}",
                provider=self.name,
                status_code=response.status_code,
                body=response.text,
            ) from exc

        logger.info(
            "Flowtly snapshot with %d metrics fetched in %.2fms",
            len(snapshot.metrics),
            (time.perf_counter() - start_time) * 1000,
        )
        return snapshot

    def __repr__(self) -> str:
        return f"<FlowtlyProvider(url={self.config.base_url!r})>"
