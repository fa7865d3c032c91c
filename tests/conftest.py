"""
Pytest configuration for assistant-service tests.
"""

import sys
from pathlib import Path
from typing import Optional

import pytest

# Добавляем src в sys.path для импортов без установки пакета
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from assistant_service.core import (  # noqa: E402
    AgentContext,
    FinanceProvider,
    FinanceSnapshot,
    TaskProvider,
    TodoTask,
)


# Настройка anyio для async тестов
@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend."""
    return "asyncio"


class StubTaskProvider(TaskProvider):
    """Провайдер задач с заранее заданным ответом или ошибкой."""

    name = "stub-tasks"

    def __init__(self, tasks: Optional[list[TodoTask]] = None, error: Optional[Exception] = None):
        self.tasks = tasks or []
        self.error = error
        self.calls = 0

    async def list_tasks(self, context: AgentContext) -> list[TodoTask]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.tasks)


class StubFinanceProvider(FinanceProvider):
    """Провайдер финансового среза с заранее заданным ответом или ошибкой."""

    name = "stub-finance"

    def __init__(self, snapshot: Optional[FinanceSnapshot] = None, error: Optional[Exception] = None):
        self.snapshot = snapshot or FinanceSnapshot()
        self.error = error
        self.calls = 0

    async def get_snapshot(self, context: AgentContext) -> FinanceSnapshot:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.snapshot


@pytest.fixture
def clean_env(monkeypatch):
    """Убирает из окружения переменные, влияющие на конфигурацию."""
    for name in (
        "GEMINI_API_KEY",
        "VITE_GEMINI_API_KEY",
        "LLM_API_BASE",
        "LLM_MODEL",
        "LLM_TIMEOUT_SECONDS",
        "CLICKUP_API_TOKEN",
        "CLICKUP_API_KEY",
        "CLICKUP_API_CLIENT",
        "CLICKUP_LIST_IDS",
        "CLICKUP_ASSIGNEE_ID",
        "CLICKUP_INCLUDE_CLOSED",
        "CLICKUP_DUE_DAYS",
        "FLOWTLY_MCP_URL",
        "FLOWTLY_MCP_API_KEY",
        "FLOWTLY_MCP_CLIENT_ID",
        "FLOWTLY_MCP_CLIENT_SECRET",
        "FLOWTLY_WORKSPACE_ID",
        "HOST",
        "PORT",
        "CORS_ORIGIN",
        "STORE_DOC_ID",
        "STORE_MAX_MESSAGES",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
