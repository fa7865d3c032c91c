"""
Core модуль assistant-service.

Содержит контракты, общие для диспетчера, агентов и провайдеров:
- BaseAgent / FunctionAgent — агенты с предикатом и обработчиком
- AgentContext / AgentMemory — контекст запроса и его типизированная память
- AgentResult — ответ агента
- AgentRegistry — упорядоченный реестр агентов
- TaskProvider / FinanceProvider — контракты провайдеров данных

Пример использования:

    from assistant_service.core import AgentContext, AgentResult, FunctionAgent

    echo = FunctionAgent(
        "echo",
        "Repeats the input.",
        can_handle=lambda ctx: True,
        handle=lambda ctx: AgentResult(reply=ctx.input),
    )
"""

from .base_agent import BaseAgent, FunctionAgent
from .context import AgentContext, AgentMemory
from .exceptions import (
    AssistantError,
    DuplicateAgentIdError,
    NoAgentsRegisteredError,
    ProviderError,
)
from .providers import (
    FinanceMetric,
    FinanceProvider,
    FinanceSnapshot,
    TaskProvider,
    TodoTask,
)
from .registry import AgentRegistry
from .result import AgentResult

__all__ = [
    # Агенты и реестр
    "BaseAgent",
    "FunctionAgent",
    "AgentRegistry",
    # Контекст и результат
    "AgentContext",
    "AgentMemory",
    "AgentResult",
    # Провайдеры
    "TaskProvider",
    "FinanceProvider",
    "TodoTask",
    "FinanceMetric",
    "FinanceSnapshot",
    # Ошибки
    "AssistantError",
    "DuplicateAgentIdError",
    "NoAgentsRegisteredError",
    "ProviderError",
]
