"""
Assistant Service — диспетчер агентов личного ассистента.

Основные модули:
- core: Контракты агента, провайдера, контекста и реестра
- orchestrator: Диспетчер запросов и роутер намерений
- agents: Конкретные агенты (todo, finance, planner, researcher, executor)
- providers: Адаптеры внешних источников (ClickUp, Flowtly)
- llm: Клиент reasoning-сервиса

Пример использования:

    from assistant_service import AgentContext, AgentResult, Assistant, FunctionAgent

    assistant = Assistant()
    assistant.register(
        FunctionAgent(
            "echo",
            "Echoes the input",
            can_handle=lambda ctx: True,
            handle=lambda ctx: AgentResult(reply=ctx.input),
        )
    )

    outcome = await assistant.route(AgentContext(input="hello"))
    print(outcome.agent.id, outcome.result.reply)
"""

__version__ = "0.1.0"

# Core
from .core import (
    AgentContext,
    AgentMemory,
    AgentRegistry,
    AgentResult,
    AssistantError,
    BaseAgent,
    DuplicateAgentIdError,
    FinanceMetric,
    FinanceProvider,
    FinanceSnapshot,
    FunctionAgent,
    NoAgentsRegisteredError,
    ProviderError,
    TaskProvider,
    TodoTask,
)

# Agents
from .agents import (
    FinanceAgent,
    TodoAgent,
    create_default_agents,
)

# Orchestrator
from .orchestrator import (
    Assistant,
    IntentDecision,
    LLMIntentRouter,
    RouteOutcome,
    build_default_assistant,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "AgentContext",
    "AgentMemory",
    "AgentRegistry",
    "AgentResult",
    "BaseAgent",
    "FunctionAgent",
    "TaskProvider",
    "FinanceProvider",
    "TodoTask",
    "FinanceMetric",
    "FinanceSnapshot",
    # Errors
    "AssistantError",
    "DuplicateAgentIdError",
    "NoAgentsRegisteredError",
    "ProviderError",
    # Agents
    "TodoAgent",
    "FinanceAgent",
    "create_default_agents",
    # Orchestrator
    "Assistant",
    "RouteOutcome",
    "IntentDecision",
    "LLMIntentRouter",
    "build_default_assistant",
]
