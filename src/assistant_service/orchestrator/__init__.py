"""
Диспетчер запросов assistant-service.

Содержит:
- Assistant — реестр агентов и алгоритм выбора агента
- IntentDecision / LLMIntentRouter — роутер намерений на reasoning-сервисе
- ConversationStore — хранилище документа диалога для HTTP-оболочки
- HTTP-модели маршрутизации
"""

from .assistant import Assistant, RouteOutcome, build_default_assistant
from .conversation_store import ConversationStore, InMemoryConversationStore
from .intent_router import (
    IntentDecision,
    IntentRouter,
    LLMIntentRouter,
    build_intent_router,
    extract_json_object,
    parse_decision,
)
from .models import (
    AgentInfo,
    AgentListResponse,
    RouteRequest,
    RouteResponse,
    StoredMessage,
    StoredState,
)

__all__ = [
    # Диспетчер
    "Assistant",
    "RouteOutcome",
    "build_default_assistant",
    # Роутер намерений
    "IntentDecision",
    "IntentRouter",
    "LLMIntentRouter",
    "build_intent_router",
    "extract_json_object",
    "parse_decision",
    # Хранилище
    "ConversationStore",
    "InMemoryConversationStore",
    # HTTP-модели
    "AgentInfo",
    "AgentListResponse",
    "RouteRequest",
    "RouteResponse",
    "StoredMessage",
    "StoredState",
]
