from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .core.context import AgentMemory
from .providers import ClickUpConfig, ClickUpProvider, FlowtlyConfig, FlowtlyProvider

load_dotenv(find_dotenv(usecwd=True))

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_STORE_DOC_ID = "global"
DEFAULT_STORE_MAX_MESSAGES = 200


def _parse_optional_bool(value: Optional[str]) -> Optional[bool]:
    """Только "true"/"false" (без учёта регистра); остальное — не задано."""
    if value is None:
        return None
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def _first_set(env: Mapping[str, str], *names: str) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def clickup_config_from_env(env: Mapping[str, str]) -> Optional[ClickUpConfig]:
    """
    Настройки ClickUp из окружения.

    Возвращает None, если нет токена или списка задач: возможность
    просто выключена.
    """
    token = _first_set(env, "CLICKUP_API_TOKEN", "CLICKUP_API_KEY", "CLICKUP_API_CLIENT")
    list_ids = [item.strip() for item in env.get("CLICKUP_LIST_IDS", "").split(",") if item.strip()]
    if not token or not list_ids:
        return None

    due_days = env.get("CLICKUP_DUE_DAYS")
    return ClickUpConfig(
        api_token=token,
        list_ids=list_ids,
        assignee_id=env.get("CLICKUP_ASSIGNEE_ID") or None,
        include_closed=_parse_optional_bool(env.get("CLICKUP_INCLUDE_CLOSED")),
        due_in_days=float(due_days) if due_days else None,
    )


def flowtly_config_from_env(env: Mapping[str, str]) -> Optional[FlowtlyConfig]:
    """Настройки Flowtly из окружения; None, если FLOWTLY_MCP_URL не задан."""
    base_url = env.get("FLOWTLY_MCP_URL")
    if not base_url:
        return None

    return FlowtlyConfig(
        base_url=base_url,
        api_key=env.get("FLOWTLY_MCP_API_KEY") or None,
        client_id=env.get("FLOWTLY_MCP_CLIENT_ID") or None,
        client_secret=env.get("FLOWTLY_MCP_CLIENT_SECRET") or None,
        workspace_id=env.get("FLOWTLY_WORKSPACE_ID") or None,
    )


@dataclass
class AssistantConfig:
    """
    Конфигурация процесса: ключи интеграций и параметры HTTP-оболочки.

    Строится один раз при старте и передаётся в конструкторы; обработчики
    агентов окружение не читают. Наличие ключа интеграции молча включает
    соответствующую возможность, отсутствие — выключает.
    """

    gemini_api_key: Optional[str] = None
    llm_api_base: Optional[str] = None
    llm_model: Optional[str] = None
    llm_timeout_seconds: float = 30.0
    clickup: Optional[ClickUpConfig] = None
    flowtly: Optional[FlowtlyConfig] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origin: str = "*"
    store_doc_id: str = DEFAULT_STORE_DOC_ID
    store_max_messages: int = DEFAULT_STORE_MAX_MESSAGES
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError("port must be in range 1..65535")
        if self.llm_timeout_seconds <= 0:
            raise ValueError("llm_timeout_seconds must be positive")
        if not self.store_doc_id:
            raise ValueError("store_doc_id must not be empty")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AssistantConfig":
        """
        Построить конфигурацию из переменных окружения.
        """
        env = os.environ if env is None else env
        return cls(
            gemini_api_key=_first_set(env, "GEMINI_API_KEY", "VITE_GEMINI_API_KEY"),
            llm_api_base=env.get("LLM_API_BASE") or None,
            llm_model=env.get("LLM_MODEL") or None,
            llm_timeout_seconds=float(env.get("LLM_TIMEOUT_SECONDS", "30")),
            clickup=clickup_config_from_env(env),
            flowtly=flowtly_config_from_env(env),
            host=env.get("HOST") or DEFAULT_HOST,
            port=int(env.get("PORT", str(DEFAULT_PORT))),
            cors_origin=env.get("CORS_ORIGIN") or "*",
            store_doc_id=env.get("STORE_DOC_ID") or DEFAULT_STORE_DOC_ID,
            store_max_messages=int(env.get("STORE_MAX_MESSAGES", str(DEFAULT_STORE_MAX_MESSAGES))),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


def build_agent_memory(config: AssistantConfig) -> AgentMemory:
    """
    Память агентов с провайдерами, включёнными конфигурацией.

    Создаётся один раз на процесс; на каждый запрос берётся поверхностная
    копия (model_copy), чтобы провайдеры и их HTTP-клиенты переиспользовались.
    """
    memory = AgentMemory()
    if config.clickup is not None:
        memory.task_provider = ClickUpProvider(config.clickup)
    if config.flowtly is not None:
        memory.finance_provider = FlowtlyProvider(config.flowtly)
    return memory
