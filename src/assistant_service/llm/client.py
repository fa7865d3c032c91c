from __future__ import annotations

# pyright: reportMissingImports=false

import logging
from typing import TYPE_CHECKING, Optional

from openai import AsyncOpenAI

if TYPE_CHECKING:
    from ..config import AssistantConfig

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_MODEL = "gemini-1.5-flash"


class ReasoningClient:
    """
    Клиент внешнего reasoning-сервиса (OpenAI-compatible API).

    По умолчанию ходит в OpenAI-совместимый endpoint Gemini. Повторов и
    fallback-моделей нет: один неудачный вызов — одна ошибка, которую
    разбирает вызывающий (роутер намерений или агент finance).
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_base: Optional[str] = None,
        model: Optional[str] = None,
        request_timeout: float = 30.0,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        if not api_key:
            raise ValueError("GEMINI_API_KEY не задан: ReasoningClient выключен")

        self.api_key = api_key
        self.api_base = api_base or DEFAULT_API_BASE
        self.model = model or DEFAULT_MODEL
        self.request_timeout = request_timeout

        self.client = client or AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.api_base,
            max_retries=0,
        )

    async def generate(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ) -> str:
        """
        Сгенерировать текст по промпту.

        Returns:
            Текст первого варианта ответа или пустая строка.

        Raises:
            openai.APIError: При сетевой ошибке или не-2xx ответе.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=self.request_timeout,
        )

        choice = (response.choices or [None])[0]
        if not choice or not choice.message or not choice.message.content:
            return ""
        return choice.message.content

    def __repr__(self) -> str:
        return f"<ReasoningClient(model={self.model!r}, api_base={self.api_base!r})>"


def build_reasoning_client(config: AssistantConfig) -> Optional[ReasoningClient]:
    """
    Создать ReasoningClient по конфигурации процесса.

    Возвращает None, если ключ не задан или инициализация не удалась.
    """
    if not config.gemini_api_key:
        logger.info("GEMINI_API_KEY не найден: LLM-маршрутизация и LLM-сводки выключены")
        return None

    try:
        client = ReasoningClient(
            api_key=config.gemini_api_key,
            api_base=config.llm_api_base,
            model=config.llm_model,
            request_timeout=config.llm_timeout_seconds,
        )
        logger.info("ReasoningClient инициализирован (model=%s)", client.model)
        return client
    except Exception as exc:
        logger.error("Не удалось инициализировать ReasoningClient: %s", exc)
        return None
