"""
FinanceAgent — агент сводки финансовых метрик.

Берёт FinanceProvider из AgentContext.memory.finance_provider и форматирует
срез. Если сконфигурирован reasoning-клиент, пробует получить LLM-сводку;
пустой ответ или сбой LLM откатывают к сводке по правилам.

**Важно**: LLM получает только данные среза и не должен выдумывать числа.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Optional, Protocol, Union

from ..core.base_agent import BaseAgent
from ..core.context import AgentContext
from ..core.exceptions import ProviderError
from ..core.providers import FinanceProvider, FinanceSnapshot
from ..core.result import AgentResult

logger = logging.getLogger(__name__)

FINANCE_PATTERN = re.compile(
    r"finance|budget|cashflow|runway|spend|revenue|flowtly",
    re.IGNORECASE,
)

FINANCE_SETUP_REPLY = "\n".join(
    [
        "I can connect to Flowtly once a provider is wired in.",
        "Add a Flowtly provider to AgentContext.memory as `finance_provider`.",
        "That provider should implement `get_snapshot(context)` and return { asOf, metrics, notes }.",
    ]
)
FINANCE_UNREACHABLE_REPLY = "I could not reach Flowtly. Check the provider configuration."
NO_METRICS_LINE = "No metrics returned yet."

SUMMARY_PROMPT = "\n".join(
    [
        "You are a finance assistant.",
        "Use only the data provided in the JSON to answer the user's request.",
        "Output plain text with 3-6 lines, no markdown, no bullet symbols.",
        "Line 1 must be 'Finance snapshot as of <asOf>.' or 'Finance snapshot.'",
        "Include each metric as 'Label: value' and include '(delta)' if present.",
        "If no metrics are provided, include the line 'No metrics returned yet.'",
        "If notes exist, add them as full sentences on the last lines.",
        "",
        "User request: {request}",
        "Snapshot JSON: {snapshot}",
    ]
)


class TextGenerator(Protocol):
    """
    Протокол LLM-клиента для сводок.

    Определяет интерфейс для инъекции зависимости (ReasoningClient в проде).
    """

    async def generate(
        self,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ) -> str:
        """Сгенерировать текст через LLM."""
        ...


def format_metric_value(value: Union[int, float, str]) -> str:
    """Значение метрики без хвоста `.0` у целых float."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def summarize_snapshot(snapshot: FinanceSnapshot) -> str:
    """
    Сводка среза по правилам.

    Первая строка — заголовок с датой, далее по строке на метрику,
    затем примечания.
    """
    headline = (
        f"Finance snapshot as of {snapshot.as_of}." if snapshot.as_of else "Finance snapshot."
    )
    metrics = [
        f"{metric.label}: {format_metric_value(metric.value)} ({metric.delta})"
        if metric.delta
        else f"{metric.label}: {format_metric_value(metric.value)}"
        for metric in snapshot.metrics
    ]
    return "\n".join([headline, *(metrics or [NO_METRICS_LINE]), *snapshot.notes])


class FinanceAgent(BaseAgent):
    """
    Агент финансов (Flowtly).

    Attributes:
        summarizer: LLM-клиент для сводки (None — только правила).
    """

    AGENT_ID = "finance"

    def __init__(self, summarizer: Optional[TextGenerator] = None) -> None:
        super().__init__(
            agent_id=self.AGENT_ID,
            description="Connects to Flowtly to summarize financial metrics.",
        )
        self.summarizer = summarizer

    def can_handle(self, context: AgentContext) -> bool:
        return FINANCE_PATTERN.search(context.input) is not None

    async def handle(self, context: AgentContext) -> AgentResult:
        provider = context.memory.finance_provider
        if not isinstance(provider, FinanceProvider):
            return AgentResult.disconnected(FINANCE_SETUP_REPLY)

        try:
            snapshot = await provider.get_snapshot(context)
        except ProviderError as exc:
            logger.warning("Finance provider '%s' failed: %s", provider.name, exc)
            return AgentResult.disconnected(FINANCE_UNREACHABLE_REPLY, error=str(exc))

        reply = await self._summarize_with_llm(snapshot, context.input)
        summary_mode = "llm"
        if not reply:
            reply = summarize_snapshot(snapshot)
            summary_mode = "rules"

        return AgentResult.connected(reply, summaryMode=summary_mode)

    async def _summarize_with_llm(self, snapshot: FinanceSnapshot, request: str) -> Optional[str]:
        """LLM-сводка среза или None, если LLM выключен, молчит или упал."""
        if self.summarizer is None:
            return None

        prompt = SUMMARY_PROMPT.format(
            request=request,
            snapshot=json.dumps(
                snapshot.model_dump(by_alias=True, exclude_none=True),
                ensure_ascii=False,
            ),
        )
        try:
            text = await self.summarizer.generate(prompt, temperature=0.0)
        except Exception as exc:
            logger.warning(
                "LLM finance summary failed, using rules: %s: %s",
                type(exc).__name__,
                exc,
            )
            return None

        return text.strip() or None
