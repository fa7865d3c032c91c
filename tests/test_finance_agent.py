"""
Тесты для FinanceAgent — сводки финансовых метрик.
"""

from unittest.mock import AsyncMock

import pytest

pytestmark = pytest.mark.anyio

from assistant_service.agents import FinanceAgent
from assistant_service.agents.finance import (
    FINANCE_SETUP_REPLY,
    FINANCE_UNREACHABLE_REPLY,
    format_metric_value,
    summarize_snapshot,
)
from assistant_service.core import AgentContext, AgentMemory, FinanceSnapshot, ProviderError

from conftest import StubFinanceProvider


def revenue_snapshot() -> FinanceSnapshot:
    return FinanceSnapshot.model_validate(
        {
            "asOf": "2024-01-01",
            "metrics": [{"label": "Revenue", "value": 100, "delta": "+5"}],
            "notes": [],
        }
    )


def finance_context(provider) -> AgentContext:
    return AgentContext(input="how is revenue", memory=AgentMemory(finance_provider=provider))


class TestSummarizeSnapshot:
    def test_revenue_snapshot(self):
        lines = summarize_snapshot(revenue_snapshot()).splitlines()

        assert lines == ["Finance snapshot as of 2024-01-01.", "Revenue: 100 (+5)"]

    def test_without_date_and_metrics(self):
        snapshot = FinanceSnapshot(notes=["Books close on Friday."])

        assert summarize_snapshot(snapshot).splitlines() == [
            "Finance snapshot.",
            "No metrics returned yet.",
            "Books close on Friday.",
        ]

    def test_null_notes_and_metrics(self):
        snapshot = FinanceSnapshot.model_validate({"asOf": "2024-01-01", "metrics": None, "notes": None})

        assert summarize_snapshot(snapshot).splitlines() == [
            "Finance snapshot as of 2024-01-01.",
            "No metrics returned yet.",
        ]

    @pytest.mark.parametrize(
        "value,expected",
        [(100, "100"), (100.0, "100"), (12.5, "12.5"), ("14 months", "14 months")],
    )
    def test_format_metric_value(self, value, expected):
        assert format_metric_value(value) == expected


class TestHandle:
    async def test_without_provider(self):
        result = await FinanceAgent().handle(AgentContext(input="budget"))

        assert result.reply == FINANCE_SETUP_REPLY
        assert result.metadata == {"connected": False}

    async def test_rules_summary(self):
        """Без LLM — сводка по правилам."""
        provider = StubFinanceProvider(snapshot=revenue_snapshot())

        result = await FinanceAgent().handle(finance_context(provider))

        lines = result.reply.splitlines()
        assert lines[0] == "Finance snapshot as of 2024-01-01."
        assert lines[1] == "Revenue: 100 (+5)"
        assert result.metadata["connected"] is True
        assert result.metadata["summaryMode"] == "rules"

    async def test_provider_error(self):
        provider = StubFinanceProvider(error=ProviderError("Flowtly MCP error: 502", provider="flowtly"))

        result = await FinanceAgent().handle(finance_context(provider))

        assert result.reply == FINANCE_UNREACHABLE_REPLY
        assert result.metadata == {"connected": False, "error": "Flowtly MCP error: 502"}

    async def test_llm_summary(self):
        summarizer = AsyncMock()
        summarizer.generate.return_value = "  Finance snapshot as of 2024-01-01.\nRevenue: 100 (+5)\n"
        provider = StubFinanceProvider(snapshot=revenue_snapshot())

        result = await FinanceAgent(summarizer=summarizer).handle(finance_context(provider))

        assert result.reply == "Finance snapshot as of 2024-01-01.\nRevenue: 100 (+5)"
        assert result.metadata == {"connected": True, "summaryMode": "llm"}
        prompt = summarizer.generate.await_args.args[0]
        assert "User request: how is revenue" in prompt
        assert '"asOf": "2024-01-01"' in prompt

    async def test_llm_failure_falls_back_to_rules(self):
        summarizer = AsyncMock()
        summarizer.generate.side_effect = RuntimeError("quota exceeded")
        provider = StubFinanceProvider(snapshot=revenue_snapshot())

        result = await FinanceAgent(summarizer=summarizer).handle(finance_context(provider))

        assert result.reply.splitlines()[0] == "Finance snapshot as of 2024-01-01."
        assert result.metadata == {"connected": True, "summaryMode": "rules"}

    async def test_empty_llm_answer_falls_back_to_rules(self):
        summarizer = AsyncMock()
        summarizer.generate.return_value = "   "
        provider = StubFinanceProvider(snapshot=revenue_snapshot())

        result = await FinanceAgent(summarizer=summarizer).handle(finance_context(provider))

        assert result.metadata["summaryMode"] == "rules"

    async def test_llm_not_called_without_provider(self):
        summarizer = AsyncMock()

        await FinanceAgent(summarizer=summarizer).handle(AgentContext(input="budget"))

        summarizer.generate.assert_not_awaited()


class TestCanHandle:
    @pytest.mark.parametrize("text", ["budget review", "what is our RUNWAY", "Flowtly numbers", "cashflow"])
    def test_matches(self, text):
        assert FinanceAgent().can_handle(AgentContext(input=text)) is True

    def test_does_not_match(self):
        assert FinanceAgent().can_handle(AgentContext(input="summarize my tasks")) is False
