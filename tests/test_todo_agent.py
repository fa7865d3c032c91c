"""
Тесты для TodoAgent — сводки задач.
"""

from datetime import datetime, timezone

import pytest

pytestmark = pytest.mark.anyio

from assistant_service.agents import TodoAgent
from assistant_service.agents.todo import (
    TODO_SETUP_REPLY,
    TODO_UNREACHABLE_REPLY,
    format_summary,
    parse_due,
    propose_help,
)
from assistant_service.core import AgentContext, AgentMemory, ProviderError, TodoTask

from conftest import StubTaskProvider

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_agent() -> TodoAgent:
    return TodoAgent(clock=lambda: NOW)


class TestCanHandle:
    @pytest.mark.parametrize(
        "text",
        ["summarize my tasks", "TODO list", "what's in ClickUp", "action items from the call", "groom the backlog"],
    )
    def test_matches(self, text):
        assert make_agent().can_handle(AgentContext(input=text)) is True

    @pytest.mark.parametrize("text", ["hello there", "what is our runway"])
    def test_does_not_match(self, text):
        assert make_agent().can_handle(AgentContext(input=text)) is False


class TestParseDue:
    def test_iso_with_z(self):
        assert parse_due("2024-01-01T00:00:00.000Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_naive_treated_as_utc(self):
        assert parse_due("2024-01-01T10:00:00") == datetime(2024, 1, 1, 10, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "tomorrow"])
    def test_unparseable(self, value):
        assert parse_due(value) is None


class TestSummary:
    def test_no_tasks(self):
        assert format_summary([], NOW) == "\n".join(
            [
                "Summary: 0 total, 0 overdue, 0 without due dates.",
                "Proactive help: Looks good. Want me to group tasks by project or due date?",
            ]
        )

    def test_mixed_tasks(self):
        tasks = [
            TodoTask(id="1", name="Overdue", due_at="2024-05-01T00:00:00.000Z", priority="high"),
            TodoTask(id="2", name="Upcoming", due_at="2024-07-01T00:00:00.000Z", priority="normal"),
            TodoTask(id="3", name="No date", priority="urgent"),
        ]

        summary = format_summary(tasks, NOW)

        assert summary.splitlines() == [
            "Summary: 3 total, 1 overdue, 1 without due dates.",
            "Proactive help: Triage 1 overdue task and reset due dates. "
            "Add due dates to 1 task to reduce drift. "
            "Focus on 2 high-priority tasks today.",
        ]

    def test_plurals(self):
        tasks = [TodoTask(id=str(i), name="t", due_at="2020-01-01T00:00:00Z") for i in range(2)]

        assert propose_help(tasks, NOW) == ["Triage 2 overdue tasks and reset due dates."]


class TestHandle:
    async def test_without_provider(self):
        """Без провайдера — инструкция по настройке, connected=False."""
        result = await make_agent().handle(AgentContext(input="tasks"))

        assert result.reply == TODO_SETUP_REPLY
        assert result.metadata == {"connected": False}

    async def test_shape_invalid_provider_not_called(self):
        """Объект не того типа в слоте не вызывается."""

        class Impostor:
            called = False

            async def list_tasks(self, context):
                Impostor.called = True
                raise AssertionError("must not be called")

        memory = AgentMemory.model_construct(task_provider=Impostor(), finance_provider=None, intent_router=None)
        result = await make_agent().handle(AgentContext(input="tasks", memory=memory))

        assert result.metadata == {"connected": False}
        assert Impostor.called is False

    async def test_with_provider(self):
        provider = StubTaskProvider(tasks=[TodoTask(id="1", name="Write report")])
        context = AgentContext(input="tasks", memory=AgentMemory(task_provider=provider))

        result = await make_agent().handle(context)

        assert result.metadata == {"connected": True, "taskCount": 1}
        assert result.reply.startswith("Summary: 1 total, 0 overdue, 1 without due dates.")
        assert provider.calls == 1

    async def test_provider_error(self):
        """Ошибка провайдера — извинение и текст ошибки в метаданных."""
        provider = StubTaskProvider(error=ProviderError("ClickUp API error for list 1: 401", provider="clickup"))
        context = AgentContext(input="tasks", memory=AgentMemory(task_provider=provider))

        result = await make_agent().handle(context)

        assert result.reply == TODO_UNREACHABLE_REPLY
        assert result.metadata == {"connected": False, "error": "ClickUp API error for list 1: 401"}

    async def test_unexpected_error_propagates(self):
        provider = StubTaskProvider(error=KeyError("bug"))
        context = AgentContext(input="tasks", memory=AgentMemory(task_provider=provider))

        with pytest.raises(KeyError):
            await make_agent().handle(context)
