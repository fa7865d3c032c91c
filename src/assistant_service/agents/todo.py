"""
TodoAgent — агент сводки задач из таск-трекера.

Берёт TaskProvider из AgentContext.memory.task_provider, считает
просроченные задачи и задачи без срока и предлагает следующие шаги.
Без провайдера возвращает инструкцию по подключению, не делая сетевых вызовов.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Optional

from ..core.base_agent import BaseAgent
from ..core.context import AgentContext
from ..core.exceptions import ProviderError
from ..core.providers import TaskProvider, TodoTask
from ..core.result import AgentResult

logger = logging.getLogger(__name__)

TODO_PATTERN = re.compile(r"todo|task|clickup|action items?|backlog", re.IGNORECASE)
HIGH_PRIORITY_PATTERN = re.compile(r"high|urgent|p1", re.IGNORECASE)

TODO_SETUP_REPLY = "\n".join(
    [
        "I can connect to ClickUp once a provider is wired in.",
        "Add a ClickUp provider to AgentContext.memory as `task_provider`.",
        "That provider should implement `list_tasks(context)` and return tasks "
        "with id/name/status/due_at/priority/url.",
    ]
)
TODO_UNREACHABLE_REPLY = "I could not reach ClickUp. Check the MCP provider configuration."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def parse_due(value: Optional[str]) -> Optional[datetime]:
    """
    Разобрать срок задачи в aware datetime (UTC).

    Returns:
        datetime или None, если срок не задан или не разбирается.
    """
    if not value:
        return None
    try:
        due = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if due.tzinfo is None:
        due = due.replace(tzinfo=timezone.utc)
    return due


def _is_overdue(task: TodoTask, now: datetime) -> bool:
    due = parse_due(task.due_at)
    return due is not None and due < now


def propose_help(tasks: list[TodoTask], now: datetime) -> list[str]:
    """Предложения по задачам: просрочки, сроки, приоритеты."""
    suggestions: list[str] = []

    overdue = sum(1 for task in tasks if _is_overdue(task, now))
    if overdue:
        suggestions.append(
            f"Triage {overdue} overdue task{_plural(overdue)} and reset due dates."
        )

    no_due_date = sum(1 for task in tasks if not task.due_at)
    if no_due_date:
        suggestions.append(
            f"Add due dates to {no_due_date} task{_plural(no_due_date)} to reduce drift."
        )

    high_priority = sum(
        1 for task in tasks if task.priority and HIGH_PRIORITY_PATTERN.search(task.priority)
    )
    if high_priority:
        suggestions.append(
            f"Focus on {high_priority} high-priority task{_plural(high_priority)} today."
        )

    if not suggestions:
        suggestions.append("Looks good. Want me to group tasks by project or due date?")

    return suggestions


def format_summary(tasks: list[TodoTask], now: datetime) -> str:
    """Двухстрочная сводка: счётчики и предложения."""
    overdue = sum(1 for task in tasks if _is_overdue(task, now))
    without_due_date = sum(1 for task in tasks if not task.due_at)
    return "\n".join(
        [
            f"Summary: {len(tasks)} total, {overdue} overdue, "
            f"{without_due_date} without due dates.",
            f"Proactive help: {' '.join(propose_help(tasks, now))}",
        ]
    )


class TodoAgent(BaseAgent):
    """
    Агент задач (ClickUp).

    Attributes:
        _clock: Источник текущего времени (подменяется в тестах).
    """

    AGENT_ID = "todo"

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        super().__init__(
            agent_id=self.AGENT_ID,
            description="Connects to ClickUp MCP, summarizes tasks, and proposes help.",
        )
        self._clock = clock

    def can_handle(self, context: AgentContext) -> bool:
        return TODO_PATTERN.search(context.input) is not None

    async def handle(self, context: AgentContext) -> AgentResult:
        provider = context.memory.task_provider
        if not isinstance(provider, TaskProvider):
            return AgentResult.disconnected(TODO_SETUP_REPLY)

        try:
            tasks = await provider.list_tasks(context)
        except ProviderError as exc:
            logger.warning("Task provider '%s' failed: %s", provider.name, exc)
            return AgentResult.disconnected(TODO_UNREACHABLE_REPLY, error=str(exc))

        return AgentResult.connected(
            format_summary(tasks, self._clock()),
            taskCount=len(tasks),
        )
