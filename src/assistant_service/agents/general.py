"""
Всегда доступные агенты без внешних зависимостей.

planner, researcher и executor скрыты от пользователя и участвуют только
в маршрутизации. executor — catch-all, поэтому регистрируется последним.
"""

from __future__ import annotations

import re
from typing import Optional

from ..core.base_agent import BaseAgent
from ..core.context import AgentContext
from ..core.result import AgentResult

PLANNER_REPLY = "Plan: clarify goals, list constraints, draft steps, confirm timeline."
RESEARCHER_REPLY = "Research: identify sources, collect facts, summarize findings."
EXECUTOR_REPLY = "Got it. Next actions: clarify scope, draft deliverable, iterate."


class StaticReplyAgent(BaseAgent):
    """
    Агент с фиксированным ответом.

    Attributes:
        reply: Текст ответа.
        pattern: Регулярное выражение предиката; None — агент принимает всё.
    """

    def __init__(
        self,
        agent_id: str,
        description: str,
        reply: str,
        pattern: Optional[str] = None,
        visible: bool = False,
    ) -> None:
        super().__init__(agent_id, description, visible)
        self.reply = reply
        self.pattern = re.compile(pattern, re.IGNORECASE) if pattern else None

    def can_handle(self, context: AgentContext) -> bool:
        if self.pattern is None:
            return True
        return self.pattern.search(context.input) is not None

    async def handle(self, context: AgentContext) -> AgentResult:
        return AgentResult(reply=self.reply, metadata={"input": context.input})


def create_planner_agent() -> StaticReplyAgent:
    return StaticReplyAgent(
        "planner",
        "Breaks down tasks into steps and timelines.",
        PLANNER_REPLY,
        pattern=r"plan|roadmap|steps|outline",
    )


def create_researcher_agent() -> StaticReplyAgent:
    return StaticReplyAgent(
        "researcher",
        "Summarizes unknowns and lists what to verify.",
        RESEARCHER_REPLY,
        pattern=r"research|find|look up|verify",
    )


def create_executor_agent() -> StaticReplyAgent:
    return StaticReplyAgent(
        "executor",
        "Provides direct answers and concrete next actions.",
        EXECUTOR_REPLY,
    )
