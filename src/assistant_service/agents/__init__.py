"""
Агенты assistant-service.

- TodoAgent — сводка задач (ClickUp)
- FinanceAgent — сводка финансовых метрик (Flowtly)
- planner / researcher / executor — скрытые агенты с фиксированным ответом
"""

from __future__ import annotations

from typing import Optional

from ..core.base_agent import BaseAgent
from .finance import FinanceAgent, TextGenerator
from .general import (
    StaticReplyAgent,
    create_executor_agent,
    create_planner_agent,
    create_researcher_agent,
)
from .todo import TodoAgent


def create_default_agents(summarizer: Optional[TextGenerator] = None) -> list[BaseAgent]:
    """
    Стандартный набор агентов в порядке регистрации.

    Порядок важен: executor принимает любой запрос и должен идти последним.

    Args:
        summarizer: LLM-клиент для сводок finance (необязателен).
    """
    return [
        TodoAgent(),
        FinanceAgent(summarizer=summarizer),
        create_planner_agent(),
        create_researcher_agent(),
        create_executor_agent(),
    ]


__all__ = [
    "FinanceAgent",
    "StaticReplyAgent",
    "TextGenerator",
    "TodoAgent",
    "create_default_agents",
    "create_executor_agent",
    "create_planner_agent",
    "create_researcher_agent",
]
