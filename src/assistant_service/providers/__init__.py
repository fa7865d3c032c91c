"""
Адаптеры внешних источников данных.

- ClickUpProvider — задачи из ClickUp REST API (TaskProvider)
- FlowtlyProvider — финансовый срез из Flowtly MCP (FinanceProvider)
"""

from .clickup import ClickUpConfig, ClickUpProvider
from .flowtly import FlowtlyConfig, FlowtlyProvider

__all__ = [
    "ClickUpConfig",
    "ClickUpProvider",
    "FlowtlyConfig",
    "FlowtlyProvider",
]
