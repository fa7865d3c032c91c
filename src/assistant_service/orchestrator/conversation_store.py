from __future__ import annotations

import copy
from typing import Any, Dict, Protocol


class ConversationStore(Protocol):
    """
    Хранилище состояния диалога: один документ на ключ.

    Ядро формат документа не разбирает; его читает и пишет HTTP-оболочка.
    """

    async def get(self, doc_id: str) -> dict[str, Any]:
        """Документ по ключу или пустой словарь."""
        ...

    async def set_merge(self, doc_id: str, data: dict[str, Any]) -> None:
        """Поверхностно слить data с существующим документом."""
        ...


class InMemoryConversationStore:
    """Простое in-memory хранилище документов диалога (живёт до рестарта процесса)."""

    def __init__(self) -> None:
        self._store: Dict[str, dict[str, Any]] = {}

    async def get(self, doc_id: str) -> dict[str, Any]:
        if not doc_id:
            return {}
        return copy.deepcopy(self._store.get(doc_id, {}))

    async def set_merge(self, doc_id: str, data: dict[str, Any]) -> None:
        if not doc_id:
            return
        current = self._store.setdefault(doc_id, {})
        current.update(copy.deepcopy(data))

    def clear(self, doc_id: str) -> None:
        self._store.pop(doc_id, None)
