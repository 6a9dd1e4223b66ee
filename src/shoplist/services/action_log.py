"""Bounded undo history for list mutations."""
from collections import deque
from typing import Annotated, Deque, Literal, Optional, Union
from pydantic import BaseModel, Field

from shoplist.domain.types import Importance, ItemId, ItemRecord
from shoplist.utils.logger import get_logger

logger = get_logger(__name__)


class RemoveEntry(BaseModel):
    """An item was removed; the entry owns the removed record."""
    kind: Literal["remove"] = "remove"
    item: ItemRecord

    @property
    def item_id(self) -> ItemId:
        return self.item.id


class UpdateTextEntry(BaseModel):
    """An item's text was committed."""
    kind: Literal["update_text"] = "update_text"
    item_id: ItemId
    previous_text: str


class UpdateImportanceEntry(BaseModel):
    """An item's importance was changed."""
    kind: Literal["update_importance"] = "update_importance"
    item_id: ItemId
    previous_importance: Importance


ActionLogEntry = Annotated[
    Union[RemoveEntry, UpdateTextEntry, UpdateImportanceEntry],
    Field(discriminator="kind")
]


class ActionLog:
    """LIFO history of reversible actions, capped at a fixed depth."""

    def __init__(self, capacity: int = 50):
        """
        Args:
            capacity: Maximum number of entries kept; the oldest entry is
                evicted when a push would exceed it

        Raises:
            ValueError: If capacity is smaller than one
        """
        if capacity < 1:
            raise ValueError("Action log capacity must be at least 1")
        self.capacity = capacity
        self._entries: Deque[ActionLogEntry] = deque()

    def push(self, entry: ActionLogEntry) -> None:
        if len(self._entries) >= self.capacity:
            evicted = self._entries.popleft()
            logger.debug("Evicted oldest action", kind=evicted.kind, item_id=evicted.item_id)
        self._entries.append(entry)

    def pop_last(self) -> Optional[ActionLogEntry]:
        """Remove and return the most recent entry, or None if empty."""
        if not self._entries:
            return None
        return self._entries.pop()

    def peek_last(self) -> Optional[ActionLogEntry]:
        return self._entries[-1] if self._entries else None

    def is_empty(self) -> bool:
        return not self._entries

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
