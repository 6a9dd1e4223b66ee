"""Domain types for shoplist."""
from enum import Enum
from typing import NewType, Tuple
from pydantic import BaseModel, ConfigDict, field_validator


# Strong type for item IDs
ItemId = NewType('ItemId', int)


class Importance(str, Enum):
    """Importance tag of a list item, declared in display order."""
    IMPORTANT = "IMPORTANT"
    NORMAL = "NORMAL"
    UNIMPORTANT = "UNIMPORTANT"

    @classmethod
    def parse(cls, value: str) -> 'Importance':
        """Parse an importance name, ignoring case and surrounding whitespace."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError("Importance must be a string")
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown importance: {value!r}") from None


class ItemRecord(BaseModel):
    """A single shopping list entry.

    An empty ``text`` marks the placeholder entry used for typing the next
    item. ``options_expanded`` is view state and is never persisted.
    """
    id: ItemId
    text: str = ""
    importance: Importance = Importance.NORMAL
    is_new_entry: bool = True
    options_expanded: bool = False

    @field_validator('importance', mode='before')
    @classmethod
    def parse_importance(cls, v) -> Importance:
        """Accept importance names in any case."""
        return Importance.parse(v)

    @property
    def is_placeholder(self) -> bool:
        return self.text == ""

    def __repr__(self) -> str:
        return f"<ItemRecord(id={self.id}, text='{self.text}', importance={self.importance.value})>"


class ListSnapshot(BaseModel):
    """Immutable view of the ordered list handed to observers."""
    items: Tuple[ItemRecord, ...] = ()
    scroll_to_bottom: bool = False
    can_undo: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def ids(self) -> Tuple[int, ...]:
        """Item ids in display order."""
        return tuple(item.id for item in self.items)

    def __len__(self) -> int:
        return len(self.items)


def copy_items(items) -> Tuple[ItemRecord, ...]:
    """Detach records from engine ownership."""
    return tuple(item.model_copy() for item in items)


__all__ = [
    'ItemId',
    'Importance',
    'ItemRecord',
    'ListSnapshot',
    'copy_items',
]
