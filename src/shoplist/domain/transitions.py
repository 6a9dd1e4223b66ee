"""Entry-state transitions for list items."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .types import ItemRecord


class EntryEvent(str, Enum):
    """User actions that touch an item's entry state."""
    IMPORTANCE_SET = "importance_set"
    TEXT_COMMITTED = "text_committed"


@dataclass(frozen=True)
class EntryTransition:
    """Outcome of an entry event."""
    is_new_entry: bool
    spawn_placeholder: bool


_KEEP_NEW = EntryTransition(is_new_entry=True, spawn_placeholder=False)
_FINALIZE = EntryTransition(is_new_entry=False, spawn_placeholder=True)
_SETTLED = EntryTransition(is_new_entry=False, spawn_placeholder=False)

# (is_new_entry, event) -> transition
_TRANSITIONS: Dict[Tuple[bool, EntryEvent], EntryTransition] = {
    (True, EntryEvent.IMPORTANCE_SET): _FINALIZE,
    (True, EntryEvent.TEXT_COMMITTED): _KEEP_NEW,
    (False, EntryEvent.IMPORTANCE_SET): _SETTLED,
    (False, EntryEvent.TEXT_COMMITTED): _SETTLED,
}


def next_transition(item: ItemRecord, event: EntryEvent) -> EntryTransition:
    """
    Look up what an event does to an item's entry state.

    Committing an importance finalizes a new entry, which asks for a fresh
    placeholder so the list keeps one trailing empty item. Committing text
    never changes the entry state; the entry stays new until an importance
    is picked.
    """
    return _TRANSITIONS[(item.is_new_entry, event)]
