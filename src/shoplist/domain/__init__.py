"""Domain layer: item records, ordering policy and entry transitions."""
from .types import ItemId, Importance, ItemRecord, ListSnapshot
from .ordering import order_items, importance_rank
from .transitions import EntryEvent, EntryTransition, next_transition

__all__ = [
    'ItemId',
    'Importance',
    'ItemRecord',
    'ListSnapshot',
    'order_items',
    'importance_rank',
    'EntryEvent',
    'EntryTransition',
    'next_transition',
]
