"""Ordering policy for shopping list items."""
from typing import Dict, Iterable, List, Tuple

from .types import Importance, ItemRecord


_RANKS: Dict[Importance, int] = {
    importance: rank for rank, importance in enumerate(Importance)
}


def importance_rank(importance: Importance) -> int:
    """Rank of an importance level, lower ranks are shown first."""
    return _RANKS[importance]


def _sort_key(item: ItemRecord) -> Tuple[int, int]:
    # Empty items share one key so they keep their input order
    if not item.text:
        return (1, 0)
    return (0, importance_rank(item.importance))


def order_items(items: Iterable[ItemRecord]) -> List[ItemRecord]:
    """
    Order items for display.

    Non-empty items come first, ranked IMPORTANT, NORMAL, UNIMPORTANT.
    Empty (placeholder) items follow. The sort is stable, so items with
    equal keys keep their relative input order.

    Args:
        items: Items in their current order

    Returns:
        A new list holding the same records in display order
    """
    return sorted(items, key=_sort_key)
