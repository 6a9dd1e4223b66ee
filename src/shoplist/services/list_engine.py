"""In-memory list state engine with ordering and undo."""
import time
from typing import Any, Callable, Iterable, List, Optional, Protocol, Sequence, Union

from shoplist.config.settings import get_settings
from shoplist.domain.ordering import order_items
from shoplist.domain.transitions import EntryEvent, next_transition
from shoplist.domain.types import Importance, ItemId, ItemRecord, ListSnapshot, copy_items
from shoplist.sync.documents import ChangeType, RemoteChange
from .action_log import (
    ActionLog,
    RemoveEntry,
    UpdateImportanceEntry,
    UpdateTextEntry,
)
from .base_service import BaseService, Result


class ListObserver(Protocol):
    """Receives one snapshot per completed list operation."""

    def list_changed(self, snapshot: ListSnapshot) -> None:
        ...


class SyncAdapter(Protocol):
    """Remote writes the engine fires after local mutations.

    Calls are fire-and-forget: the return value is ignored and failures
    must be reported by the adapter itself.
    """

    def upsert(self, item: ItemRecord) -> Any:
        ...

    def update_text(self, item: ItemRecord) -> Any:
        ...

    def remove(self, item_id: int) -> Any:
        ...


class TimestampIds:
    """Millisecond creation timestamps, bumped to stay strictly increasing."""

    def __init__(self):
        self._last = 0

    def __call__(self) -> int:
        now = time.time_ns() // 1_000_000
        self._last = max(now, self._last + 1)
        return self._last


class ListStateEngine(BaseService):
    """
    Owns the shopping list and applies every mutation to it.

    Each operation runs to completion before observers hear about it:
    mutation, action log update, reordering, then a single snapshot
    notification. Operations on unknown ids do nothing and return a
    failed Result. The engine is not thread-safe; callers serialize
    access (see SerialDispatcher).
    """

    def __init__(
        self,
        action_log: Optional[ActionLog] = None,
        sync: Optional[SyncAdapter] = None,
        id_factory: Optional[Callable[[], int]] = None,
        observers: Iterable[ListObserver] = ()
    ):
        """
        Initialize the engine.

        Args:
            action_log: Undo history (default: sized from settings)
            sync: Optional remote store adapter
            id_factory: Source of new item ids (default: timestamps)
            observers: Observers subscribed from the start
        """
        super().__init__()
        if action_log is None:
            action_log = ActionLog(get_settings().MAX_UNDO_STEPS)
        self.action_log = action_log
        self.sync = sync
        self._next_id = id_factory or TimestampIds()
        self._observers: List[ListObserver] = list(observers)
        self._items: List[ItemRecord] = []

    # -------------------- observation --------------------

    def subscribe(self, observer: ListObserver) -> Callable[[], None]:
        """
        Register an observer.

        Returns:
            A callable that unsubscribes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def snapshot(self, scroll_to_bottom: bool = False) -> ListSnapshot:
        """Get an immutable copy of the current ordered list."""
        return ListSnapshot(
            items=copy_items(self._items),
            scroll_to_bottom=scroll_to_bottom,
            can_undo=self.can_undo,
        )

    def _emit(self, scroll_to_bottom: bool = False) -> ListSnapshot:
        snapshot = self.snapshot(scroll_to_bottom)
        for observer in list(self._observers):
            try:
                observer.list_changed(snapshot)
            except Exception:
                self.logger.exception("Observer failed", observer=repr(observer))
        return snapshot

    # -------------------- queries --------------------

    @property
    def items(self) -> List[ItemRecord]:
        """Copies of the records in display order."""
        return list(copy_items(self._items))

    @property
    def can_undo(self) -> bool:
        return not self.action_log.is_empty()

    def find(self, item_id: int) -> Optional[ItemRecord]:
        """Get a copy of the record with the given id, if present."""
        item = self._find(item_id)
        return item.model_copy() if item else None

    def has_empty_item(self) -> bool:
        """Check whether any record has empty text."""
        return any(not item.text for item in self._items)

    def __len__(self) -> int:
        return len(self._items)

    def _index_of(self, item_id: int) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def _find(self, item_id: int) -> Optional[ItemRecord]:
        index = self._index_of(item_id)
        return self._items[index] if index is not None else None

    # -------------------- internal mutations --------------------

    def _append_placeholder(self) -> ItemRecord:
        item_id = self._next_id()
        while self._index_of(item_id) is not None:
            item_id = self._next_id()
        item = ItemRecord(id=ItemId(item_id))
        self._items.append(item)
        return item

    def _reorder(self) -> None:
        self._items = order_items(self._items)

    def _sync(self, action: str, *args) -> None:
        """Fire a remote write; a failure to schedule never reaches the caller."""
        if self.sync is None:
            return
        try:
            getattr(self.sync, action)(*args)
        except Exception:
            self.logger.exception(f"Failed to schedule remote {action}")

    # -------------------- operations --------------------

    def add_item(self) -> Result[ListSnapshot]:
        """Append an empty placeholder item at the end of the list."""
        item = self._append_placeholder()
        self._log_action("add_item", item_id=item.id)
        self._sync("upsert", item.model_copy())
        return Result.ok(self._emit(scroll_to_bottom=True), item_id=item.id)

    def remove_item(self, item_id: int) -> Result[ListSnapshot]:
        """
        Remove an item, recording it for undo.

        Args:
            item_id: ID of the item to remove

        Returns:
            Result containing the new snapshot, or failure if not found
        """
        index = self._index_of(item_id)
        if index is None:
            return self._not_found("remove_item", item_id)

        item = self._items.pop(index)
        self.action_log.push(RemoveEntry(item=item))
        self._log_action("remove_item", item_id=item_id, text=item.text)
        self._sync("remove", item.id)
        return Result.ok(self._emit())

    def change_importance(
        self,
        item_id: int,
        importance: Union[Importance, str]
    ) -> Result[ListSnapshot]:
        """
        Set an item's importance and re-sort the list.

        Setting the importance of a new entry finalizes it, which appends a
        fresh placeholder in the same operation.

        Args:
            item_id: ID of the item to change
            importance: New importance level

        Returns:
            Result containing the new snapshot, or failure if not found
        """
        try:
            importance = Importance.parse(importance)
        except ValueError as e:
            return Result.fail(str(e))

        item = self._find(item_id)
        if item is None:
            return self._not_found("change_importance", item_id)

        self.action_log.push(UpdateImportanceEntry(
            item_id=item.id,
            previous_importance=item.importance
        ))
        transition = next_transition(item, EntryEvent.IMPORTANCE_SET)
        item.is_new_entry = transition.is_new_entry
        placeholder = self._append_placeholder() if transition.spawn_placeholder else None
        item.importance = importance
        self._reorder()

        self._log_action(
            "change_importance",
            item_id=item_id,
            importance=importance.value,
            placeholder_id=placeholder.id if placeholder else None
        )
        self._sync("upsert", item.model_copy())
        if placeholder is not None:
            self._sync("upsert", placeholder.model_copy())
        return Result.ok(self._emit(scroll_to_bottom=placeholder is not None))

    def change_text(self, item_id: int, text: str) -> Result[ListSnapshot]:
        """
        Update an item's text while it is being typed.

        Keystroke-level edits neither reorder the list nor enter the undo
        history; see record_text_change for the commit boundary.
        """
        item = self._find(item_id)
        if item is None:
            return self._not_found("change_text", item_id)

        item.text = text
        return Result.ok(self._emit())

    def record_text_change(self, item_id: int, original_text: str) -> Result[ListSnapshot]:
        """
        Commit a text edit so it can be undone.

        A new entry stays new; only committing an importance finalizes it.

        Args:
            item_id: ID of the edited item
            original_text: Text the item had when editing started

        Returns:
            Result containing the new snapshot, or failure if not found
        """
        item = self._find(item_id)
        if item is None:
            return self._not_found("record_text_change", item_id)

        if item.text == original_text:
            self.logger.debug("record_text_change: text unchanged", item_id=item_id)
            return Result.ok(self.snapshot(), changed=False)

        self.action_log.push(UpdateTextEntry(item_id=item.id, previous_text=original_text))
        item.is_new_entry = next_transition(item, EntryEvent.TEXT_COMMITTED).is_new_entry
        self._reorder()

        self._log_action("record_text_change", item_id=item_id)
        self._sync("update_text", item.model_copy())
        return Result.ok(self._emit(), changed=True)

    def set_options_expanded(self, item_id: int, expanded: bool) -> Result[ListSnapshot]:
        """Show or hide an item's importance options."""
        item = self._find(item_id)
        if item is None:
            return self._not_found("set_options_expanded", item_id)

        item.options_expanded = expanded
        return Result.ok(self._emit())

    def undo(self) -> Result[ListSnapshot]:
        """
        Reverse the most recent logged action.

        Returns:
            Result containing the new snapshot, or failure if there is
            nothing to undo
        """
        entry = self.action_log.pop_last()
        if entry is None:
            self.logger.debug("undo: history is empty")
            return Result.fail("Nothing to undo")

        if isinstance(entry, RemoveEntry):
            self._undo_remove(entry)
        elif isinstance(entry, UpdateTextEntry):
            self._undo_text(entry)
        elif isinstance(entry, UpdateImportanceEntry):
            self._undo_importance(entry)

        self._reorder()
        self._log_action("undo", kind=entry.kind, item_id=entry.item_id)
        return Result.ok(self._emit(), undone=entry.kind)

    def _undo_remove(self, entry: RemoveEntry) -> None:
        if self._index_of(entry.item.id) is not None:
            self.logger.debug("undo remove: item already present", item_id=entry.item.id)
            return
        self._items.append(entry.item)
        self._sync("upsert", entry.item.model_copy())

    def _undo_text(self, entry: UpdateTextEntry) -> None:
        item = self._find(entry.item_id)
        if item is None:
            self.logger.debug("undo text: item no longer exists", item_id=entry.item_id)
            return
        item.text = entry.previous_text
        self._sync("update_text", item.model_copy())

    def _undo_importance(self, entry: UpdateImportanceEntry) -> None:
        item = self._find(entry.item_id)
        if item is None:
            self.logger.debug("undo importance: item no longer exists", item_id=entry.item_id)
            return
        item.importance = entry.previous_importance
        self._sync("upsert", item.model_copy())

    # -------------------- bulk state --------------------

    def load(self, items: Iterable[ItemRecord]) -> Result[ListSnapshot]:
        """
        Replace the list contents, e.g. with records restored at start-up.

        Duplicate ids keep their first occurrence. The undo history is
        cleared because it refers to the replaced records.
        """
        loaded: List[ItemRecord] = []
        seen = set()
        for item in items:
            if item.id in seen:
                self.logger.warning("load: duplicate item id skipped", item_id=item.id)
                continue
            seen.add(item.id)
            loaded.append(item.model_copy())

        self._items = order_items(loaded)
        self.action_log.clear()
        self._log_action("load", count=len(self._items))
        return Result.ok(self._emit())

    def apply_remote_changes(self, changes: Sequence[RemoteChange]) -> Result[ListSnapshot]:
        """
        Reconcile a batch of change-feed notifications by item id.

        ADDED appends a record (or replaces it if the id is already known),
        MODIFIED replaces a known record in place, REMOVED drops it. Local
        view state is kept. Remote changes are not undoable and are not
        written back to the store.
        """
        applied = 0
        for change in changes:
            if change.type is ChangeType.REMOVED:
                remaining = [item for item in self._items if item.id != change.item_id]
                applied += len(self._items) - len(remaining)
                self._items = remaining
                continue

            document = change.document
            index = self._index_of(change.item_id)
            if index is None:
                if change.type is ChangeType.ADDED:
                    self._items.append(document.to_item())
                    applied += 1
                else:
                    self.logger.debug("Remote change for unknown item ignored", item_id=change.item_id)
                continue

            current = self._items[index]
            if document.same_content(current):
                continue
            self._items[index] = document.to_item(options_expanded=current.options_expanded)
            applied += 1

        self._reorder()
        self._log_action("apply_remote_changes", received=len(changes), applied=applied)
        return Result.ok(self._emit(), applied=applied)


__all__ = [
    'ListObserver',
    'SyncAdapter',
    'TimestampIds',
    'ListStateEngine',
]
