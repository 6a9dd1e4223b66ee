"""Fire-and-forget synchronization between the engine and the store."""
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import Callable, List, Optional

from shoplist.domain.types import ItemRecord
from shoplist.services.base_service import BaseService, Result
from .documents import ItemDocument, RemoteChange
from .errors import SyncError
from .feed import ChangeFeed
from .store import DocumentStore


FailureCallback = Callable[[str, BaseException], None]


class SyncService(BaseService):
    """
    Pushes local changes to the document store and pulls remote ones.

    All store access runs on one worker thread, so writes reach the store
    in the order they were issued. Write failures are logged and passed to
    the optional failure callback; they never propagate to the caller and
    never roll back local state.
    """

    def __init__(
        self,
        store: DocumentStore,
        feed: Optional[ChangeFeed] = None,
        on_failure: Optional[FailureCallback] = None,
        executor: Optional[ThreadPoolExecutor] = None
    ):
        super().__init__(collection=store.collection)
        self.store = store
        self.feed = feed or ChangeFeed(store)
        self.on_failure = on_failure
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="shoplist-sync"
        )

    def upsert(self, item: ItemRecord) -> Future:
        """Create or replace the remote document of an item."""
        document = ItemDocument.from_item(item)
        return self._submit("upsert", self.store.upsert, document, item_id=item.id)

    def update_text(self, item: ItemRecord) -> Future:
        """Patch the remote text of an item."""
        return self._submit("update_text", self.store.update_text, item.id, item.text, item_id=item.id)

    def remove(self, item_id: int) -> Future:
        """Delete the remote document of an item."""
        return self._submit("remove", self.store.remove, item_id, item_id=item_id)

    def pull(self, timeout: Optional[float] = None) -> Result[List[RemoteChange]]:
        """
        Poll the change feed after all pending writes.

        Args:
            timeout: Seconds to wait for the poll

        Returns:
            Result containing the changes, or failure if the store could
            not be read
        """
        future = self._executor.submit(self.feed.poll)
        try:
            changes = future.result(timeout=timeout)
        except SyncError as e:
            self.logger.error(f"Remote pull failed: {e.message}", **e.metadata)
            self._notify_failure("pull", e)
            return Result.fail(e.message, suggestions=["Check the document store connection"])
        return Result.ok(changes)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker, by default after pending writes finish."""
        self._executor.shutdown(wait=wait)

    def _submit(self, action: str, fn: Callable, *args, **log_data) -> Future:
        future = self._executor.submit(fn, *args)
        future.add_done_callback(partial(self._report, action, log_data))
        return future

    def _report(self, action: str, log_data: dict, future: Future) -> None:
        if future.cancelled():
            self.logger.warning(f"Remote {action} cancelled", **log_data)
            return
        error = future.exception()
        if error is None:
            if future.result() is False:
                self.logger.debug(f"Remote {action}: no matching document", **log_data)
            else:
                self._log_action(f"remote_{action}", **log_data)
            return
        self.logger.opt(exception=error).error(f"Remote {action} failed", **log_data)
        self._notify_failure(action, error)

    def _notify_failure(self, action: str, error: BaseException) -> None:
        if self.on_failure is None:
            return
        try:
            self.on_failure(action, error)
        except Exception:
            self.logger.exception("Sync failure callback raised")
