"""Composition root wiring the engine, dispatcher and sync service."""
from concurrent.futures import Future
from typing import Optional, Union
from sqlalchemy.engine import Engine

from shoplist.config.settings import ShopListSettings, get_settings
from shoplist.db.init_db import init_db
from shoplist.db.session import make_engine, make_session_factory
from shoplist.domain.types import Importance, ListSnapshot
from shoplist.sync.service import SyncService
from shoplist.sync.store import DocumentStore
from shoplist.utils.logger import setup_logging
from .action_log import ActionLog
from .base_service import BaseService, Result
from .dispatcher import SerialDispatcher
from .list_engine import ListObserver, ListStateEngine


class ShoppingListController(BaseService):
    """
    Entry point for a host UI.

    Every operation is queued on the dispatcher and returns a Future of the
    engine's Result. Observers are called on the dispatcher thread.
    """

    def __init__(
        self,
        engine: ListStateEngine,
        sync: Optional[SyncService] = None,
        dispatcher: Optional[SerialDispatcher] = None
    ):
        super().__init__()
        self.engine = engine
        self.sync = sync
        self.dispatcher = dispatcher or SerialDispatcher()

    @classmethod
    def from_settings(
        cls,
        settings: Optional[ShopListSettings] = None,
        db_engine: Optional[Engine] = None
    ) -> 'ShoppingListController':
        """
        Build a controller from configuration.

        Args:
            settings: Settings to use (default: cached settings)
            db_engine: Database engine for the store (default: from settings)

        Returns:
            A controller, with sync enabled when settings.SYNC_ENABLED
        """
        settings = settings or get_settings()
        setup_logging(settings)
        sync = None
        if settings.SYNC_ENABLED:
            db_engine = init_db(db_engine or make_engine(settings.SYNC_DB_URL, settings.SYNC_DB_ECHO))
            store = DocumentStore(make_session_factory(db_engine), settings.SYNC_USER_ID)
            sync = SyncService(store)
        engine = ListStateEngine(action_log=ActionLog(settings.MAX_UNDO_STEPS), sync=sync)
        return cls(engine, sync=sync)

    # -------------------- lifecycle --------------------

    def start(self) -> Future:
        """Load the remote list and make sure a placeholder exists."""
        return self.dispatcher.submit(self._start)

    def _start(self) -> Result[ListSnapshot]:
        if self.sync is not None:
            self._pull_and_apply()
        if not self.engine.has_empty_item():
            return self.engine.add_item()
        self._log_action("start", items=len(self.engine))
        return Result.ok(self.engine.snapshot())

    def refresh(self) -> Future:
        """Apply changes made remotely since the last pull."""
        return self.dispatcher.submit(self._pull_and_apply)

    def _pull_and_apply(self) -> Result[ListSnapshot]:
        if self.sync is None:
            return Result.fail("Sync is disabled")
        pulled = self.sync.pull()
        if not pulled.success:
            return Result.fail(pulled.error, suggestions=pulled.suggestions)
        return self.engine.apply_remote_changes(pulled.data)

    def close(self) -> None:
        """Finish queued work and stop the worker threads."""
        self.dispatcher.shutdown()
        if self.sync is not None:
            self.sync.shutdown()

    def __enter__(self) -> 'ShoppingListController':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -------------------- queued operations --------------------

    def subscribe(self, observer: ListObserver) -> Future:
        """Register an observer; the future yields its unsubscribe callable."""
        return self.dispatcher.submit(self.engine.subscribe, observer)

    def snapshot(self) -> Future:
        return self.dispatcher.submit(self.engine.snapshot)

    def add_item(self) -> Future:
        return self.dispatcher.submit(self.engine.add_item)

    def remove_item(self, item_id: int) -> Future:
        return self.dispatcher.submit(self.engine.remove_item, item_id)

    def change_importance(self, item_id: int, importance: Union[Importance, str]) -> Future:
        return self.dispatcher.submit(self.engine.change_importance, item_id, importance)

    def change_text(self, item_id: int, text: str) -> Future:
        return self.dispatcher.submit(self.engine.change_text, item_id, text)

    def record_text_change(self, item_id: int, original_text: str) -> Future:
        return self.dispatcher.submit(self.engine.record_text_change, item_id, original_text)

    def set_options_expanded(self, item_id: int, expanded: bool) -> Future:
        return self.dispatcher.submit(self.engine.set_options_expanded, item_id, expanded)

    def undo(self) -> Future:
        return self.dispatcher.submit(self.engine.undo)

    def has_empty_item(self) -> Future:
        return self.dispatcher.submit(self.engine.has_empty_item)
