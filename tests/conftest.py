"""Test configuration and fixtures for shoplist."""
import itertools
import pytest
from typing import List

from shoplist.db.init_db import init_db
from shoplist.db.session import make_engine, make_session_factory
from shoplist.domain.types import Importance, ItemRecord, ListSnapshot
from shoplist.services.action_log import ActionLog
from shoplist.services.list_engine import ListStateEngine
from shoplist.sync.service import SyncService
from shoplist.sync.store import DocumentStore


class RecordingObserver:
    """Observer that keeps every snapshot it receives."""

    def __init__(self):
        self.snapshots: List[ListSnapshot] = []

    def list_changed(self, snapshot: ListSnapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def last(self) -> ListSnapshot:
        return self.snapshots[-1]


class RecordingSync:
    """Sync adapter that records the calls made by the engine."""

    def __init__(self):
        self.calls = []

    def upsert(self, item):
        self.calls.append(("upsert", item.id))

    def update_text(self, item):
        self.calls.append(("update_text", item.id, item.text))

    def remove(self, item_id):
        self.calls.append(("remove", item_id))


@pytest.fixture
def ids():
    """Sequential id factory starting at 1."""
    return itertools.count(1).__next__


@pytest.fixture
def recorder() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def recording_sync() -> RecordingSync:
    return RecordingSync()


@pytest.fixture
def list_engine(ids, recorder) -> ListStateEngine:
    """Create an empty engine with sequential ids and a recording observer."""
    return ListStateEngine(
        action_log=ActionLog(capacity=50),
        id_factory=ids,
        observers=[recorder]
    )


@pytest.fixture
def make_item():
    """Factory for committed item records."""
    def _make(item_id, text="", importance=Importance.NORMAL, is_new_entry=False):
        return ItemRecord(
            id=item_id,
            text=text,
            importance=importance,
            is_new_entry=is_new_entry,
        )
    return _make


@pytest.fixture
def shopping_items(make_item) -> List[ItemRecord]:
    """Eggs, soap and a trailing placeholder."""
    return [
        make_item(1, "eggs"),
        make_item(2, "soap", Importance.IMPORTANT),
        make_item(3, "", is_new_entry=True),
    ]


@pytest.fixture
def db_engine(tmp_path):
    """Create a fresh file-backed database with all tables."""
    engine = make_engine(f"sqlite:///{tmp_path / 'store.db'}", echo=False)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return make_session_factory(db_engine)


@pytest.fixture
def store(session_factory) -> DocumentStore:
    """Create a document store for a test user."""
    return DocumentStore(session_factory, "UserID-test")


@pytest.fixture
def sync_service(store):
    """Create a sync service; pending writes finish before teardown."""
    service = SyncService(store)
    yield service
    service.shutdown()
