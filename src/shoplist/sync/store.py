"""SQL-backed document store holding one item collection per user."""
from contextlib import contextmanager
from typing import Generator, List, Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from shoplist.db.session import session_scope
from shoplist.models import StoredItem
from shoplist.utils.logger import get_logger
from .documents import ItemDocument
from .errors import MalformedRecordError, StoreError


class DocumentStore:
    """Create, patch, remove and list item documents of one collection."""

    def __init__(self, session_factory: sessionmaker, collection: str):
        """
        Initialize the store.

        Args:
            session_factory: Factory for database sessions
            collection: Collection key, usually the user id
        """
        self._factory = session_factory
        self.collection = collection
        self.logger = get_logger(__name__).bind(collection=collection)

    @contextmanager
    def _scope(self, action: str, **metadata) -> Generator[Session, None, None]:
        try:
            with session_scope(self._factory) as session:
                yield session
        except SQLAlchemyError as e:
            raise StoreError(
                f"Document store {action} failed",
                metadata={"collection": self.collection, **metadata}
            ) from e

    def _get(self, session: Session, item_id: int) -> Optional[StoredItem]:
        return session.get(StoredItem, (self.collection, item_id))

    def upsert(self, document: ItemDocument) -> ItemDocument:
        """
        Create or replace a document keyed by its id.

        Returns:
            The stored document

        Raises:
            StoreError: If the write fails
        """
        with self._scope("upsert", item_id=document.id) as session:
            row = self._get(session, document.id)
            if row is None:
                row = StoredItem(collection=self.collection, item_id=document.id)
                session.add(row)
            row.text = document.text
            row.importance = document.importance.value
            row.is_new_entry = document.is_new_entry
            row.is_options_expanded = False
        self.logger.debug("Upserted document", item_id=document.id)
        return document

    def find_by_id(self, item_id: int) -> Optional[ItemDocument]:
        """
        Get a document by item id.

        Raises:
            StoreError: If the read fails
            MalformedRecordError: If the stored record is invalid
        """
        with self._scope("find", item_id=item_id) as session:
            row = self._get(session, item_id)
            raw = row.to_wire() if row else None
        return ItemDocument.from_wire(raw) if raw else None

    def update_text(self, item_id: int, text: str) -> bool:
        """
        Patch the text of an existing document.

        Returns:
            False if no document has the given id
        """
        with self._scope("update_text", item_id=item_id) as session:
            row = self._get(session, item_id)
            if row is None:
                return False
            row.text = text
        return True

    def remove(self, item_id: int) -> bool:
        """
        Delete a document.

        Returns:
            False if no document has the given id
        """
        with self._scope("remove", item_id=item_id) as session:
            row = self._get(session, item_id)
            if row is None:
                return False
            session.delete(row)
        return True

    def list_raw(self) -> List[dict]:
        """All records of the collection in wire shape, ordered by id."""
        with self._scope("list") as session:
            rows = session.execute(
                select(StoredItem)
                .where(StoredItem.collection == self.collection)
                .order_by(StoredItem.item_id)
            ).scalars().all()
            return [row.to_wire() for row in rows]

    def list_documents(self) -> List[ItemDocument]:
        """All valid documents of the collection; malformed ones are skipped."""
        documents = []
        for raw in self.list_raw():
            try:
                documents.append(ItemDocument.from_wire(raw))
            except MalformedRecordError as e:
                self.logger.warning(e.message, item_id=raw.get("id"))
        return documents
