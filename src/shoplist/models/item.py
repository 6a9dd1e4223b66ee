"""StoredItem model for the shoplist document store."""
from sqlalchemy import BigInteger, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class StoredItem(Base, TimestampMixin):
    """A persisted list item document, one collection per user."""

    __tablename__ = "shopping_list_items"

    # Composite primary key: collection + item id
    collection: Mapped[str] = mapped_column(String(100), primary_key=True)
    item_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)

    # Document fields
    text: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    importance: Mapped[str] = mapped_column(String(20), default="NORMAL", nullable=False)
    is_new_entry: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_options_expanded: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def to_wire(self) -> dict:
        """Raw record in the store's wire shape."""
        return {
            "id": self.item_id,
            "text": self.text,
            "importance": self.importance,
            "isNewEntry": self.is_new_entry,
            "isOptionsExpanded": self.is_options_expanded,
        }

    def __repr__(self) -> str:
        return f"<StoredItem(collection='{self.collection}', id={self.item_id}, text='{self.text}')>"
