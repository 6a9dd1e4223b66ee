"""Wire shapes exchanged with the remote document store."""
from enum import Enum
from typing import Any, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from shoplist.domain.types import Importance, ItemId, ItemRecord
from .errors import MalformedRecordError


class ItemDocument(BaseModel):
    """
    A list item as stored remotely.

    Serialized with the camelCase field names used by the store:
    ``{id, text, importance, isNewEntry, isOptionsExpanded}``.
    ``isOptionsExpanded`` is kept for shape compatibility only; it is
    always written as False and ignored on read.
    """
    id: ItemId
    text: str
    importance: Importance
    is_new_entry: bool = Field(False, alias="isNewEntry")
    is_options_expanded: bool = Field(False, alias="isOptionsExpanded")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator('importance', mode='before')
    @classmethod
    def parse_importance(cls, v) -> Importance:
        return Importance.parse(v)

    @classmethod
    def from_item(cls, item: ItemRecord) -> 'ItemDocument':
        """Build the persisted form of a record."""
        return cls(
            id=item.id,
            text=item.text,
            importance=item.importance,
            is_new_entry=item.is_new_entry,
        )

    @classmethod
    def from_wire(cls, raw: Mapping[str, Any]) -> 'ItemDocument':
        """
        Validate a raw store record.

        Raises:
            MalformedRecordError: If any field is missing or invalid
        """
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as e:
            raise MalformedRecordError(
                "Rejected malformed item record",
                metadata={"record": dict(raw), "errors": e.errors(include_url=False)}
            ) from e

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

    def to_item(self, options_expanded: bool = False) -> ItemRecord:
        """Build a local record, keeping local view state."""
        return ItemRecord(
            id=self.id,
            text=self.text,
            importance=self.importance,
            is_new_entry=self.is_new_entry,
            options_expanded=options_expanded,
        )

    def same_content(self, item: ItemRecord) -> bool:
        """Check whether a local record already matches this document."""
        return (
            self.text == item.text
            and self.importance == item.importance
            and self.is_new_entry == item.is_new_entry
        )


class ChangeType(str, Enum):
    """Kinds of change reported by the change feed."""
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    REMOVED = "REMOVED"


class RemoteChange(BaseModel):
    """A single change notification from the store."""
    type: ChangeType
    item_id: ItemId
    document: Optional[ItemDocument] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def check_document(self) -> 'RemoteChange':
        if self.type is ChangeType.REMOVED:
            return self
        if self.document is None:
            raise ValueError(f"{self.type.value} change requires a document")
        if self.document.id != self.item_id:
            raise ValueError("Document id does not match change id")
        return self

    @classmethod
    def added(cls, document: ItemDocument) -> 'RemoteChange':
        return cls(type=ChangeType.ADDED, item_id=document.id, document=document)

    @classmethod
    def modified(cls, document: ItemDocument) -> 'RemoteChange':
        return cls(type=ChangeType.MODIFIED, item_id=document.id, document=document)

    @classmethod
    def removed(cls, item_id: int) -> 'RemoteChange':
        return cls(type=ChangeType.REMOVED, item_id=item_id)
