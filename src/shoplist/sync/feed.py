"""Change feed computed by diffing successive reads of a collection."""
from typing import Dict, List

from shoplist.utils.logger import get_logger
from .documents import ItemDocument, RemoteChange
from .errors import MalformedRecordError
from .store import DocumentStore


class ChangeFeed:
    """
    Reports what changed in a collection since the previous poll.

    The first poll reports every document as ADDED. A record that fails
    validation is skipped; if it was seen before, its last valid version
    is kept instead of being reported as removed.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self.logger = get_logger(__name__).bind(collection=store.collection)
        self._seen: Dict[int, ItemDocument] = {}

    def poll(self) -> List[RemoteChange]:
        """
        Read the collection and diff it against the last poll.

        Raises:
            StoreError: If the collection cannot be read
        """
        current: Dict[int, ItemDocument] = {}
        for raw in self.store.list_raw():
            try:
                document = ItemDocument.from_wire(raw)
            except MalformedRecordError as e:
                item_id = raw.get("id")
                self.logger.warning(e.message, item_id=item_id)
                if item_id in self._seen:
                    current[item_id] = self._seen[item_id]
                continue
            current[document.id] = document

        changes: List[RemoteChange] = []
        for item_id, document in current.items():
            previous = self._seen.get(item_id)
            if previous is None:
                changes.append(RemoteChange.added(document))
            elif previous != document:
                changes.append(RemoteChange.modified(document))
        for item_id in self._seen:
            if item_id not in current:
                changes.append(RemoteChange.removed(item_id))

        self._seen = current
        if changes:
            self.logger.debug("Change feed poll", changes=len(changes))
        return changes

    def reset(self) -> None:
        """Forget what was seen, so the next poll reports everything as ADDED."""
        self._seen = {}
