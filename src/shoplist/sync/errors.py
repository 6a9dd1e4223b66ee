"""Error handling for remote list synchronization."""
from typing import Optional, Dict, Any


class SyncError(Exception):
    """Base class for sync-related errors."""
    def __init__(
        self,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.metadata = metadata or {}
        super().__init__(message)


class StoreError(SyncError):
    """Error reading or writing the document store."""
    pass


class MalformedRecordError(SyncError):
    """A remote record failed validation and was rejected as a whole."""
    pass
