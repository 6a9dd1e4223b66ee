"""Base service class with common functionality."""
from typing import TypeVar, Generic, Optional, List
from pydantic import BaseModel, ConfigDict

from shoplist.utils.logger import get_logger

# Generic type for service results
T = TypeVar('T')


class Result(BaseModel, Generic[T]):
    """Generic result type for service operations."""
    success: bool
    data: Optional[T] = None
    error: str = ""
    suggestions: List[str] = []
    metadata: dict = {}

    # Allow arbitrary types (like futures or ORM rows)
    model_config = ConfigDict(arbitrary_types_allowed=True)

    @classmethod
    def ok(cls, data: T, **metadata) -> 'Result[T]':
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, suggestions: Optional[List[str]] = None) -> 'Result[T]':
        """Create a failed result."""
        return cls(success=False, error=error or "Unknown error", suggestions=suggestions or [])


class BaseService:
    """Base class for all services."""

    def __init__(self, **log_context):
        """
        Initialize the service.

        Args:
            **log_context: Values bound to every log record of this service
        """
        self.log_context = log_context
        self.logger = get_logger(self.__class__.__name__).bind(**log_context)

    def _log_action(
        self,
        action: str,
        status: str = "success",
        **kwargs
    ) -> None:
        """
        Log a service action.

        Args:
            action: Name of the action
            status: Status of the action
            **kwargs: Additional log data
        """
        self.logger.info(
            f"{action}: {status}",
            **kwargs
        )

    def _not_found(self, action: str, item_id: int) -> Result[T]:
        """
        Report an operation on an unknown item.

        Unknown ids are expected when a stale view reference races with a
        removal, so they are logged at debug level and turned into a
        failed result instead of an exception.
        """
        self.logger.debug(f"{action}: item not found", item_id=item_id)
        return Result.fail(
            f"Item {item_id} not found",
            suggestions=["Refresh the list and try again"]
        )
