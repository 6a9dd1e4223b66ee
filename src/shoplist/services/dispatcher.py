"""Serial execution of list mutations on a single worker thread."""
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from shoplist.utils.logger import get_logger

logger = get_logger(__name__)


class SerialDispatcher:
    """
    Runs submitted calls one at a time, in submission order.

    UI events and remote change batches are both funneled through one
    dispatcher so that engine mutations never overlap.
    """

    def __init__(self, name: str = "shoplist-engine"):
        self.name = name
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)

    def submit(self, fn: Callable[..., Any], *args, **kwargs) -> Future:
        """Queue a call and return a future for its result."""
        return self._executor.submit(self._run, fn, args, kwargs)

    def _run(self, fn: Callable[..., Any], args: tuple, kwargs: dict) -> Any:
        try:
            return fn(*args, **kwargs)
        except Exception:
            logger.exception("Dispatched call failed", dispatcher=self.name, call=getattr(fn, "__name__", repr(fn)))
            raise

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> 'SerialDispatcher':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
