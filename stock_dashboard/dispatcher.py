import logging
from threading import RLock
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class EventDispatcher:
    """
    Runs handlers one at a time.

    Store-change notifications and hover events arrive on different
    threads (the Redis listener and the web server's worker pool). Every
    handler runs inside a dispatch turn guarded by a single lock, so state
    owned by the loader and the focus tracker is never touched by two
    turns at once. Once closed, events are dropped.
    """

    def __init__(self):
        self._lock = RLock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def dispatch(self, handler: Callable[..., Any], *args, **kwargs) -> Optional[Any]:
        with self._lock:
            if self._closed:
                logger.debug(f"Dispatcher closed, dropping {getattr(handler, '__name__', handler)}")
                return None
            try:
                return handler(*args, **kwargs)
            except Exception:
                logger.exception(f"Handler {getattr(handler, '__name__', handler)} failed")
                raise

    def close(self) -> None:
        with self._lock:
            self._closed = True
