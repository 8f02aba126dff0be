import logging
import threading
from typing import Any, Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class Listeners:
    """Thread-safe list of change callbacks with explicit unsubscribe."""

    def __init__(self):
        self._lock = threading.Lock()
        self._handlers: List[Listener] = []

    def subscribe(self, handler: Listener) -> Callable[[], None]:
        with self._lock:
            self._handlers.append(handler)

        def unsubscribe():
            with self._lock:
                if handler in self._handlers:
                    self._handlers.remove(handler)

        return unsubscribe

    def notify(self, value: Any) -> None:
        # Handlers run outside the lock so they may subscribe/unsubscribe
        with self._lock:
            handlers = list(self._handlers)

        for handler in handlers:
            try:
                handler(value)
            except Exception as e:
                logger.error(f"Listener {handler!r} failed: {e}", exc_info=True)

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)
