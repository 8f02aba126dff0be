import logging
import secrets
import threading
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from supabase import Client

from .config import Settings
from .controller import NoteCycle

logger = logging.getLogger(__name__)

SESSION_COOKIE = "notecycle_session"


class NoteCycleSessions:
    """
    One NoteCycle, with its own Supabase client, per browser session.

    Session ids are issued here and never taken from the caller, so a client
    can only reach a controller whose id it was handed. The least recently
    used controller is closed once ``max_sessions`` is exceeded.
    """

    def __init__(self, client_factory: Callable[[], Client], settings: Settings):
        self.client_factory = client_factory
        self.settings = settings
        self._lock = threading.Lock()
        self._apps: "OrderedDict[str, NoteCycle]" = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._apps)

    def get(self, session_id: Optional[str]) -> Tuple[str, NoteCycle]:
        """Return ``(session_id, controller)``, creating both for unknown ids."""
        with self._lock:
            if session_id and session_id in self._apps:
                self._apps.move_to_end(session_id)
                return session_id, self._apps[session_id]

        session_id = secrets.token_urlsafe(32)
        notecycle = NoteCycle(self.client_factory(), self.settings)
        notecycle.start()

        evicted = []
        with self._lock:
            self._apps[session_id] = notecycle
            while len(self._apps) > self.settings.max_sessions:
                evicted.append(self._apps.popitem(last=False)[1])

        for old in evicted:
            old.close()
        logger.info(f"Started session ({len(self)} active, {len(evicted)} evicted)")
        return session_id, notecycle

    def close_all(self) -> None:
        with self._lock:
            apps = list(self._apps.values())
            self._apps.clear()
        for notecycle in apps:
            notecycle.close()
        logger.info(f"Closed {len(apps)} sessions")
