import logging
import threading
from typing import Callable, Optional

from supabase import AuthError, Client

from .errors import AuthenticationError
from .schemas import Identity
from .utils.listeners import Listeners

logger = logging.getLogger(__name__)


def identity_from_session(session) -> Optional[Identity]:
    """Read the (id, email) pair off a Supabase session, or None when signed out."""
    user = getattr(session, "user", None) if session is not None else None
    if user is None:
        return None
    return Identity(id=str(user.id), email=getattr(user, "email", None))


class SessionManager:
    """
    Tracks the signed-in identity.

    ``start()`` reads any persisted session once and subscribes to auth state
    changes; ``close()`` releases that subscription. Every change replaces the
    identity as a whole and is pushed to local listeners.
    """

    def __init__(self, db: Client):
        self.db = db
        self._lock = threading.Lock()
        self._identity: Optional[Identity] = None
        self._subscription = None
        self._listeners = Listeners()

    @property
    def identity(self) -> Optional[Identity]:
        with self._lock:
            return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    def subscribe(self, listener: Callable[[Optional[Identity]], None]):
        return self._listeners.subscribe(listener)

    def start(self) -> Optional[Identity]:
        if self._subscription is None:
            self._subscription = self.db.auth.on_auth_state_change(
                self._on_auth_state_change
            )

        try:
            session = self.db.auth.get_session()
        except Exception as e:
            # Anonymous browsing is a valid state
            logger.warning(f"Could not restore persisted session: {e}")
            session = None

        self._set_identity(identity_from_session(session))
        return self.identity

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            logger.info("Auth state subscription released")
        self._listeners.clear()

    def _on_auth_state_change(self, event, session) -> None:
        logger.info(f"Auth state changed: {event}")
        self._set_identity(identity_from_session(session))

    def _set_identity(self, identity: Optional[Identity]) -> None:
        with self._lock:
            if identity == self._identity:
                return
            self._identity = identity
        self._listeners.notify(identity)

    def sign_up(self, email: str, password: str) -> Optional[Identity]:
        response = self._authenticate(
            self.db.auth.sign_up, email, password, action="sign up"
        )
        return self._adopt(response)

    def sign_in(self, email: str, password: str) -> Optional[Identity]:
        response = self._authenticate(
            self.db.auth.sign_in_with_password, email, password, action="sign in"
        )
        return self._adopt(response)

    def sign_out(self) -> None:
        try:
            self.db.auth.sign_out()
        except AuthError as e:
            logger.error(f"Sign out failed: {e}")
            raise AuthenticationError(e.message) from e
        self._set_identity(None)

    def _authenticate(self, call, email: str, password: str, action: str):
        try:
            return call({"email": email, "password": password})
        except AuthError as e:
            logger.info(f"Failed to {action} {email}: {e.message}")
            raise AuthenticationError(e.message) from e

    def _adopt(self, response) -> Optional[Identity]:
        # Sign-up with email confirmation enabled returns no session yet
        session = getattr(response, "session", None)
        if session is not None:
            self._set_identity(identity_from_session(session))
        return self.identity
