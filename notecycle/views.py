import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .catalog import ALL_MAJORS, filter_options
from .errors import ValidationError

logger = logging.getLogger(__name__)


class View(str, Enum):
    LANDING = "landing"
    ABOUT = "about"
    MAIN = "main"


class NavTarget(str, Enum):
    HOME = "home"
    ABOUT = "about"
    NOTES = "notes"


class AuthMode(str, Enum):
    SIGN_IN = "sign_in"
    SIGN_UP = "sign_up"


@dataclass
class AuthModal:
    mode: AuthMode = AuthMode.SIGN_IN
    email: str = ""
    password: str = ""
    error: Optional[str] = None
    loading: bool = False


class ViewRouter:
    """
    Decides which page is shown and which overlays sit above it.

    The page is derived from one explicit navigation choice plus whether a
    user is signed in, so only one page can ever be active.
    """

    def __init__(self):
        self._choice: Optional[View] = None
        self.auth_modal: Optional[AuthModal] = None
        self.upload_open = False
        self.selected_major = ALL_MAJORS

    def current(self, authenticated: bool) -> View:
        if self._choice is not None:
            return self._choice
        return View.MAIN if authenticated else View.LANDING

    def navigate(self, target: NavTarget) -> None:
        if target == NavTarget.ABOUT:
            self._choice = View.ABOUT
        elif target == NavTarget.NOTES:
            self._choice = View.MAIN
        else:
            self._choice = None
        logger.debug(f"Navigated to {target.value}")

    def select_major(self, major: str) -> None:
        if major not in filter_options():
            raise ValidationError(f"Unknown major: {major}", field="major")
        self.selected_major = major

    # Auth overlay

    def open_auth(self, mode: AuthMode = AuthMode.SIGN_IN) -> AuthModal:
        self.auth_modal = AuthModal(mode=mode)
        return self.auth_modal

    def toggle_auth_mode(self) -> None:
        if self.auth_modal is None:
            return
        self.auth_modal.mode = (
            AuthMode.SIGN_IN
            if self.auth_modal.mode == AuthMode.SIGN_UP
            else AuthMode.SIGN_UP
        )
        self.auth_modal.error = None

    def close_auth(self) -> None:
        self.auth_modal = None

    # Upload overlay

    def open_upload(self, authenticated: bool) -> bool:
        """Open the upload form, or the sign-up form when nobody is signed in."""
        if not authenticated:
            self.open_auth(AuthMode.SIGN_UP)
            return False
        self.upload_open = True
        return True

    def close_upload(self) -> None:
        self.upload_open = False

    def on_signed_out(self) -> None:
        self.selected_major = ALL_MAJORS
        self.upload_open = False
