import logging
from typing import Optional

from supabase import Client

from .catalog import ALL_MAJORS, filter_options
from .config import Settings
from .directory import NotesDirectory
from .errors import AuthenticationError, NoteNotFoundError, ValidationError
from .orchestrators import DeleteOrchestrator, UploadOrchestrator
from .orchestrators.delete import Confirm, is_owner
from .schemas import AuthModalSchema, NoteCard, NoteSchema, ViewModel
from .session import SessionManager
from .views import AuthMode, NavTarget, View, ViewRouter

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class NoteCycle:
    """Wires the session, the notes directory, both orchestrators and the router."""

    def __init__(self, db: Client, settings: Optional[Settings] = None):
        settings = settings or Settings()
        self.db = db
        self.settings = settings
        self.session = SessionManager(db)
        self.directory = NotesDirectory(
            db, table=settings.notes_table, error_policy=settings.fetch_error_policy
        )
        self.router = ViewRouter()
        self.uploader = UploadOrchestrator(
            db,
            self.directory,
            lambda: self.session.identity,
            bucket_name=settings.notes_bucket,
            on_success=lambda note: self.router.close_upload(),
        )
        self.deleter = DeleteOrchestrator(
            db,
            self.directory,
            lambda: self.session.identity,
            bucket_name=settings.notes_bucket,
        )
        self._unsubscribe = None

    def start(self) -> None:
        self._unsubscribe = self.session.subscribe(self._on_identity_change)
        self.session.start()
        self.directory.fetch_all()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.session.close()
        self.directory.close()

    def _on_identity_change(self, identity) -> None:
        if identity is None:
            self.router.on_signed_out()

    # Auth

    def open_auth(self, mode: AuthMode = AuthMode.SIGN_IN) -> None:
        self.router.open_auth(mode)

    def submit_auth(self, email: str, password: str):
        modal = self.router.auth_modal or self.router.open_auth()
        modal.email, modal.password = email, password
        modal.error = None

        if not email.strip():
            modal.error = "Email is required"
            raise ValidationError(modal.error, field="email")
        if len(password) < MIN_PASSWORD_LENGTH:
            modal.error = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            raise ValidationError(modal.error, field="password")

        modal.loading = True
        try:
            if modal.mode == AuthMode.SIGN_UP:
                identity = self.session.sign_up(email, password)
            else:
                identity = self.session.sign_in(email, password)
        except AuthenticationError as e:
            modal.error = e.message
            raise
        finally:
            modal.loading = False

        self.router.close_auth()
        return identity

    def sign_out(self) -> None:
        self.session.sign_out()

    def get_started(self) -> None:
        """About page call to action: browse when signed in, else sign up."""
        if self.session.is_authenticated:
            self.router.navigate(NavTarget.HOME)
        else:
            self.router.open_auth(AuthMode.SIGN_UP)

    # Notes

    def open_upload(self) -> bool:
        return self.router.open_upload(self.session.is_authenticated)

    def close_upload(self) -> None:
        self.router.close_upload()
        self.uploader.reset()

    def upload(self, form=None) -> NoteSchema:
        return self.uploader.submit(form)

    def delete(self, note_id, confirm: Confirm) -> Optional[bool]:
        """
        Delete a note by id. Returns None when the user had to be sent to the
        sign-in form instead.
        """
        if not self.session.is_authenticated:
            self.router.open_auth(AuthMode.SIGN_IN)
            return None

        note = self.directory.get(note_id)
        if note is None:
            raise NoteNotFoundError(f"Note {note_id} not found")
        return self.deleter.delete(note, confirm)

    # View model

    def view_model(self) -> ViewModel:
        identity = self.session.identity
        major = self.router.selected_major
        view = self.router.current(identity is not None)

        notes = []
        if not self.directory.loading:
            notes = [
                NoteCard(**note.model_dump(), can_delete=is_owner(identity, note))
                for note in self.directory.filter(major)
            ]

        modal = self.router.auth_modal
        return ViewModel(
            view=view.value,
            user_email=identity.email if identity else None,
            selected_major=major,
            majors=filter_options(),
            heading="All Notes" if major == ALL_MAJORS else f"{major} Notes",
            loading=self.directory.loading,
            notes=notes if view == View.MAIN else [],
            banner=self.directory.error,
            auth_modal=(
                AuthModalSchema(
                    mode=modal.mode.value,
                    email=modal.email,
                    error=modal.error,
                    loading=modal.loading,
                )
                if modal
                else None
            ),
            upload_open=self.router.upload_open,
            upload_busy=self.uploader.busy,
        )
