import logging
import threading
from typing import Callable, Optional

from supabase import Client

from ..crud import delete_note
from ..directory import NotesDirectory
from ..errors import (
    AuthorizationError,
    BusyError,
    MetadataDeleteError,
    StorageDeleteError,
)
from ..schemas import Identity, NoteSchema
from ..utils.storage import NOTES_BUCKET, remove_from_storage

logger = logging.getLogger(__name__)

Confirm = Callable[[NoteSchema], bool]


def is_owner(identity: Optional[Identity], note: NoteSchema) -> bool:
    return identity is not None and identity.id == note.user_id


class DeleteOrchestrator:
    """Removes a caller's own note: stored file first, then its record."""

    def __init__(
        self,
        db: Client,
        directory: NotesDirectory,
        identity_provider: Callable[[], Optional[Identity]],
        bucket_name: str = NOTES_BUCKET,
        table: Optional[str] = None,
    ):
        self.db = db
        self.directory = directory
        self.identity_provider = identity_provider
        self.bucket_name = bucket_name
        self.table = table or directory.table
        self._lock = threading.Lock()
        self._busy = False

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    def delete(self, note: NoteSchema, confirm: Confirm) -> bool:
        """
        Delete ``note`` after ``confirm(note)`` agrees.

        Returns False when the user cancels; raises on any failure. The record
        is left in place when the file cannot be removed.
        """
        identity = self.identity_provider()
        if not is_owner(identity, note):
            raise AuthorizationError("You can only delete your own notes")

        if not confirm(note):
            logger.info(f"Delete of note {note.id} cancelled")
            return False

        with self._lock:
            if self._busy:
                raise BusyError("A delete is already in progress")
            self._busy = True

        try:
            self._delete(note)
            self.directory.fetch_all()
        finally:
            with self._lock:
                self._busy = False
        return True

    def _delete(self, note: NoteSchema) -> None:
        try:
            remove_from_storage(self.db, [note.file_path], self.bucket_name)
        except Exception as e:
            logger.error(f"Error deleting file {note.file_path}: {e}")
            raise StorageDeleteError(f"Error deleting note: {e}") from e

        try:
            delete_note(self.db, note.id, self.table)
        except Exception as e:
            logger.error(f"Error deleting note record {note.id}: {e}")
            raise MetadataDeleteError(f"Error deleting note: {e}") from e

        logger.info(f"Deleted note {note.id} ({note.file_path})")
