import logging
import threading
from typing import Callable, List, Optional

from supabase import Client

from .catalog import ALL_MAJORS
from .crud import NOTES_TABLE, get_all_notes
from .schemas import NoteSchema
from .utils.listeners import Listeners

logger = logging.getLogger(__name__)


def filter_notes(notes: List[NoteSchema], major: str) -> List[NoteSchema]:
    if major == ALL_MAJORS:
        return list(notes)
    return [note for note in notes if note.major == major]


class NotesDirectory:
    """In-memory copy of every note record, refreshed wholesale from Supabase."""

    def __init__(
        self,
        db: Client,
        table: str = NOTES_TABLE,
        error_policy: str = "silent",
    ):
        self.db = db
        self.table = table
        self.error_policy = error_policy
        self._lock = threading.Lock()
        self._fetch_lock = threading.Lock()
        self._notes: List[NoteSchema] = []
        self._loading = False
        self._error: Optional[str] = None
        self._listeners = Listeners()

    @property
    def notes(self) -> List[NoteSchema]:
        with self._lock:
            return list(self._notes)

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    @property
    def error(self) -> Optional[str]:
        """Message of the last failed refresh, kept only under the "banner" policy."""
        with self._lock:
            return self._error

    def subscribe(self, listener: Callable[[List[NoteSchema]], None]):
        return self._listeners.subscribe(listener)

    def close(self) -> None:
        self._listeners.clear()

    def fetch_all(self) -> List[NoteSchema]:
        # One refresh at a time so an older result never replaces a newer one
        with self._fetch_lock:
            with self._lock:
                self._loading = True
            try:
                return self._refresh()
            finally:
                with self._lock:
                    self._loading = False

    def _refresh(self) -> List[NoteSchema]:
        try:
            rows = get_all_notes(self.db, self.table)
            notes = [NoteSchema(**row) for row in rows]
        except Exception as e:
            logger.error(f"Error fetching notes: {e}")
            with self._lock:
                if self.error_policy == "banner":
                    self._error = f"Could not refresh notes: {e}"
                return list(self._notes)

        with self._lock:
            self._notes = notes
            self._error = None
        logger.info(f"Fetched {len(notes)} notes")
        self._listeners.notify(list(notes))
        return list(notes)

    def filter(self, major: str) -> List[NoteSchema]:
        return filter_notes(self.notes, major)

    def get(self, note_id) -> Optional[NoteSchema]:
        for note in self.notes:
            if str(note.id) == str(note_id):
                return note
        return None
