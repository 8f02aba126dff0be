import logging
import threading
from typing import Callable, Optional

from supabase import Client

from ..catalog import COURSES_BY_MAJOR, is_valid_course
from ..crud import create_note
from ..directory import NotesDirectory
from ..errors import (
    BusyError,
    MetadataWriteError,
    StorageWriteError,
    ValidationError,
)
from ..schemas import Identity, NoteCreate, NoteSchema, PdfFile, UploadForm
from ..utils.storage import (
    NOTES_BUCKET,
    build_storage_key,
    get_public_url,
    remove_from_storage,
    upload_to_supabase,
)

logger = logging.getLogger(__name__)


def validate_upload(form: UploadForm, identity: Optional[Identity]) -> None:
    """Raise ValidationError for the first missing or invalid field."""
    if not form.title.strip():
        raise ValidationError("Title is required", field="title")
    if form.major not in COURSES_BY_MAJOR:
        raise ValidationError(f"Unknown major: {form.major}", field="major")
    if not form.course:
        raise ValidationError("Course is required", field="course")
    if not is_valid_course(form.major, form.course):
        raise ValidationError(
            f"{form.course} is not a {form.major} course", field="course"
        )
    if form.file is None:
        raise ValidationError("A PDF file is required", field="file")
    if not form.file.is_pdf:
        raise ValidationError("Please select a PDF file", field="file")
    if not form.file.data:
        raise ValidationError("The selected file is empty", field="file")
    if identity is None:
        raise ValidationError(
            "Please fill in all required fields and ensure you are logged in",
            field="user",
        )


class UploadOrchestrator:
    """
    Owns the upload form and drives the two-step upload:
    store the PDF, then record its metadata.

    A metadata failure removes the object that was just stored, so a record
    never exists without its file and vice versa.
    """

    def __init__(
        self,
        db: Client,
        directory: NotesDirectory,
        identity_provider: Callable[[], Optional[Identity]],
        bucket_name: str = NOTES_BUCKET,
        table: Optional[str] = None,
        on_success: Optional[Callable[[NoteSchema], None]] = None,
    ):
        self.db = db
        self.directory = directory
        self.identity_provider = identity_provider
        self.bucket_name = bucket_name
        self.table = table or directory.table
        self.on_success = on_success
        self.form = UploadForm()
        self._lock = threading.Lock()
        self._busy = False

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    # Form state

    def set_title(self, title: str) -> None:
        self.form.title = title

    def set_description(self, description: str) -> None:
        self.form.description = description

    def set_major(self, major: str) -> None:
        if major not in COURSES_BY_MAJOR:
            raise ValidationError(f"Unknown major: {major}", field="major")
        self.form.major = major
        self.form.course = ""

    def set_course(self, course: str) -> None:
        self.form.course = course

    def choose_file(self, file: PdfFile) -> None:
        if not file.is_pdf:
            raise ValidationError("Please select a PDF file", field="file")
        self.form.file = file

    def reset(self) -> None:
        self.form = UploadForm()

    # Submission

    def submit(self, form: Optional[UploadForm] = None) -> NoteSchema:
        form = form or self.form
        identity = self.identity_provider()
        validate_upload(form, identity)

        with self._lock:
            if self._busy:
                raise BusyError("An upload is already in progress")
            self._busy = True

        try:
            note = self._upload(form, identity)
            self.directory.fetch_all()
            self.reset()
        finally:
            with self._lock:
                self._busy = False

        if self.on_success is not None:
            self.on_success(note)
        return note

    def _upload(self, form: UploadForm, identity: Identity) -> NoteSchema:
        file_path = build_storage_key(form.major, form.course, form.file.extension)

        try:
            upload_to_supabase(
                self.db,
                file_path,
                form.file.data,
                content_type=form.file.content_type,
                bucket_name=self.bucket_name,
            )
        except Exception as e:
            logger.error(f"Error uploading note file {file_path}: {e}")
            raise StorageWriteError(f"Error uploading note: {e}") from e

        file_url = get_public_url(self.db, file_path, self.bucket_name)

        record = NoteCreate(
            title=form.title.strip(),
            description=form.description,
            course=form.course,
            major=form.major,
            file_path=file_path,
            file_url=file_url,
            user_id=identity.id,
            user_email=identity.email,
        )
        try:
            created = create_note(self.db, record.model_dump(), self.table)
        except Exception as e:
            logger.error(f"Error recording note {file_path}: {e}")
            self._discard(file_path)
            raise MetadataWriteError(f"Error uploading note: {e}") from e

        logger.info(f"Uploaded note {file_path} for user {identity.id}")
        if created is None:
            # Row-level security can hide the inserted row from the response
            return NoteSchema(id="", **record.model_dump())
        return NoteSchema(**created)

    def _discard(self, file_path: str) -> None:
        try:
            remove_from_storage(self.db, [file_path], self.bucket_name)
            logger.info(f"Removed orphaned file {file_path}")
        except Exception as e:
            logger.error(f"Failed to remove orphaned file {file_path}: {e}")
