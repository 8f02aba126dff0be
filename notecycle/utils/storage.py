import time
import uuid
import logging
from typing import List, Optional

from supabase import Client

logger = logging.getLogger(__name__)

NOTES_BUCKET = "notes-pdfs"


def build_storage_key(
    major: str,
    course: str,
    extension: str,
    timestamp_ms: Optional[int] = None,
    suffix: Optional[str] = None,
) -> str:
    """
    Build the object key a note's file is stored under.

    Keys look like ``{major}/{course}/{epoch_ms}_{suffix}.{ext}``. The millisecond
    timestamp plus a random suffix keeps keys unique without coordinating
    with the backend.
    """
    if not extension.isalnum() or not extension.isascii():
        raise ValueError(f"Unsafe file extension: {extension!r}")
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    if suffix is None:
        suffix = uuid.uuid4().hex[:8]
    return f"{major}/{course}/{timestamp_ms}_{suffix}.{extension}"


def upload_to_supabase(
    db: Client,
    file_path: str,
    file_data: bytes,
    content_type: str = "application/pdf",
    bucket_name: str = NOTES_BUCKET,
) -> None:
    """
    Upload raw bytes to Supabase storage under ``file_path``.

    Args:
        db (Client): Supabase client instance
        file_path (str): Storage key to write
        file_data (bytes): File contents
        content_type (str): MIME type recorded on the stored object
        bucket_name (str): Target bucket
    """
    logger.info(f"Uploading {len(file_data)} bytes to {bucket_name}/{file_path}")
    db.storage.from_(bucket_name).upload(
        file_path, file_data, {"content-type": content_type}
    )


def get_public_url(db: Client, file_path: str, bucket_name: str = NOTES_BUCKET) -> str:
    return db.storage.from_(bucket_name).get_public_url(file_path)


def remove_from_storage(
    db: Client, file_paths: List[str], bucket_name: str = NOTES_BUCKET
) -> None:
    logger.info(f"Removing {file_paths} from {bucket_name}")
    db.storage.from_(bucket_name).remove(file_paths)
