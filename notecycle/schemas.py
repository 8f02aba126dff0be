# schemas.py
import re
from pathlib import PurePosixPath

from pydantic import BaseModel, Field
from typing import List, Optional, Union

from .catalog import DEFAULT_UPLOAD_MAJOR

PDF_CONTENT_TYPE = "application/pdf"
SAFE_EXTENSION = re.compile(r"[A-Za-z0-9]{1,10}")


class Identity(BaseModel):
    id: str
    email: Optional[str] = None


class NoteCreate(BaseModel):
    title: str
    description: Optional[str] = ""
    course: str
    major: str
    file_path: str
    file_url: str
    user_id: str
    user_email: Optional[str] = None


class NoteSchema(NoteCreate):
    id: Union[int, str]
    created_at: Optional[str] = None


class PdfFile(BaseModel):
    filename: str
    content_type: Optional[str] = None
    data: bytes = b""

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_CONTENT_TYPE

    @property
    def extension(self) -> str:
        # Only the base name counts; anything but a plain alphanumeric suffix becomes pdf
        suffix = PurePosixPath(self.filename.replace("\\", "/")).suffix[1:]
        if not SAFE_EXTENSION.fullmatch(suffix):
            return "pdf"
        return suffix


class UploadForm(BaseModel):
    title: str = ""
    description: str = ""
    course: str = ""
    major: str = DEFAULT_UPLOAD_MAJOR
    file: Optional[PdfFile] = None


class AuthForm(BaseModel):
    email: str = ""
    password: str = ""


class AuthModalSchema(BaseModel):
    mode: str
    email: str = ""
    error: Optional[str] = None
    loading: bool = False


class NoteCard(NoteSchema):
    can_delete: bool = False


class ViewModel(BaseModel):
    view: str
    user_email: Optional[str] = None
    selected_major: str
    majors: List[str]
    heading: str
    loading: bool
    notes: List[NoteCard] = Field(default_factory=list)
    banner: Optional[str] = None
    auth_modal: Optional[AuthModalSchema] = None
    upload_open: bool = False
    upload_busy: bool = False
