# notes.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from ..catalog import ALL_MAJORS, COURSES_BY_MAJOR, DEFAULT_UPLOAD_MAJOR
from ..controller import NoteCycle
from ..schemas import NoteSchema, PdfFile, UploadForm
from .deps import get_notecycle

router = APIRouter()


@router.get("/courses/")
def get_courses():
    return COURSES_BY_MAJOR


@router.get("/notes/", response_model=list[NoteSchema])
def get_notes(
    major: str = Query(ALL_MAJORS, description="Major to filter by, or All"),
    app: NoteCycle = Depends(get_notecycle),
):
    return app.directory.filter(major)


@router.post("/notes/refresh", response_model=list[NoteSchema])
def refresh_notes(app: NoteCycle = Depends(get_notecycle)):
    return app.directory.fetch_all()


@router.post("/upload_notes/", response_model=NoteSchema)
def upload_notes(
    title: str = Form(""),
    description: str = Form(""),
    course: str = Form(""),
    major: str = Form(DEFAULT_UPLOAD_MAJOR),
    file: Optional[UploadFile] = File(None),
    app: NoteCycle = Depends(get_notecycle),
):
    pdf = None
    if file is not None:
        pdf = PdfFile(
            filename=file.filename or "",
            content_type=file.content_type,
            data=file.file.read(),
        )

    form = UploadForm(
        title=title, description=description, course=course, major=major, file=pdf
    )
    return app.upload(form)


@router.delete("/notes/{note_id}")
def delete_notes(
    note_id: str,
    confirm: bool = Query(False, description="The user agreed to delete the note"),
    app: NoteCycle = Depends(get_notecycle),
):
    deleted = app.delete(note_id, lambda note: confirm)
    if deleted is None:
        return {"deleted": False, "auth_required": True}
    return {"deleted": deleted, "auth_required": False}
