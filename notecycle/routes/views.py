# views.py
from fastapi import APIRouter, Depends

from ..controller import NoteCycle
from ..schemas import ViewModel
from ..views import NavTarget
from .deps import get_notecycle

router = APIRouter()


@router.get("/", response_model=ViewModel)
def read_root(app: NoteCycle = Depends(get_notecycle)):
    return app.view_model()


@router.post("/navigate/{target}", response_model=ViewModel)
def navigate(target: NavTarget, app: NoteCycle = Depends(get_notecycle)):
    app.router.navigate(target)
    return app.view_model()


@router.post("/get_started", response_model=ViewModel)
def get_started(app: NoteCycle = Depends(get_notecycle)):
    app.get_started()
    return app.view_model()


@router.post("/major/{major}", response_model=ViewModel)
def select_major(major: str, app: NoteCycle = Depends(get_notecycle)):
    app.router.select_major(major)
    return app.view_model()


@router.post("/upload/open", response_model=ViewModel)
def open_upload(app: NoteCycle = Depends(get_notecycle)):
    app.open_upload()
    return app.view_model()


@router.post("/upload/close", response_model=ViewModel)
def close_upload(app: NoteCycle = Depends(get_notecycle)):
    app.close_upload()
    return app.view_model()
