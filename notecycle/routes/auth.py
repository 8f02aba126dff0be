# auth.py
from typing import Optional

from fastapi import APIRouter, Depends

from ..controller import NoteCycle
from ..schemas import AuthForm, Identity
from ..views import AuthMode
from .deps import get_notecycle

router = APIRouter(prefix="/auth")


@router.get("/session")
def get_session(app: NoteCycle = Depends(get_notecycle)):
    identity = app.session.identity
    return {"authenticated": identity is not None, "user": identity}


@router.post("/open/{mode}")
def open_auth(mode: AuthMode, app: NoteCycle = Depends(get_notecycle)):
    app.open_auth(mode)
    return app.view_model()


@router.post("/toggle")
def toggle_auth_mode(app: NoteCycle = Depends(get_notecycle)):
    app.router.toggle_auth_mode()
    return app.view_model()


@router.post("/close")
def close_auth(app: NoteCycle = Depends(get_notecycle)):
    app.router.close_auth()
    return app.view_model()


@router.post("/submit", response_model=Optional[Identity])
def submit_auth(form: AuthForm, app: NoteCycle = Depends(get_notecycle)):
    return app.submit_auth(form.email, form.password)


@router.post("/sign_out")
def sign_out(app: NoteCycle = Depends(get_notecycle)):
    app.sign_out()
    return app.view_model()
