from fastapi import Request, Response

from ..controller import NoteCycle
from ..sessions import SESSION_COOKIE


def get_notecycle(request: Request, response: Response) -> NoteCycle:
    sessions = request.app.state.sessions
    current_id = request.cookies.get(SESSION_COOKIE)
    session_id, notecycle = sessions.get(current_id)
    if session_id != current_id:
        response.set_cookie(
            SESSION_COOKIE,
            session_id,
            httponly=True,
            samesite="lax",
            secure=sessions.settings.cookie_secure,
        )
    return notecycle
