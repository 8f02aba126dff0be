import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from supabase import Client

from .config import Settings, get_settings, get_supabase_client
from .errors import NoteCycleError, ValidationError
from .routes import auth, notes, views
from .sessions import NoteCycleSessions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)
logger = logging.getLogger(__name__)


def create_app(
    client_factory: Optional[Callable[[], Client]] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.getLogger().setLevel(settings.log_level)

        factory = client_factory or (lambda: get_supabase_client(settings))
        app.state.sessions = NoteCycleSessions(factory, settings)
        logger.info("NoteCycle started")
        try:
            yield
        finally:
            app.state.sessions.close_all()
            logger.info("NoteCycle stopped")

    app = FastAPI(
        title="NoteCycle API",
        description="Share and browse PDF class notes by major and course",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NoteCycleError)
    async def notecycle_error_handler(request: Request, exc: NoteCycleError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        content = {"detail": exc.message, "error": type(exc).__name__}
        if isinstance(exc, ValidationError) and exc.field:
            content["field"] = exc.field
        return JSONResponse(status_code=exc.status_code, content=content)

    app.include_router(views.router)
    app.include_router(auth.router)
    app.include_router(notes.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
