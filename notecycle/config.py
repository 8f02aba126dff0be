import os
import logging
from typing import List, Optional

from dotenv import load_dotenv
from supabase import create_client, Client, ClientOptions

load_dotenv()

logger = logging.getLogger(__name__)

FETCH_ERROR_POLICIES = ("silent", "banner")


class Settings:
    def __init__(self, env: Optional[dict] = None):
        env = os.environ if env is None else env
        self.supabase_url: Optional[str] = env.get("SUPABASE_URL")
        self.supabase_key: Optional[str] = env.get("SUPABASE_KEY")
        self.notes_table: str = env.get("NOTES_TABLE", "notes")
        self.notes_bucket: str = env.get("NOTES_BUCKET", "notes-pdfs")
        self.backend_timeout: float = float(env.get("NOTECYCLE_BACKEND_TIMEOUT", "10"))
        self.log_level: str = env.get("LOG_LEVEL", "INFO").upper()
        self.host: str = env.get("NOTECYCLE_HOST", "127.0.0.1")
        self.port: int = int(env.get("NOTECYCLE_PORT", "8000"))
        self.allowed_origins: List[str] = [
            origin.strip()
            for origin in env.get("NOTECYCLE_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]
        self.cookie_secure: bool = env.get("NOTECYCLE_COOKIE_SECURE", "false").lower() in ("true", "1", "yes")
        self.max_sessions: int = int(env.get("NOTECYCLE_MAX_SESSIONS", "1000"))

        policy = env.get("NOTES_FETCH_ERROR_POLICY", "silent").lower()
        if policy not in FETCH_ERROR_POLICIES:
            raise ValueError(
                f"NOTES_FETCH_ERROR_POLICY must be one of {FETCH_ERROR_POLICIES}, got {policy!r}"
            )
        self.fetch_error_policy: str = policy


def get_settings() -> Settings:
    return Settings()


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    settings = settings or get_settings()
    try:
        if not settings.supabase_url or not settings.supabase_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_KEY environment variables must be set"
            )

        options = ClientOptions(
            postgrest_client_timeout=settings.backend_timeout,
            storage_client_timeout=int(settings.backend_timeout),
        )
        supabase: Client = create_client(
            settings.supabase_url, settings.supabase_key, options=options
        )
        logger.info("Supabase client initialized")
        return supabase
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        raise
