"""
Application configuration loaded from environment variables (.env supported)
"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _get_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


def _get_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, default))
    except (TypeError, ValueError):
        return default


class Settings:
    """
    Settings snapshot taken from the environment at import time

    Groups:
    - Database: connection URL, pool sizing, per-statement timeout
    - TMDB: API key, base URL, HTTP timeout
    - Storage: S3-compatible (MinIO) endpoint, credentials and bucket
    - Runtime: environment name, logging, scheduler
    """

    def __init__(self):
        # Runtime
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if self.ENVIRONMENT == "development" else "INFO")
        self.FRONTEND_URL = os.getenv("FRONTEND_URL")
        self.AUTO_MIGRATE = _get_bool("AUTO_MIGRATE", True)

        # Database
        self.DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./movie_catalog.db")
        self.DB_POOL_SIZE = _get_int("DB_POOL_SIZE", 5)
        self.DB_MAX_OVERFLOW = _get_int("DB_MAX_OVERFLOW", 10)
        self.DB_POOL_TIMEOUT = _get_int("DB_POOL_TIMEOUT", 30)
        self.DB_POOL_RECYCLE = _get_int("DB_POOL_RECYCLE", 3600)
        self.DB_ECHO = _get_bool("DB_ECHO", False)
        self.DB_QUERY_TIMEOUT = _get_float("DB_QUERY_TIMEOUT", 10.0)  # seconds

        # TMDB
        self.TMDB_API_KEY = os.getenv("TMDB_API_KEY", "")
        self.TMDB_BASE_URL = os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")
        self.TMDB_HTTP_TIMEOUT = _get_float("TMDB_HTTP_TIMEOUT", 30.0)

        # Object storage (MinIO / S3)
        self.STORAGE_ENDPOINT = os.getenv("STORAGE_ENDPOINT", "localhost:9000")
        self.STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID", "")
        self.STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY", "")
        self.STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "movies")
        self.STORAGE_REGION = os.getenv("STORAGE_REGION", "us-east-1")
        self.STORAGE_USE_SSL = _get_bool("STORAGE_USE_SSL", True)
        self.STORAGE_PUBLIC_URL = os.getenv("STORAGE_PUBLIC_URL", "http://localhost:9000/movies")

        # Scheduled sync
        self.ENABLE_BACKGROUND_JOBS = _get_bool("ENABLE_BACKGROUND_JOBS", True)
        self.TIMEZONE = os.getenv("TIMEZONE", "UTC")
        self.SYNC_SCHEDULE_HOUR = _get_int("SYNC_SCHEDULE_HOUR", 3)
        self.SYNC_PAGES = _get_int("SYNC_PAGES", 5)

    @property
    def storage_configured(self) -> bool:
        return bool(self.STORAGE_ACCESS_KEY_ID and self.STORAGE_SECRET_ACCESS_KEY and self.STORAGE_ENDPOINT)

    def validate(self) -> List[str]:
        """Return human-readable warnings for settings the service cannot fully work without"""
        warnings = []
        if not self.TMDB_API_KEY:
            warnings.append("TMDB_API_KEY is not set; catalog sync will fail")
        if not self.STORAGE_ACCESS_KEY_ID:
            warnings.append("STORAGE_ACCESS_KEY_ID is not set; uploads are disabled")
        if not self.STORAGE_SECRET_ACCESS_KEY:
            warnings.append("STORAGE_SECRET_ACCESS_KEY is not set; uploads are disabled")
        if not self.STORAGE_ENDPOINT:
            warnings.append("STORAGE_ENDPOINT is not set; uploads are disabled")
        return warnings


settings = Settings()
