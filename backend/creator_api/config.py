"""Centralized configuration — all env vars in one place."""

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = {"local", "objectStore"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s=%r, using %d", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid number for %s=%r, using %s", name, raw, default)
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.environment: str = os.getenv("ENVIRONMENT", "local")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _env_int("PORT", 3000)
        self.cors_origins: list[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "https://misticalkai.com").split(",")
            if origin.strip()
        ]
        self.static_dir: str = os.getenv("STATIC_DIR", "public")

        # YouTube Data API
        self.youtube_api_key: str | None = os.getenv("YOUTUBE_API_KEY") or None
        self.youtube_channel_id: str = os.getenv("YOUTUBE_CHANNEL_ID", "UC_sAYoFHtdQxA7T0GqG6dFg")
        self.youtube_api_url: str = os.getenv(
            "YOUTUBE_API_URL", "https://www.googleapis.com/youtube/v3/channels"
        )
        self.upstream_timeout_seconds: float = _env_float("UPSTREAM_TIMEOUT_SECONDS", 10.0)

        # Subscriber count cache + limiter
        self.cache_ttl_seconds: float = _env_float("CACHE_TTL_SECONDS", 20.0)
        self.rate_limit_window_seconds: float = _env_float("RATE_LIMIT_WINDOW_SECONDS", 60.0)
        self.rate_limit_max: int = _env_int("RATE_LIMIT_MAX", 100)
        self.stats_error_status: int = _env_int("STATS_ERROR_STATUS", 503)
        self.trust_proxy_headers: bool = _env_bool("TRUST_PROXY_HEADERS")
        self.trusted_proxy_hops: int = max(1, _env_int("TRUSTED_PROXY_HOPS", 1))

        # Fan submissions
        self.storage_backend: str = os.getenv("STORAGE_BACKEND", "local")
        self.upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
        self.object_store_bucket: str | None = os.getenv("OBJECT_STORE_BUCKET") or None
        self.object_store_endpoint_url: str | None = os.getenv("OBJECT_STORE_ENDPOINT_URL") or None
        self.object_store_region: str | None = os.getenv("OBJECT_STORE_REGION") or None
        self.object_store_public_url: str | None = os.getenv("OBJECT_STORE_PUBLIC_URL") or None
        self.database_url: str | None = os.getenv("DATABASE_URL") or None
        self.database_auto_create: bool = _env_bool("DATABASE_AUTO_CREATE")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of missing env vars required by the configured features."""
        required = ["YOUTUBE_API_KEY", "DATABASE_URL"]
        if self.storage_backend == "objectStore":
            required.append("OBJECT_STORE_BUCKET")
        return [var for var in required if not getattr(self, var.lower())]


settings = Settings()
