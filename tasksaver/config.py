"""Configuration helpers for TaskSaver."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
from typing import List, Optional

from . import __version__

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEV_JWT_SECRET = "tasksaver-dev-secret"

DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

STORE_BACKENDS = ("firestore", "file")
DATA_MODES = ("api", "local")
FALLBACK_POLICIES = ("cache", "raise")


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


@dataclass(slots=True)
class Settings:
    """Runtime configuration shared by the API, the client and the CLI."""

    jwt_secret: str
    environment: str = "development"
    jwt_secret_configured: bool = True
    token_ttl_days: int = 7
    store_backend: str = "firestore"
    data_dir: Path = PROJECT_ROOT / "data_store"
    firestore_project: Optional[str] = None
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    api_base_url: str = "http://localhost:8000/api"
    data_mode: str = "local"
    fallback_policy: str = "cache"
    cache_dir: Path = Path.home() / ".tasksaver"
    request_timeout: Optional[float] = None
    log_level: str = "INFO"
    version: str = __version__

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_days * 24 * 60 * 60

    def missing_required(self) -> List[str]:
        """Names of required variables that were not supplied."""
        missing = []
        if not self.jwt_secret_configured:
            missing.append("TASKSAVER_JWT_SECRET")
        return missing


def _choice(var: str, value: str, allowed: tuple[str, ...]) -> str:
    value = value.strip().lower()
    if value not in allowed:
        raise ConfigError(f"{var} must be one of {', '.join(allowed)}; got '{value}'.")
    return value


def load_settings() -> Settings:
    """Load settings from environment variables.

    Raises:
        ConfigError: if a value is invalid or the JWT secret is missing in
            production.
    """

    environment = os.getenv("TASKSAVER_ENV", "development").strip() or "development"

    secret = os.getenv("TASKSAVER_JWT_SECRET", "").strip()
    secret_configured = bool(secret)
    if not secret:
        if environment == "production":
            raise ConfigError(
                "Missing TASKSAVER_JWT_SECRET. Tokens cannot be signed in production "
                "without an explicit secret."
            )
        logger.warning("TASKSAVER_JWT_SECRET not set; using the development secret.")
        secret = DEV_JWT_SECRET

    backend = _choice(
        "TASKSAVER_STORE_BACKEND",
        os.getenv("TASKSAVER_STORE_BACKEND", "firestore"),
        STORE_BACKENDS,
    )
    if os.getenv("TASKSAVER_STORE_FORCE_FILE", "").strip() == "1":
        backend = "file"

    data_dir = os.getenv("TASKSAVER_DATA_DIR", "").strip()
    cache_dir = os.getenv("TASKSAVER_CACHE_DIR", "").strip()

    origins_env = os.getenv("TASKSAVER_ALLOWED_ORIGINS", "").strip()
    origins = (
        [origin.strip() for origin in origins_env.split(",") if origin.strip()]
        if origins_env
        else list(DEFAULT_ORIGINS)
    )

    timeout_env = os.getenv("TASKSAVER_REQUEST_TIMEOUT", "").strip()
    try:
        timeout = float(timeout_env) if timeout_env else None
        ttl_days = int(os.getenv("TASKSAVER_TOKEN_TTL_DAYS", "7"))
    except ValueError as exc:
        raise ConfigError(f"Invalid numeric setting: {exc}") from exc

    return Settings(
        jwt_secret=secret,
        environment=environment,
        jwt_secret_configured=secret_configured,
        token_ttl_days=ttl_days,
        store_backend=backend,
        data_dir=Path(data_dir) if data_dir else PROJECT_ROOT / "data_store",
        firestore_project=os.getenv("TASKSAVER_FIRESTORE_PROJECT") or None,
        allowed_origins=origins,
        api_base_url=os.getenv("TASKSAVER_API_URL", "http://localhost:8000/api").rstrip("/"),
        data_mode=_choice(
            "TASKSAVER_DATA_MODE", os.getenv("TASKSAVER_DATA_MODE", "local"), DATA_MODES
        ),
        fallback_policy=_choice(
            "TASKSAVER_FALLBACK_POLICY",
            os.getenv("TASKSAVER_FALLBACK_POLICY", "cache"),
            FALLBACK_POLICIES,
        ),
        cache_dir=Path(cache_dir) if cache_dir else Path.home() / ".tasksaver",
        request_timeout=timeout,
        log_level=os.getenv("TASKSAVER_LOG_LEVEL", "INFO").upper(),
    )
