import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional

class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False
    LOG_LEVEL: str = "INFO"

    # Persistence
    STORE_BACKEND: str = "memory"  # memory | sql
    DATABASE_URL: Optional[str] = None
    TEST_DATABASE_URL: Optional[str] = None

    # Trip history window (most recent N records kept)
    HISTORY_LIMIT: int = 50

    # App URLs
    CORS_ORIGINS: str = "http://localhost:5173"  # comma-separated

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate required configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    Secrets are not logged, only missing keys.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("greentransit")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    problems = []
    backend = (getattr(cfg, "STORE_BACKEND", "memory") or "memory").lower()
    if backend not in {"memory", "sql"}:
        problems.append(f"STORE_BACKEND must be 'memory' or 'sql', got {backend!r}")
    if backend == "sql" and not (getattr(cfg, "DATABASE_URL", None) or getattr(cfg, "TEST_DATABASE_URL", None)):
        problems.append("Missing required configuration: DATABASE_URL")
    if getattr(cfg, "HISTORY_LIMIT", 0) < 1:
        problems.append("HISTORY_LIMIT must be at least 1")

    if problems:
        message = "; ".join(problems)
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
