"""Runtime settings read from the environment (and a local .env file)."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables from .env file in the package directory
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_DB_PATH = Path(__file__).parent / "expenses.db"
DEFAULT_LIST_LIMIT = 100
STORE_BACKENDS = ("sqlite", "supabase")


@dataclass(frozen=True)
class Settings:
    store_backend: str = "sqlite"
    db_path: Path = DEFAULT_DB_PATH
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None
    default_limit: int = DEFAULT_LIST_LIMIT
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    log_format: str = "text"


def _parse_origins(raw: str) -> List[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def get_settings() -> Settings:
    """Build settings from environment variables.

    Raises:
        ConfigurationError: If a value is present but unusable, or the
            Supabase store is selected without its credentials.
    """
    store_backend = os.getenv("EXPENSE_STORE", "sqlite").strip().lower()
    if store_backend not in STORE_BACKENDS:
        raise ConfigurationError(
            f"EXPENSE_STORE must be one of {', '.join(STORE_BACKENDS)}, got {store_backend!r}"
        )

    raw_limit = os.getenv("EXPENSES_DEFAULT_LIMIT", str(DEFAULT_LIST_LIMIT))
    try:
        default_limit = int(raw_limit)
    except ValueError:
        raise ConfigurationError(f"EXPENSES_DEFAULT_LIMIT must be an integer, got {raw_limit!r}")
    if default_limit <= 0:
        raise ConfigurationError("EXPENSES_DEFAULT_LIMIT must be positive")

    supabase_url = os.getenv("SUPABASE_URL") or None
    supabase_key = os.getenv("SUPABASE_SERVICE_KEY") or None
    if store_backend == "supabase" and not (supabase_url and supabase_key):
        raise ConfigurationError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY environment variables must be set "
            "when EXPENSE_STORE=supabase."
        )

    log_format = os.getenv("LOG_FORMAT", "text").strip().lower()
    if log_format not in ("text", "json"):
        raise ConfigurationError(f"LOG_FORMAT must be 'text' or 'json', got {log_format!r}")

    return Settings(
        store_backend=store_backend,
        db_path=Path(os.getenv("EXPENSE_DB_PATH", str(DEFAULT_DB_PATH))),
        supabase_url=supabase_url,
        supabase_service_key=supabase_key,
        default_limit=default_limit,
        cors_allow_origins=_parse_origins(os.getenv("CORS_ALLOW_ORIGINS", "*")),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        log_format=log_format,
    )
