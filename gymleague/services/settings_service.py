"""
Settings service for runtime configuration from environment variables.

Values are read at call time (not import time) so that tests and long-running
processes pick up changes. A `.env` file is loaded once on import for local dev.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from gymleague.utils.constants import (
    DEMO_ID_PREFIX,
    SESSION_BOOTSTRAP_TIMEOUT,
    PROFILE_QUERY_TIMEOUT,
)

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = ".gymleague_data"


@dataclass(frozen=True)
class BackendSettings:
    """Snapshot of the environment-supplied backend configuration."""

    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    data_dir: Path
    demo_id_prefix: str
    session_bootstrap_timeout: float
    profile_query_timeout: float

    @property
    def is_backend_configured(self) -> bool:
        """Remote mode needs both an endpoint and a credential."""
        return bool(self.supabase_url) and bool(self.supabase_anon_key)


def _getenv(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name, default)
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def get_float_env(key: str, default: float) -> float:
    """
    Parse a float environment variable, falling back to default on bad input.
    """
    value = _getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except (ValueError, TypeError):
        logger.warning(f"Invalid float value for {key}: {value}")
        return default


def get_backend_settings() -> BackendSettings:
    """
    Read the backend configuration from the environment.

    SUPABASE_URL and SUPABASE_ANON_KEY select remote mode; absence of either
    forces fallback (demo) mode process-wide.
    """
    return BackendSettings(
        supabase_url=_getenv("SUPABASE_URL"),
        supabase_anon_key=_getenv("SUPABASE_ANON_KEY"),
        data_dir=Path(_getenv("GYMLEAGUE_DATA_DIR", DEFAULT_DATA_DIR) or DEFAULT_DATA_DIR),
        demo_id_prefix=_getenv("DEMO_ID_PREFIX", DEMO_ID_PREFIX) or DEMO_ID_PREFIX,
        session_bootstrap_timeout=get_float_env(
            "SESSION_BOOTSTRAP_TIMEOUT_SECONDS", SESSION_BOOTSTRAP_TIMEOUT
        ),
        profile_query_timeout=get_float_env("PROFILE_QUERY_TIMEOUT_SECONDS", PROFILE_QUERY_TIMEOUT),
    )


def get_database_url() -> Optional[str]:
    """Direct Postgres URL of the backend database, used only by the migration runner."""
    return _getenv("SUPABASE_DB_URL")
