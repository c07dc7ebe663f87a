"""
Shared pytest configuration for gymleague tests.

Every test runs with the Supabase variables removed and a private demo data
directory, so nothing can reach a real backend or a developer's demo data.
"""

import os

# Disable rate limiting before the API package is imported
os.environ["ENV"] = "test"

import pytest  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

from gymleague.models.schemas import UserProfile  # noqa: E402
from gymleague.services.local_storage import LocalStorage  # noqa: E402
from gymleague.services.settings_service import BackendSettings  # noqa: E402
from gymleague.services.storage_mode import BackendCredentials, StorageMode  # noqa: E402
from gymleague.services.supabase_service import SupabaseGateway  # noqa: E402

SUPABASE_URL = "https://example.supabase.co"
SUPABASE_KEY = "anon-test-key"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Fallback mode by default, with demo data under tmp_path."""
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
    monkeypatch.delenv("SUPABASE_DB_URL", raising=False)
    data_dir = tmp_path / "demo_data"
    monkeypatch.setenv("GYMLEAGUE_DATA_DIR", str(data_dir))
    return data_dir


@pytest.fixture
def configured_env(monkeypatch):
    """Backend configured through the environment."""
    monkeypatch.setenv("SUPABASE_URL", SUPABASE_URL)
    monkeypatch.setenv("SUPABASE_ANON_KEY", SUPABASE_KEY)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "store")


@pytest.fixture
def remote_settings(tmp_path):
    return BackendSettings(
        supabase_url=SUPABASE_URL,
        supabase_anon_key=SUPABASE_KEY,
        data_dir=tmp_path / "store",
        demo_id_prefix="demo-",
        session_bootstrap_timeout=0.2,
        profile_query_timeout=0.2,
    )


@pytest.fixture
def unconfigured_settings(tmp_path):
    return BackendSettings(
        supabase_url=None,
        supabase_anon_key=None,
        data_dir=tmp_path / "store",
        demo_id_prefix="demo-",
        session_bootstrap_timeout=0.2,
        profile_query_timeout=0.2,
    )


@pytest.fixture
def remote_mode():
    return StorageMode.remote(BackendCredentials(SUPABASE_URL, SUPABASE_KEY, "user-token"))


@pytest.fixture
def fallback_mode():
    return StorageMode.fallback()


@pytest.fixture
def mock_gateway():
    """Gateway double; every public coroutine is an AsyncMock."""
    gateway = AsyncMock(spec=SupabaseGateway)
    gateway.select.return_value = []
    gateway.select_one.return_value = None
    gateway.insert.return_value = None
    gateway.update.return_value = None
    return gateway


@pytest.fixture
def spy_storage():
    """Storage double used to prove remote mode never touches local storage."""
    return MagicMock(spec=LocalStorage)


def make_profile(**overrides) -> UserProfile:
    fields = {
        "id": "8f1c7f5e-0000-4000-8000-000000000001",
        "email": "coach@example.com",
        "first_name": "Casey",
        "last_name": "Coach",
        "role": "coach",
        "gym_id": "gym-1",
        "is_active": True,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    }
    fields.update(overrides)
    return UserProfile(**fields)


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def coach_profile():
    return make_profile()


@pytest.fixture
def admin_profile():
    return make_profile(
        id="8f1c7f5e-0000-4000-8000-0000000000aa",
        email="admin@example.com",
        first_name="Alex",
        last_name="Admin",
        role="admin",
        gym_id=None,
    )
