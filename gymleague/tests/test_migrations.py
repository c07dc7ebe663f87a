"""
Tests for the schema reset runner (no database required).
"""

import importlib.util
from pathlib import Path

import pytest
from unittest.mock import AsyncMock, patch

from gymleague.database.db import (
    MIGRATIONS_DIR,
    RESET_SCHEMA_SQL,
    apply_migrations,
    list_migration_files,
    normalize_database_url,
    reset_database,
)

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "reset_supabase.py"


@pytest.mark.parametrize(
    "url,expected",
    [
        ("postgres://u:p@db.example.co:5432/postgres", "postgresql+asyncpg://u:p@db.example.co:5432/postgres"),
        ("postgresql://u:p@host/db?sslmode=require", "postgresql+asyncpg://u:p@host/db"),
        ("postgresql+asyncpg://u:p@host/db", "postgresql+asyncpg://u:p@host/db"),
    ],
)
def test_normalize_database_url(url, expected):
    assert normalize_database_url(url) == expected


def test_normalize_rejects_other_schemes():
    with pytest.raises(ValueError, match="Unsupported database URL scheme"):
        normalize_database_url("mysql://u:p@host/db")


def test_migration_files_in_name_order(tmp_path):
    for name in ("010_late.sql", "002_second.sql", "001_first.sql", "notes.txt"):
        (tmp_path / name).write_text("SELECT 1;")

    files = list_migration_files(tmp_path)

    assert [f.name for f in files] == ["001_first.sql", "002_second.sql", "010_late.sql"]


def test_missing_migrations_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_migration_files(tmp_path / "nope")


def test_bundled_schema_is_present():
    names = [f.name for f in list_migration_files(MIGRATIONS_DIR)]

    assert names[0] == "001_initial_schema.sql"


@pytest.mark.asyncio
async def test_apply_migrations_resets_schema_first(tmp_path):
    (tmp_path / "001_a.sql").write_text("CREATE TABLE a (id int);")
    (tmp_path / "002_b.sql").write_text("CREATE TABLE b (id int);")
    execute = AsyncMock()

    applied = await apply_migrations(execute, list_migration_files(tmp_path))

    assert applied == ["001_a.sql", "002_b.sql"]
    statements = [c.args[0] for c in execute.await_args_list]
    assert statements == [RESET_SCHEMA_SQL, "CREATE TABLE a (id int);", "CREATE TABLE b (id int);"]


@pytest.mark.asyncio
async def test_reset_requires_database_url():
    with pytest.raises(ValueError, match="SUPABASE_DB_URL"):
        await reset_database()


def load_script():
    spec = importlib.util.spec_from_file_location("reset_supabase", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_script_reports_failure():
    script = load_script()

    with patch.object(script, "reset_database", AsyncMock(side_effect=ValueError("no url"))):
        assert script.main([]) == 1


def test_script_passes_arguments(tmp_path):
    script = load_script()
    reset = AsyncMock(return_value=["001_initial_schema.sql"])

    with patch.object(script, "reset_database", reset):
        code = script.main(["--database-url", "postgres://u:p@h/db", "--migrations-dir", str(tmp_path)])

    assert code == 0
    reset.assert_awaited_once_with("postgres://u:p@h/db", tmp_path)
