#!/usr/bin/env python3
"""
Reset the Supabase database: drop the public schema and replay all migrations.

Usage:
    SUPABASE_DB_URL=postgresql://... python scripts/reset_supabase.py
    python scripts/reset_supabase.py --migrations-dir path/to/migrations
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add the project root to the path so we can import gymleague modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gymleague.database.db import MIGRATIONS_DIR, reset_database  # noqa: E402

logger = logging.getLogger("reset_supabase")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Drop and rebuild the Supabase public schema")
    parser.add_argument(
        "--database-url",
        help="Postgres connection URL (defaults to SUPABASE_DB_URL)",
    )
    parser.add_argument(
        "--migrations-dir",
        type=Path,
        default=MIGRATIONS_DIR,
        help="Directory of *.sql migration files, applied in name order",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    args = parse_args(argv)
    try:
        applied = asyncio.run(reset_database(args.database_url, args.migrations_dir))
    except Exception as e:
        logger.error(f"Failed to run migrations: {e}")
        return 1
    print(f"✅ Migrations applied successfully ({len(applied)} file(s))")
    return 0


if __name__ == "__main__":
    sys.exit(main())
