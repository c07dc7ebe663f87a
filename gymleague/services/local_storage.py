"""
Durable local key/value storage used by fallback (demo) mode.

Each key maps to one JSON file holding a full snapshot. Writes replace the
previous snapshot atomically (temp file + rename); there is no append log.
The store is shared process-wide and keyed by collection name.

Usage:
    from gymleague.services.local_storage import get_local_storage

    storage = get_local_storage()
    storage.write_json("demo_gyms", [...])
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Optional

from gymleague.services.settings_service import get_backend_settings

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStorage:
    """File-backed snapshot store (one JSON file per key)."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the raw stored value, or None if the key was never written."""
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        """Replace the stored value for key."""
        path = self._path(key)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def read_json(self, key: str) -> Optional[Any]:
        """
        Load the JSON snapshot stored under key.

        Returns:
            Decoded value, or None when nothing is stored

        Raises:
            ValueError: If the stored value is not valid JSON
        """
        raw = self.get_item(key)
        if raw is None:
            return None
        return json.loads(raw)

    def write_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))
        logger.debug(f"Persisted snapshot for {key}")


# Shared instance per data directory
_local_storage: Optional[LocalStorage] = None


def get_local_storage() -> LocalStorage:
    """
    Get the process-wide LocalStorage for the configured data directory.

    A new instance is created if GYMLEAGUE_DATA_DIR changed since the last call.
    """
    global _local_storage
    data_dir = get_backend_settings().data_dir
    if _local_storage is None or _local_storage.directory != data_dir:
        _local_storage = LocalStorage(data_dir)
        logger.info(f"Local storage directory: {data_dir}")
    return _local_storage
