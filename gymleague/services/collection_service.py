"""
Dual-mode collection accessor.

One accessor instance owns one in-memory cache, one loading flag and one error
string for a single entity collection. Its StorageMode (fixed at construction)
decides where reads and writes go:

- Fallback: the cache is hydrated once from local durable storage (seeded with
  example records when no snapshot exists); every add/update/remove updates the
  cache and immediately rewrites the full snapshot.
- Remote: reads query the backend; mutations go to the backend first and, on
  success, the full collection is re-fetched. Nothing is mutated locally before
  the backend confirms, and local storage is never touched.

Overlapping fetches are not de-duplicated: the last fetch to resolve wins.
In-flight fetches are cancelled when the accessor is closed.
"""

import asyncio
import enum
import logging
import uuid
from typing import Any, Dict, Generic, List, Mapping, Optional, Set, Tuple, Type, TypeVar, Union

from gymleague.models.schemas import Record, UserProfile
from gymleague.services.local_storage import LocalStorage, get_local_storage
from gymleague.services.settings_service import get_backend_settings
from gymleague.services.storage_mode import StorageMode
from gymleague.services.supabase_service import BackendError, SupabaseGateway, get_supabase_gateway
from gymleague.utils.datetime_utils import utcnow_iso

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=Record)


class AccessorClosedError(RuntimeError):
    """Raised when an operation is attempted on a closed accessor."""


class CollectionUnavailableError(RuntimeError):
    """The local snapshot could not be read, so it must not be overwritten."""


def _jsonable(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


class CollectionAccessor(Generic[RecordT]):
    """Cache plus create/update/delete for one collection in one storage mode."""

    table: str = ""
    storage_key: str = ""
    label: str = ""
    record_model: Type[RecordT]
    select_columns: str = "*"
    order_by: Optional[str] = "created_at"
    ascending: bool = False
    remote_limit: Optional[int] = None
    # Embedded join projections: read-only, never written to the backend
    relation_fields: Tuple[str, ...] = ()
    immutable_fields: Tuple[str, ...] = ("id",)

    def __init__(
        self,
        mode: StorageMode,
        storage: Optional[LocalStorage] = None,
        gateway: Optional[SupabaseGateway] = None,
        acting_user: Optional[UserProfile] = None,
    ):
        self.mode = mode
        self.acting_user = acting_user
        self.items: List[RecordT] = []
        self.loading = False
        self.error: Optional[str] = None
        self._storage = storage
        self._gateway = gateway
        self._hydrated = False
        self._closed = False
        self._inflight: Set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Stores (resolved lazily so fallback mode never builds a gateway)
    # ------------------------------------------------------------------

    @property
    def storage(self) -> LocalStorage:
        if self._storage is None:
            self._storage = get_local_storage()
        return self._storage

    @property
    def gateway(self) -> SupabaseGateway:
        if self._gateway is None:
            if not self.mode.is_remote:
                raise RuntimeError(f"{self.label} accessor is in fallback mode and has no backend")
            self._gateway = get_supabase_gateway(self.mode.credentials)
        return self._gateway

    # ------------------------------------------------------------------
    # Per-collection hooks
    # ------------------------------------------------------------------

    def seed_records(self) -> List[dict]:
        """Example records written on first fallback access."""
        return []

    def remote_filters(self) -> Dict[str, Any]:
        """Equality filters applied to the remote query."""
        return {}

    def should_fetch_remote(self) -> bool:
        return True

    def is_visible(self, record: RecordT) -> bool:
        """Whether a cached record is shown to the acting user."""
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self) -> List[RecordT]:
        """Cached records visible to the acting user (no I/O)."""
        return [record for record in self.items if self.is_visible(record)]

    def get(self, record_id: str) -> Optional[RecordT]:
        for record in self.items:
            if record.id == record_id:
                return record
        return None

    def get_visible(self, record_id: str) -> Optional[RecordT]:
        """Cached record by id, or None if it is missing or hidden from the acting user."""
        record = self.get(record_id)
        if record is None or not self.is_visible(record):
            return None
        return record

    async def load(self) -> List[RecordT]:
        """Hydrate the cache on first use; later calls return the cache as-is."""
        if not self._hydrated:
            await self.refetch()
        return self.list()

    async def refetch(self) -> List[RecordT]:
        """
        Re-read the whole collection from the active store.

        A failure keeps the previous cache and sets `error`; it is not raised.

        Returns:
            Visible cached records after the fetch
        """
        self._ensure_open()
        self.loading = True
        task = asyncio.ensure_future(self._fetch())
        self._inflight.add(task)
        try:
            self.items = await task
            self.error = None
            self._hydrated = True
        except asyncio.CancelledError:
            if self._closed:
                logger.debug(f"Fetch of {self.label} cancelled by close")
                return self.list()
            raise
        except BackendError as e:
            self.error = f"Failed to fetch {self.label}" if e.is_network_error else e.message
            logger.warning(f"Error fetching {self.label} ({self.mode.name}): {e.message}")
        except ValueError as e:
            self.error = f"Failed to fetch {self.label}"
            logger.warning(f"Invalid {self.label} data ({self.mode.name}): {e}")
        finally:
            self._inflight.discard(task)
            self.loading = False
        return self.list()

    async def _fetch(self) -> List[RecordT]:
        if self.mode.is_remote:
            if not self.should_fetch_remote():
                return list(self.items)
            rows = await self.gateway.select(
                self.table,
                columns=self.select_columns,
                filters=self.remote_filters(),
                order_by=self.order_by,
                ascending=self.ascending,
                limit=self.remote_limit,
            )
            return [self.record_model.model_validate(row) for row in rows]

        snapshot = self.storage.read_json(self.storage_key)
        if snapshot is None:
            records = [self.record_model.model_validate(row) for row in self.seed_records()]
            self._write_snapshot(records)
            logger.info(f"Seeded {len(records)} example {self.label}")
            return self._sorted(records)
        if not isinstance(snapshot, list):
            raise ValueError(f"{self.storage_key} snapshot is not a list")
        return self._sorted([self.record_model.model_validate(row) for row in snapshot])

    def _sorted(self, records: List[RecordT]) -> List[RecordT]:
        if not self.order_by:
            return records
        return sorted(
            records,
            key=lambda record: getattr(record, self.order_by) or "",
            reverse=not self.ascending,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add(self, data: Union[RecordT, Mapping[str, Any]]) -> RecordT:
        """
        Create a record.

        Missing id and timestamps are filled in. In fallback mode the record is
        placed in the cache and the snapshot rewritten; in remote mode it is
        inserted remotely and the collection re-fetched.

        Raises:
            ValueError: Unknown/invalid fields, or the id already exists (fallback)
            BackendError: The backend rejected the insert or was unreachable
            CollectionUnavailableError: The local snapshot could not be read (fallback)
        """
        self._ensure_open()
        record = self._new_record(data)

        if self.mode.is_remote:
            await self.gateway.insert(self.table, self._write_payload(record.model_dump(mode="json")))
            logger.info(f"Created {self.label} record {record.id}")
            await self.refetch()
            return self.get(record.id) or record

        await self._load_for_write()
        if self.get(record.id) is not None:
            raise ValueError(f"{self.label} record {record.id} already exists")
        self.items = self._sorted([record, *self.items])
        self._write_snapshot(self.items)
        logger.info(f"Created {self.label} record {record.id} (fallback)")
        return record

    async def update(self, record_id: str, patch: Mapping[str, Any]) -> Optional[RecordT]:
        """
        Change only the given fields of a record.

        Updating a record that does not exist is a no-op and returns None.

        Raises:
            ValueError: Unknown, immutable or invalid fields in the patch
            BackendError: The backend rejected the update or was unreachable
            CollectionUnavailableError: The local snapshot could not be read (fallback)
        """
        self._ensure_open()
        changes = self._validate_patch(patch)

        if self.mode.is_remote:
            current = self.get(record_id)
            if current is not None:
                merged = self._apply_patch(current, changes).model_dump(mode="json")
                payload = {key: merged[key] for key in changes}
            else:
                payload = {key: _jsonable(value) for key, value in changes.items()}
            await self.gateway.update(self.table, record_id, self._write_payload(payload))
            logger.info(f"Updated {self.label} record {record_id}: {sorted(changes)}")
            await self.refetch()
            return self.get(record_id)

        await self._load_for_write()
        current = self.get(record_id)
        if current is None:
            logger.info(f"Ignoring update of missing {self.label} record {record_id}")
            return None
        updated = self._apply_patch(current, changes)
        self.items = [updated if record.id == record_id else record for record in self.items]
        self._write_snapshot(self.items)
        logger.info(f"Updated {self.label} record {record_id} (fallback): {sorted(changes)}")
        return updated

    async def remove(self, record_id: str) -> bool:
        """
        Delete a record. Removing a missing id is a no-op.

        Returns:
            True if a record was removed (always True once the backend accepts a delete)

        Raises:
            CollectionUnavailableError: The local snapshot could not be read (fallback)
        """
        self._ensure_open()

        if self.mode.is_remote:
            await self.gateway.delete(self.table, record_id)
            logger.info(f"Deleted {self.label} record {record_id}")
            await self.refetch()
            return True

        await self._load_for_write()
        if self.get(record_id) is None:
            return False
        self.items = [record for record in self.items if record.id != record_id]
        self._write_snapshot(self.items)
        logger.info(f"Deleted {self.label} record {record_id} (fallback)")
        return True

    async def _load_for_write(self) -> None:
        await self.load()
        if not self._hydrated:
            raise CollectionUnavailableError(self.error or f"Failed to fetch {self.label}")

    def _new_record(self, data: Union[RecordT, Mapping[str, Any]]) -> RecordT:
        payload = data.model_dump() if isinstance(data, Record) else dict(data)
        now = utcnow_iso()
        if not payload.get("id"):
            payload["id"] = self._new_id()
        if "created_at" in self.record_model.model_fields:
            payload.setdefault("created_at", now)
        if "updated_at" in self.record_model.model_fields:
            payload.setdefault("updated_at", now)
        return self.record_model.model_validate(payload)

    def _new_id(self) -> str:
        if self.mode.is_remote:
            return str(uuid.uuid4())
        return f"{get_backend_settings().demo_id_prefix}{uuid.uuid4().hex[:12]}"

    def _validate_patch(self, patch: Mapping[str, Any]) -> Dict[str, Any]:
        fields = self.record_model.model_fields
        unknown = sorted(key for key in patch if key not in fields)
        if unknown:
            raise ValueError(f"Unknown {self.label} field(s): {', '.join(unknown)}")
        immutable = sorted(key for key in patch if key in self.immutable_fields)
        if immutable:
            raise ValueError(f"Cannot change {self.label} field(s): {', '.join(immutable)}")
        return dict(patch)

    def _apply_patch(self, current: RecordT, changes: Mapping[str, Any]) -> RecordT:
        return self.record_model.model_validate({**current.model_dump(), **changes})

    def _write_payload(self, row: Mapping[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in row.items() if key not in self.relation_fields}

    def _write_snapshot(self, records: List[RecordT]) -> None:
        self.storage.write_json(self.storage_key, [record.model_dump(mode="json") for record in records])

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._closed:
            raise AccessorClosedError(f"{self.label} accessor is closed")

    async def aclose(self) -> None:
        """Cancel in-flight fetches; the accessor cannot be used afterwards."""
        self._closed = True
        tasks = list(self._inflight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug(f"Cancelled {len(tasks)} in-flight {self.label} fetch(es)")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
