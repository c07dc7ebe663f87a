"""
Supabase gateway: the only module that talks to the hosted backend.

Wraps the async supabase client (tables, auth and realtime) behind a small
interface and maps client exceptions onto BackendError so callers see either
the backend's message verbatim (rejected requests) or a generic failure
(network/transport problems). The client is created lazily on first use.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx
from supabase import AsyncClient, AuthError, PostgrestAPIError, acreate_client

from gymleague.services.storage_mode import BackendCredentials

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A remote request failed."""

    REJECTED = "rejected"
    NETWORK = "network"

    def __init__(self, message: str, kind: str = REJECTED):
        super().__init__(message)
        self.message = message
        self.kind = kind

    @property
    def is_network_error(self) -> bool:
        return self.kind == self.NETWORK


@dataclass
class AuthIdentity:
    """Authenticated backend identity."""

    id: str
    email: Optional[str] = None
    access_token: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def _identity_from(user: Any, session: Any = None) -> Optional[AuthIdentity]:
    if user is None:
        return None
    return AuthIdentity(
        id=str(user.id),
        email=getattr(user, "email", None),
        access_token=getattr(session, "access_token", None) if session is not None else None,
        metadata=dict(getattr(user, "user_metadata", None) or {}),
    )


def _extract_inserted_record(payload: Any) -> Optional[dict]:
    """Pull the new row out of a realtime postgres_changes payload."""
    if not isinstance(payload, Mapping):
        return None
    data = payload.get("data")
    if isinstance(data, Mapping) and isinstance(data.get("record"), Mapping):
        return dict(data["record"])
    for key in ("new", "record"):
        if isinstance(payload.get(key), Mapping):
            return dict(payload[key])
    return None


class SupabaseGateway:
    """Table, auth and realtime access for one set of backend credentials."""

    def __init__(
        self,
        credentials: BackendCredentials,
        client_factory: Callable[..., Any] = acreate_client,
    ):
        self.credentials = credentials
        self._client_factory = client_factory
        self._client: Optional[AsyncClient] = None
        self._client_lock = asyncio.Lock()

    async def client(self) -> AsyncClient:
        """Get or create the underlying async client."""
        async with self._client_lock:
            if self._client is None:
                try:
                    self._client = await self._client_factory(
                        self.credentials.url, self.credentials.api_key
                    )
                except httpx.HTTPError as e:
                    raise BackendError(f"Could not reach backend: {e}", BackendError.NETWORK) from e
                if self.credentials.access_token:
                    self._client.postgrest.auth(self.credentials.access_token)
                logger.info(f"[supabase] client initialized for {self.credentials.url}")
            return self._client

    async def _run(self, description: str, request: Callable[[AsyncClient], Any]) -> Any:
        """Execute one request, logging timing and mapping errors."""
        client = await self.client()
        start = time.monotonic()
        logger.debug(f"[supabase] {description}")
        try:
            response = await request(client)
        except PostgrestAPIError as e:
            logger.warning(f"[supabase] {description} rejected: {e.message}")
            raise BackendError(e.message or str(e), BackendError.REJECTED) from e
        except AuthError as e:
            logger.warning(f"[supabase] {description} rejected: {e.message}")
            raise BackendError(e.message, BackendError.REJECTED) from e
        except (httpx.HTTPError, asyncio.TimeoutError, OSError) as e:
            logger.error(f"[supabase] {description} failed: {e}")
            raise BackendError(str(e) or type(e).__name__, BackendError.NETWORK) from e
        logger.debug(f"[supabase] {description} done in {(time.monotonic() - start) * 1000:.0f}ms")
        return response

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[dict]:
        """
        Fetch rows from a table.

        Args:
            table: Table name
            columns: Select expression, may embed related tables ("*, gym:gyms(id,name)")
            filters: Equality filters (column -> value)
            order_by: Column to order by
            ascending: Sort direction
            limit: Maximum number of rows

        Returns:
            List of row dicts (empty when nothing matches)
        """

        async def request(client: AsyncClient):
            query = client.table(table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=not ascending)
            if limit is not None:
                query = query.limit(limit)
            return await query.execute()

        response = await self._run(f"select {table}", request)
        return list(response.data or [])

    async def select_one(self, table: str, column: str, value: Any, columns: str = "*") -> Optional[dict]:
        """Fetch a single row by column value, or None if it does not exist."""

        async def request(client: AsyncClient):
            return await client.table(table).select(columns).eq(column, value).maybe_single().execute()

        response = await self._run(f"select one {table} where {column}", request)
        if response is None:
            return None
        return response.data or None

    async def insert(self, table: str, row: Mapping[str, Any]) -> Optional[dict]:
        async def request(client: AsyncClient):
            return await client.table(table).insert(dict(row)).execute()

        response = await self._run(f"insert {table}", request)
        return response.data[0] if response.data else None

    async def update(self, table: str, record_id: str, patch: Mapping[str, Any]) -> Optional[dict]:
        async def request(client: AsyncClient):
            return await client.table(table).update(dict(patch)).eq("id", record_id).execute()

        response = await self._run(f"update {table} id={record_id}", request)
        return response.data[0] if response.data else None

    async def delete(self, table: str, record_id: str) -> None:
        async def request(client: AsyncClient):
            return await client.table(table).delete().eq("id", record_id).execute()

        await self._run(f"delete {table} id={record_id}", request)

    # ------------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------------

    async def subscribe_inserts(
        self,
        channel_name: str,
        table: str,
        callback: Callable[[dict], None],
        row_filter: Optional[str] = None,
    ) -> Callable[[], Any]:
        """
        Subscribe to INSERT events on a table.

        Args:
            channel_name: Realtime channel name
            table: Table to watch
            callback: Called with each inserted row
            row_filter: Row predicate, e.g. "user_id=eq.<id>"

        Returns:
            Async callable that removes the subscription
        """
        client = await self.client()

        def on_change(payload):
            record = _extract_inserted_record(payload)
            if record is None:
                logger.warning(f"[supabase] ignoring realtime payload without a record on {table}")
                return
            callback(record)

        channel = client.channel(channel_name)
        channel.on_postgres_changes(
            "INSERT", callback=on_change, table=table, schema="public", filter=row_filter
        )
        await channel.subscribe()
        logger.info(f"[supabase] subscribed to inserts on {table} ({row_filter or 'all rows'})")

        async def unsubscribe():
            await client.remove_channel(channel)
            logger.info(f"[supabase] unsubscribed from {channel_name}")

        return unsubscribe

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> AuthIdentity:
        response = await self._run(
            f"sign in {email}",
            lambda client: client.auth.sign_in_with_password({"email": email, "password": password}),
        )
        identity = _identity_from(response.user, response.session)
        if identity is None:
            raise BackendError("No user returned from sign in")
        return identity

    async def sign_up(self, email: str, password: str) -> AuthIdentity:
        response = await self._run(
            f"sign up {email}",
            lambda client: client.auth.sign_up({"email": email, "password": password}),
        )
        identity = _identity_from(response.user, response.session)
        if identity is None:
            raise BackendError("No user returned from signup")
        return identity

    async def sign_out(self) -> None:
        await self._run("sign out", lambda client: client.auth.sign_out())

    async def get_session_identity(self) -> Optional[AuthIdentity]:
        """Identity of the client's existing session, if any."""
        session = await self._run("get session", lambda client: client.auth.get_session())
        if session is None:
            return None
        return _identity_from(session.user, session)

    async def get_user(self, access_token: str) -> Optional[AuthIdentity]:
        """Verify an access token and return its identity."""
        response = await self._run("get user", lambda client: client.auth.get_user(access_token))
        if response is None:
            return None
        identity = _identity_from(response.user)
        if identity is not None:
            identity.access_token = access_token
        return identity

    async def on_auth_state_change(self, callback: Callable[[str, Optional[AuthIdentity]], None]) -> Any:
        """
        Register a listener for backend session changes.

        The callback receives the event name and the new identity (None when signed out).
        Returns the subscription object (call .unsubscribe() to stop listening).
        """
        client = await self.client()

        def listener(event, session):
            identity = _identity_from(session.user, session) if session is not None else None
            callback(str(event), identity)

        return client.auth.on_auth_state_change(listener)


def get_supabase_gateway(credentials: BackendCredentials) -> SupabaseGateway:
    """Create a gateway for the given credentials."""
    return SupabaseGateway(credentials)
