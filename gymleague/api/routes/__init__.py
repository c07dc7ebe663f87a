"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter, error mapping) lives here; every sub-router
imports what it needs from this package.
"""

import logging
import os

from fastapi import APIRouter, HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

from gymleague.services.collection_service import CollectionAccessor
from gymleague.services.supabase_service import BackendError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
IS_TEST_ENV = os.getenv("ENV", "").lower() == "test"
if IS_TEST_ENV:
    limiter = Limiter(key_func=get_remote_address)

    def no_op_limit(*args, **kwargs):
        """No-op decorator for test mode - doesn't apply any rate limiting."""
        def decorator(func):
            return func
        return decorator

    limiter.limit = lambda *args, **kwargs: no_op_limit()
else:
    limiter = Limiter(key_func=get_remote_address)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------
def backend_http_error(e: BackendError) -> HTTPException:
    """Rejected requests keep the backend's message; transport failures are 502."""
    if e.is_network_error:
        return HTTPException(status_code=502, detail=f"Backend unavailable: {e.message}")
    return HTTPException(status_code=400, detail=e.message)


def not_found(label: str, record_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{label} {record_id} not found")


def collection_response(accessor: CollectionAccessor, items=None) -> dict:
    records = accessor.list() if items is None else items
    return {
        "items": [record.model_dump(mode="json") for record in records],
        "error": accessor.error,
    }


# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from gymleague.api.routes.auth import router as auth_router  # noqa: E402
from gymleague.api.routes.gyms import router as gyms_router  # noqa: E402
from gymleague.api.routes.events import router as events_router  # noqa: E402
from gymleague.api.routes.members import router as members_router  # noqa: E402
from gymleague.api.routes.gymnasts import router as gymnasts_router  # noqa: E402
from gymleague.api.routes.challenges import router as challenges_router  # noqa: E402
from gymleague.api.routes.notifications import router as notifications_router  # noqa: E402
from gymleague.api.routes.registrations import router as registrations_router  # noqa: E402
from gymleague.api.routes.health import router as health_router  # noqa: E402

router = APIRouter()
router.include_router(auth_router)
router.include_router(gyms_router)
router.include_router(events_router)
router.include_router(members_router)
router.include_router(gymnasts_router)
router.include_router(challenges_router)
router.include_router(notifications_router)
router.include_router(registrations_router)
router.include_router(health_router)
