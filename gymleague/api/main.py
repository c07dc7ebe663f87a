"""
Gymnastics League API Server

FastAPI server exposing gyms, events, members, gymnasts, challenges and
notifications, backed by Supabase or by local demo storage.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
import uvicorn
from slowapi import _rate_limit_exceeded_handler  # type: ignore
from slowapi.errors import RateLimitExceeded  # type: ignore

from gymleague.api.routes import router, limiter as routes_limiter
from gymleague.services.collection_service import CollectionUnavailableError
from gymleague.services.settings_service import get_backend_settings

# Allow log level to be configured via environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup and shutdown events."""
    logger.info("Starting up Gymnastics League API...")

    settings = get_backend_settings()
    if settings.is_backend_configured:
        logger.info(f"Supabase backend configured at {settings.supabase_url}")
    else:
        logger.warning("Supabase credentials missing; all requests use demo storage")
    logger.info(f"Demo data directory: {settings.data_dir}")

    yield

    logger.info("Shutting down Gymnastics League API...")


app = FastAPI(
    title="Gymnastics League API",
    description="API for managing gyms, gymnasts, events and challenges in a gymnastics league",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup rate limiter
app.state.limiter = routes_limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def collection_unavailable_handler(request: Request, exc: CollectionUnavailableError):
    """Unreadable demo storage: refuse the write rather than overwrite it."""
    logger.error(f"Refusing write on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


app.add_exception_handler(CollectionUnavailableError, collection_unavailable_handler)

# Add CORS middleware - origins configured via ALLOWED_ORIGINS env var
allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
