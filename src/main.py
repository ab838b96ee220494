"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api import admin_puzzles, auth, progress, puzzles, subscription
from src.config import get_settings
from src.database import SessionLocal
from src.exceptions import ForbiddenError, NotFoundError, StoreError
from src.services.auth import ensure_default_admin

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def bootstrap_admin() -> None:
    """Create the default admin if configured and no admin exists."""
    if not settings.default_admin_password:
        return
    db = SessionLocal()
    try:
        ensure_default_admin(db, settings.default_admin_email, settings.default_admin_password)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(
        f"Starting in {settings.environment} mode "
        f"(unlock chain: {settings.unlock_chain}, gap policy: {settings.unlock_gap_policy})"
    )
    bootstrap_admin()
    yield


app = FastAPI(
    title="Jigsaw Progression API",
    description="Level progression, solving state and daily play quota for a jigsaw puzzle app",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:8081",
            "http://localhost:19006",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    """Map missing puzzles and records to 404."""
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message})


@app.exception_handler(ForbiddenError)
async def forbidden_handler(request: Request, exc: ForbiddenError):
    """Map policy denials to 403 with a machine-readable reason."""
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": exc.reason.value, "message": exc.message},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    """Map persistence failures to 500."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


# Register routers
app.include_router(auth.router)
app.include_router(subscription.router)
app.include_router(puzzles.router)
app.include_router(progress.router)
app.include_router(admin_puzzles.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
