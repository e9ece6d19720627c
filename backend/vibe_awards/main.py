"""The Vibe Awards Backend -- FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vibe_awards.api.router import api_router
from vibe_awards.config import settings
from vibe_awards.core.error_handlers import register_exception_handlers
from vibe_awards.core.exceptions import RateLimitError
from vibe_awards.core.rate_limit import ClientRateLimiter
from vibe_awards.db.session import async_session_factory, engine
from vibe_awards.db.utils import create_tables
from vibe_awards.dependencies import get_client_ip
from vibe_awards.schemas import ErrorResponse

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.DEBUG else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    # Startup
    logger.info("Starting The Vibe Awards API server...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    await create_tables(engine)
    logger.info("Database tables verified/created")

    if settings.SEED_SAMPLE_DATA:
        from vibe_awards.db.seed import seed_sample_data

        async with async_session_factory() as session:
            seeded = await seed_sample_data(session)
        logger.info("Sample data seeded" if seeded else "Sample data already present")

    yield

    # Shutdown
    logger.info("Shutting down The Vibe Awards API server...")
    await engine.dispose()


app = FastAPI(
    title="The Vibe Awards API",
    description="Submissions, head-to-head battles, nominations and collaboration board",
    version="0.1.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.rate_limiter = (
    ClientRateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    if settings.RATE_LIMIT_ENABLED
    else None
)


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Throttle /api/* per client address; app.state.rate_limiter=None disables it."""
    limiter = request.app.state.rate_limiter
    if limiter is not None and request.url.path.startswith("/api/"):
        client_ip = get_client_ip(request)
        if not limiter.allow(client_ip):
            logger.warning(f"Rate limit exceeded for {client_ip}")
            error = RateLimitError()
            body = ErrorResponse(error=error.message).model_dump()
            return JSONResponse(status_code=error.status_code, content=body)
    return await call_next(request)


register_exception_handlers(app)

# Register API router
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "The Vibe Awards API",
        "version": "0.1.0",
        "docs": "/docs" if settings.DEBUG else None,
        "health": "/api/health",
    }
