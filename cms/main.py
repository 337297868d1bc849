"""
Headless CMS API - Main Application Entry Point

This module initializes the FastAPI application with:
- Logging, configuration checks and database schema initialization
- Optional seeding and the scheduled-post publisher
- CORS, Prometheus metrics and Redis rate limiting middleware
- Centralized error envelopes
- API router registration and static upload serving

Architecture:
    FastAPI App
    ├── Lifespan Management (startup/shutdown)
    ├── Middleware (CORS, metrics, rate limit)
    ├── /api/v1
    │   ├── /auth - Login, tokens, password reset
    │   ├── /posts, /categories, /tags - Blog content
    │   ├── /services - Portfolio
    │   ├── /jobs - Careers and applications
    │   ├── /media - Media library
    │   ├── /users - User administration
    │   └── /dashboard - Stats and search
    ├── /uploads - Stored media files
    ├── /metrics - Prometheus scrape endpoint
    └── /health
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cms.api import api_router
from cms.config import get_settings
from cms.database import async_session, init_db
from cms.errors import register_exception_handlers
from cms.logging_config import configure_logging
from cms.middleware.metrics import setup_metrics
from cms.middleware.rate_limit import RateLimitMiddleware
from cms.scheduler import start_scheduler, stop_scheduler
from cms.seed import seed_all
from cms.services.rate_limit import get_rate_limiter

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# StaticFiles checks the directory when mounted
os.makedirs(settings.upload_dir, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle events.

    Startup:
        1. Refuse development secrets in production
        2. Initialize database tables
        3. Seed roles, admin and categories when SEED_ON_STARTUP is set
        4. Start the scheduled-post publisher

    Shutdown:
        1. Stop the scheduler
        2. Close the Redis connection
    """
    settings.validate_secrets()
    await init_db()
    if settings.seed_on_startup:
        async with async_session() as session:
            await seed_all(session)
    if settings.scheduler_enabled:
        start_scheduler()
    logger.info(f"CMS API started ({settings.environment})")
    yield
    stop_scheduler()
    limiter = await get_rate_limiter()
    await limiter.close()


app = FastAPI(
    title="Headless CMS API",
    description="Content management API for blog, portfolio, careers and media",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RateLimitMiddleware, prefix=f"{API_PREFIX}/")
setup_metrics(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix=API_PREFIX)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.environment}
