"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from templecloud import __version__
from templecloud.config import settings
from templecloud.db.engine import create_db_engine, create_session_factory
from templecloud.logging_config import configure_logging
from templecloud.storage import create_storage

# Configure logging at import time
configure_logging(log_level=settings.log_level, json_output=not settings.local_mode)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown resources."""
    engine = create_db_engine()

    # Idempotent: only missing tables are created
    from templecloud.db.base import Base
    import templecloud.db.models  # noqa: F401 - register all ORM models

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    app.state.db_engine = engine
    app.state.db_session_factory = create_session_factory(engine)
    app.state.storage = create_storage(settings)

    # Redis backs the temple listing cache; optional in local mode
    app.state.redis = None
    if not settings.local_mode:
        try:
            import redis.asyncio as aioredis
            app.state.redis = aioredis.from_url(settings.redis_url, decode_responses=True)
        except Exception:
            logger.warning("Redis not available, temple listings will not be cached")

    logger.info(
        "templecloud API started (db=%s, root_domain=%s)",
        "sqlite" if "sqlite" in settings.effective_database_url else "postgresql",
        settings.root_domain,
    )
    yield

    if app.state.redis:
        await app.state.redis.close()
    await engine.dispose()
    logger.info("templecloud API shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="templecloud API",
        version=__version__,
        description="Temple provisioning, subdomain resolution and asset uploads.",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add middleware (order matters: last added = first executed)
    from templecloud.api.middleware.trace_id import TraceIdMiddleware
    from templecloud.api.middleware.auth import AuthMiddleware
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(AuthMiddleware)

    from templecloud.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from templecloud.api.middleware.rate_limit import setup_rate_limiter
    setup_rate_limiter(app)

    # Prometheus metrics (internal endpoint)
    from prometheus_fastapi_instrumentator import Instrumentator
    Instrumentator(
        should_group_status_codes=True,
        should_respect_env_var=False,
        excluded_handlers=["/api/v1/health.*", "/metrics"],
    ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    from templecloud.api.router import api_router
    from templecloud.api.routes import assets
    app.include_router(api_router)
    app.include_router(assets.router)

    return app


app = create_app()
