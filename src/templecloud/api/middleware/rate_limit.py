"""Rate limiting using slowapi."""

import logging

from fastapi import Request
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from templecloud.config import settings

logger = logging.getLogger(__name__)


def rate_limit_key(request: Request) -> str:
    """Use the principal for authenticated users, IP for anonymous."""
    user = getattr(request.state, "user", {}) or {}
    sub = user.get("sub", "")
    if sub and sub != "anonymous":
        return f"user:{sub}"
    return get_remote_address(request)


def _storage_uri() -> str:
    if settings.local_mode or not settings.rate_limit_enabled:
        return "memory://"
    return settings.redis_url


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=[],
    storage_uri=_storage_uri(),
    enabled=settings.rate_limit_enabled,
)

# Applied to every mutating temple and upload route
WRITE_LIMIT = f"{settings.rate_limit_writes_per_minute}/minute"


def setup_rate_limiter(app) -> None:
    """Attach the slowapi limiter to the FastAPI app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    logger.info("Rate limiter configured (writes=%s, enabled=%s)", WRITE_LIMIT, limiter.enabled)
