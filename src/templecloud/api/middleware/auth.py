"""JWT Bearer authentication middleware.

Tokens are issued by the identity provider; this service only verifies them
and never sees passwords. The verified subject becomes the principal id
recorded as ``created_by`` / ``auth_user_id``.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from templecloud.config import settings

logger = logging.getLogger(__name__)

ANONYMOUS = {"sub": "anonymous", "email": ""}


def _decode_jwt(token: str) -> dict:
    from jose import JWTError, jwt

    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError as exc:
        logger.debug("JWT decode failed: %s", exc)
        raise ValueError(f"Invalid token: {exc}") from exc


def authenticate(authorization: str | None) -> dict:
    """Map an ``Authorization`` header to a user dict; never raises."""
    if not authorization or not authorization.startswith("Bearer "):
        return dict(ANONYMOUS)
    try:
        payload = _decode_jwt(authorization[7:])
    except ValueError:
        return {**ANONYMOUS, "_auth_error": "invalid_token"}
    if not payload.get("sub"):
        return {**ANONYMOUS, "_auth_error": "missing_subject"}
    return {"sub": payload["sub"], "email": payload.get("email", "")}


class AuthMiddleware(BaseHTTPMiddleware):
    """Validate a Bearer token, if any, and attach user info to request.state."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.user = authenticate(request.headers.get("authorization"))
        return await call_next(request)
