"""FastAPI exception handlers producing localized error bodies."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from templecloud.errors.exceptions import ServerError, TempleCloudError, UnauthorizedError
from templecloud.errors.messages import negotiate_locale, translate
from templecloud.models.responses import ErrorBody

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, code: str, message: str, details: dict | None = None):
    body = ErrorBody(
        error=message,
        code=code,
        trace_id=getattr(request.state, "trace_id", "unknown"),
        **(details or {}),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    """Register all custom exception handlers on the FastAPI app."""

    @app.exception_handler(TempleCloudError)
    async def templecloud_error_handler(request: Request, exc: TempleCloudError):
        locale = negotiate_locale(request.headers.get("accept-language"))
        if isinstance(exc, UnauthorizedError):
            logger.info(
                "unauthenticated_request",
                extra={"path": request.url.path, "method": request.method},
            )
        elif exc.status_code >= 500:
            # The underlying error stays server-side; the client gets generic text
            logger.error(
                "request_failed",
                extra={
                    "path": request.url.path,
                    "code": exc.code,
                    "cause": getattr(exc, "cause", None) or (str(exc.__cause__) if exc.__cause__ else None),
                },
                exc_info=exc.__cause__,
            )
        message = translate(exc.message_key, locale, **exc.params)
        return _error_response(request, exc.status_code, exc.code, message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        locale = negotiate_locale(request.headers.get("accept-language"))
        return _error_response(
            request,
            400,
            "INVALID_INPUT",
            translate("validation.invalid_request", locale),
            {"fields": [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        # Original error stays in the server log only
        logger.exception("unhandled_error path=%s", request.url.path)
        locale = negotiate_locale(request.headers.get("accept-language"))
        error = ServerError()
        return _error_response(request, error.status_code, error.code, translate(error.message_key, locale))
