"""Custom exception classes for the templecloud API.

Exceptions carry a message *key* rather than rendered text; the HTTP layer
localizes it for the caller.
"""


class TempleCloudError(Exception):
    """Base exception for templecloud."""

    def __init__(
        self,
        code: str,
        message_key: str,
        details: dict | None = None,
        status_code: int = 500,
        params: dict | None = None,
    ):
        self.code = code
        self.message_key = message_key
        self.details = details or {}
        self.status_code = status_code
        self.params = params or {}
        super().__init__(message_key)


class UnauthorizedError(TempleCloudError):
    """No authenticated principal."""

    def __init__(self, message_key: str = "auth.required"):
        super().__init__("UNAUTHORIZED", message_key, status_code=401)


class InvalidInputError(TempleCloudError):
    """Missing required field or a value that is empty after sanitization."""

    def __init__(self, message_key: str, details: dict | None = None, params: dict | None = None):
        super().__init__("INVALID_INPUT", message_key, details, status_code=400, params=params)


class SlugTakenError(TempleCloudError):
    """Slug already in use, either pre-checked or raced at insert time."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__("SLUG_TAKEN", "temple.slug_taken", {"slug": slug}, status_code=409)


class NotFoundOrForbiddenError(TempleCloudError):
    """Resource does not exist or is not owned by the caller; deliberately indistinguishable."""

    def __init__(self, message_key: str = "temple.not_found_or_forbidden"):
        super().__init__("NOT_FOUND_OR_FORBIDDEN", message_key, status_code=404)


class TempleNotFoundError(TempleCloudError):
    """No temple is published under the requested slug."""

    def __init__(self, slug: str):
        super().__init__("TEMPLE_NOT_FOUND", "temple.not_found", {"slug": slug}, status_code=404)


class ImageValidationError(TempleCloudError):
    """Uploaded file rejected before reaching object storage."""

    def __init__(self, message_key: str, params: dict | None = None):
        super().__init__("UPLOAD_INVALID", message_key, status_code=400, params=params)


class UploadFailedError(TempleCloudError):
    """The object storage gateway (or image processing) failed the primary upload."""

    def __init__(self, message_key: str = "upload.failed", cause: str | None = None):
        self.cause = cause
        super().__init__("UPLOAD_FAILED", message_key, status_code=500)


class UploadTimeoutError(TempleCloudError):
    def __init__(self):
        super().__init__("UPLOAD_TIMEOUT", "server.timeout", status_code=504)


class ServerError(TempleCloudError):
    """Unexpected repository or gateway failure, surfaced generically."""

    def __init__(self, message_key: str = "server.generic"):
        super().__init__("SERVER_ERROR", message_key, status_code=500)
