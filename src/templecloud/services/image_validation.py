"""Pre-upload checks for image files.

Validation never raises: malformed-but-present input yields a failed
:class:`ValidationResult` carrying a localizable reason. Whether a file was
supplied at all is the caller's precondition.
"""

from dataclasses import dataclass, field

from templecloud.config import settings

ALLOWED_CONTENT_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
ALLOWED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp"})


@dataclass
class ValidationResult:
    valid: bool
    error: str | None = None
    params: dict = field(default_factory=dict)


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def validate_image(
    filename: str | None,
    content_type: str | None,
    size: int,
    max_size: int | None = None,
) -> ValidationResult:
    """Check type and size of an uploaded image.

    The declared MIME type wins when present; the extension is consulted only
    when the client did not declare one. Files must be strictly smaller than
    ``max_size`` bytes.
    """
    ceiling = max_size or settings.upload_max_bytes
    declared = (content_type or "").split(";", 1)[0].strip().lower()
    if declared and declared != "application/octet-stream":
        type_ok = declared in ALLOWED_CONTENT_TYPES
    else:
        type_ok = file_extension(filename) in ALLOWED_EXTENSIONS

    if not type_ok:
        return ValidationResult(False, "upload.invalid_format")

    if size <= 0:
        return ValidationResult(False, "upload.empty_file")

    if size >= ceiling:
        return ValidationResult(False, "upload.file_too_large", {"max_mb": _format_mb(ceiling)})

    return ValidationResult(True)


def _format_mb(size: int) -> str:
    mb = size / (1024 * 1024)
    return f"{mb:g}"
