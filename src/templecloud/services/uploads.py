"""Upload orchestration for temple assets.

Each upload runs validate -> process -> put -> (optionally) delete the old
asset. Only the primary put is fatal. Favicon derivation and stale-asset
cleanup are best-effort: their failures are logged and the upload still
succeeds. Processing and the primary put are bounded by
``upload_timeout_seconds``; cleanup runs afterwards under its own deadline.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

from PIL import Image

from templecloud.config import settings
from templecloud.errors.exceptions import ImageValidationError, UploadFailedError, UploadTimeoutError
from templecloud.services import image_processing
from templecloud.services.id_generator import random_base36, timestamp_ms
from templecloud.services.image_validation import validate_image
from templecloud.storage.base import ObjectStorage

logger = logging.getLogger(__name__)

TEMP_ID_PREFIX = "temp-"

R = TypeVar("R")


def is_temporary_id(temple_id: str | None) -> bool:
    """True for missing ids and the ``temp-`` placeholders the create form sends."""
    return not temple_id or not temple_id.strip() or temple_id.strip().startswith(TEMP_ID_PREFIX)


def resolve_upload_id(temple_id: str | None) -> str:
    """Reuse a real temple id; synthesize one for temporary or missing ids.

    The create-temple form uploads images before the temple exists, so there
    is no id to namespace the keys under yet.
    """
    if not is_temporary_id(temple_id):
        return temple_id.strip()
    return f"upload-{timestamp_ms()}-{random_base36(9)}"


def asset_key(kind: str, upload_id: str, extension: str) -> str:
    if kind == "gallery":
        return f"temples/{upload_id}/gallery/{timestamp_ms()}-{random_base36(7)}.{extension}"
    return f"temples/{upload_id}/{kind}-{timestamp_ms()}.{extension}"


@dataclass
class UploadedFile:
    """An uploaded file fully read into memory."""

    filename: str | None
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class LogoUpload:
    logo_url: str
    favicon_url: str | None


class UploadService:
    def __init__(self, storage: ObjectStorage, timeout_seconds: float | None = None):
        self.storage = storage
        self.timeout_seconds = timeout_seconds or settings.upload_timeout_seconds

    def validate(self, file: UploadedFile) -> None:
        result = validate_image(file.filename, file.content_type, file.size)
        if not result.valid:
            raise ImageValidationError(result.error, params=result.params)

    async def _bounded(self, operation: Callable[[], Awaitable[R]]) -> R:
        try:
            return await asyncio.wait_for(operation(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error("Upload exceeded %.0fs", self.timeout_seconds)
            raise UploadTimeoutError() from None

    async def _process(self, func, *args) -> bytes:
        try:
            return await asyncio.to_thread(func, *args)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise UploadFailedError("upload.processing_failed", cause=str(exc)) from exc

    async def _put(self, key: str, data: bytes, content_type: str, failure_key: str) -> str:
        try:
            return await self.storage.put(key, data, content_type)
        except Exception as exc:
            raise UploadFailedError(failure_key, cause=str(exc)) from exc

    async def _delete_each(self, urls: tuple[str | None, ...]) -> None:
        for url in urls:
            if not url:
                continue
            try:
                deleted = await self.storage.delete_by_url(url)
            except Exception as exc:
                logger.warning("Stale asset cleanup failed for %s: %s", url, exc)
                continue
            if not deleted:
                logger.warning("Stale asset %s was not deleted", url)

    async def _discard(self, *urls: str | None) -> None:
        """Best-effort cleanup with its own deadline; never raises."""
        try:
            await asyncio.wait_for(self._delete_each(urls), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning("Stale asset cleanup gave up after %.0fs: %s", self.timeout_seconds, urls)

    async def upload_logo(
        self,
        upload_id: str,
        file: UploadedFile,
        old_logo_url: str | None = None,
        old_favicon_url: str | None = None,
    ) -> LogoUpload:
        """Store a resized logo and a favicon derived from the same image.

        The old assets are removed only after the new ones are stored, and
        outside the upload deadline: the caller gets the new URLs even when
        cleanup is slow or fails.
        """
        self.validate(file)

        async def run() -> LogoUpload:
            logo = await self._process(image_processing.resize_within, file.data, image_processing.LOGO_MAX)
            logo_url = await self._put(asset_key("logo", upload_id, "jpg"), logo, "image/jpeg", "upload.logo_failed")

            favicon_url = None
            try:
                favicon = await self._process(image_processing.make_favicon, file.data)
                favicon_url = await self.storage.put(asset_key("favicon", upload_id, "png"), favicon, "image/png")
            except Exception as exc:
                logger.warning("Favicon generation failed for %s: %s", upload_id, exc)
            return LogoUpload(logo_url=logo_url, favicon_url=favicon_url)

        result = await self._bounded(run)
        # Keep the previous favicon live when no new one was stored
        await self._discard(old_logo_url, old_favicon_url if result.favicon_url else None)
        return result

    async def upload_cover(self, upload_id: str, file: UploadedFile, old_cover_url: str | None = None) -> str:
        self.validate(file)

        async def run() -> str:
            cover = await self._process(image_processing.resize_within, file.data, image_processing.COVER_MAX)
            return await self._put(asset_key("cover", upload_id, "jpg"), cover, "image/jpeg", "upload.cover_failed")

        cover_url = await self._bounded(run)
        await self._discard(old_cover_url)
        return cover_url

    async def upload_gallery_photo(self, temple_id: str, file: UploadedFile) -> str:
        self.validate(file)

        async def run() -> str:
            photo = await self._process(image_processing.resize_within, file.data, image_processing.GALLERY_MAX)
            return await self._put(asset_key("gallery", temple_id, "jpg"), photo, "image/jpeg", "upload.gallery_failed")

        return await self._bounded(run)

    async def discard(self, url: str | None) -> None:
        """Best-effort removal of an asset the caller no longer references."""
        await self._discard(url)
