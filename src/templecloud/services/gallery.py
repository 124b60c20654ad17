"""Temple photo gallery: ordered list of asset URLs capped at a fixed size."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.errors.exceptions import InvalidInputError
from templecloud.services.versioned import update_temple

logger = logging.getLogger(__name__)


def limit_error(max_photos: int) -> InvalidInputError:
    return InvalidInputError("upload.gallery_limit", params={"max_count": max_photos})


async def append_photo(session: AsyncSession, temple_id: str, photo_url: str, max_photos: int) -> list[str]:
    """Append ``photo_url`` and return the stored list.

    The limit is re-checked against the freshly read row, so concurrent
    uploads can neither drop each other's photos nor overshoot ``max_photos``.
    """

    def change(temple) -> dict:
        photos = list(temple.gallery_photos or [])
        if len(photos) >= max_photos:
            raise limit_error(max_photos)
        return {"gallery_photos": photos + [photo_url]}

    temple = await update_temple(session, temple_id, change)
    logger.info("Gallery photo added", extra={"temple_id": temple_id, "total": len(temple.gallery_photos)})
    return list(temple.gallery_photos)


async def remove_photo(session: AsyncSession, temple_id: str, photo_url: str) -> tuple[list[str], bool]:
    """Drop every occurrence of ``photo_url``; the flag says whether any was present."""
    removed = False

    def change(temple) -> dict:
        nonlocal removed
        current = list(temple.gallery_photos or [])
        remaining = [url for url in current if url != photo_url]
        removed = len(remaining) != len(current)
        return {"gallery_photos": remaining} if removed else {}

    temple = await update_temple(session, temple_id, change)
    return list(temple.gallery_photos or []), removed
