"""Temple settings: the admin dashboard's view and edit of a single temple.

Any member may read; only admin and staff may edit. Edits go through the
optimistic-lock helper so a settings save never resurrects gallery photos a
concurrent upload or delete just changed, and a renamed slug goes through the
same sanitizer, length rule and uniqueness guard as at creation.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.config import settings
from templecloud.db.models.temple import TempleRow
from templecloud.errors.exceptions import InvalidInputError, NotFoundOrForbiddenError, SlugTakenError
from templecloud.models.responses import (
    AdminEventOut,
    MemberOut,
    ServiceOut,
    TempleDetailOut,
    TempleSettingsOut,
)
from templecloud.repositories.event_repo import EventRepository
from templecloud.repositories.membership_repo import MembershipRepository
from templecloud.repositories.service_repo import TempleServiceRepository
from templecloud.repositories.temple_repo import TempleRepository
from templecloud.services.gallery import limit_error
from templecloud.services.listing_cache import TempleListingCache
from templecloud.services.permissions import MANAGER_ROLES, require_membership
from templecloud.services.provisioning import DEFAULT_AVATAR, DEFAULT_HOURS, checked_slug, clean_text
from templecloud.services.versioned import update_temple

logger = logging.getLogger(__name__)

DASHBOARD_EVENT_LIMIT = 10

# Free-text columns editable from the settings form
TEXT_FIELDS = (
    "intro",
    "full_description",
    "address",
    "phone",
    "email",
    "cover_image_url",
    "logo_url",
    "favicon_url",
    "facebook_url",
    "line_id",
    "instagram_url",
)

FALLBACKS = {"hours": DEFAULT_HOURS, "avatar_emoji": DEFAULT_AVATAR}


async def get_temple_details(session: AsyncSession, principal: str | None, temple_id: str) -> TempleDetailOut:
    await require_membership(session, principal, temple_id, message_key="auth.no_permission_view")

    temple = await TempleRepository(session).get(temple_id)
    if temple is None:
        raise NotFoundOrForbiddenError("auth.no_permission_view")

    return TempleDetailOut(
        temple=TempleSettingsOut.model_validate(temple),
        members=[MemberOut.model_validate(m) for m in await MembershipRepository(session).list_for_temple(temple_id)],
        services=[ServiceOut.model_validate(s) for s in await TempleServiceRepository(session).list_active(temple_id)],
        events=[
            AdminEventOut.model_validate(e)
            for e in await EventRepository(session).list_active(temple_id, limit=DASHBOARD_EVENT_LIMIT)
        ],
    )


def normalize_changes(changes: dict, max_photos: int) -> dict:
    """Map submitted settings to column values; unknown keys are ignored."""
    fields: dict = {}
    for key, value in changes.items():
        if key == "name":
            name = clean_text(value)
            if not name:
                raise InvalidInputError("temple.name_required")
            fields["name"] = name
        elif key == "slug":
            slug = checked_slug(value)
            if not slug:
                raise InvalidInputError("temple.name_and_slug_required", details={"slug": None})
            fields["slug"] = slug
        elif key == "gallery_photos":
            photos = [url for url in (value or []) if url and url.strip()]
            if len(photos) > max_photos:
                raise limit_error(max_photos)
            fields["gallery_photos"] = photos
        elif key == "is_active":
            if value is not None:
                fields["is_active"] = bool(value)
        elif key in FALLBACKS:
            fields[key] = clean_text(value) or FALLBACKS[key]
        elif key in TEXT_FIELDS:
            fields[key] = clean_text(value)
    return fields


async def update_temple_settings(
    session: AsyncSession,
    principal: str | None,
    temple_id: str,
    changes: dict,
    cache: TempleListingCache | None = None,
) -> TempleRow:
    """Apply the submitted subset of settings to a temple the caller manages.

    Raises:
        UnauthorizedError: no authenticated principal.
        NotFoundOrForbiddenError: not an admin or staff member of the temple.
        InvalidInputError: blank name, unusable slug or too many gallery photos.
        SlugTakenError: the new slug belongs to another temple.
    """
    await require_membership(session, principal, temple_id, MANAGER_ROLES)
    fields = normalize_changes(changes, settings.gallery_max_photos)

    slug = fields.get("slug")
    if slug is not None:
        holder = await TempleRepository(session).get_by_slug(slug)
        if holder is not None and holder.temple_id != temple_id:
            raise SlugTakenError(slug)

    try:
        temple = await update_temple(session, temple_id, lambda row: fields)
    except IntegrityError:
        # Only the slug is unique; another temple claimed it after the pre-check
        if slug is not None:
            raise SlugTakenError(slug) from None
        raise

    logger.info(
        "Temple settings updated",
        extra={"temple_id": temple_id, "user_id": principal, "fields": sorted(fields)},
    )
    if cache is not None:
        await cache.invalidate(temple.created_by)
    return temple
