"""Temple provisioning: creation, deletion and the owner's listing.

A temple is only ever observable together with its admin membership and its
page configuration. All three rows are flushed inside one transaction; a
failure at any step rolls the whole unit back.

The slug pre-check exists to give the form a fast, friendly error. Two
requests racing for the same slug both pass it, so the unique constraint on
``temples.slug`` decides the winner and the loser's ``IntegrityError`` is
translated into :class:`SlugTakenError` as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.config import settings
from templecloud.db.models.temple import TempleRow
from templecloud.errors.exceptions import (
    InvalidInputError,
    NotFoundOrForbiddenError,
    SlugTakenError,
    UnauthorizedError,
)
from templecloud.repositories.membership_repo import MembershipRepository
from templecloud.repositories.page_repo import PageRepository
from templecloud.repositories.temple_repo import TempleRepository
from templecloud.services.id_generator import generate_id
from templecloud.services.listing_cache import TempleListingCache
from templecloud.services.slugs import MAX_SLUG_LENGTH, sanitize_slug

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"
DEFAULT_THEME = "default"
DEFAULT_HOURS = "每日 06:00 - 21:00"
DEFAULT_AVATAR = "🏛️"


def clean_text(value: str | None) -> str | None:
    """Trim free text; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def checked_slug(raw: str | None) -> str:
    """Sanitize ``raw`` and reject results that cannot be a subdomain."""
    slug = sanitize_slug(raw or "")
    if len(slug) > MAX_SLUG_LENGTH:
        raise InvalidInputError(
            "temple.slug_too_long", details={"slug": slug}, params={"max_length": MAX_SLUG_LENGTH}
        )
    return slug


@dataclass
class TempleForm:
    """Fields submitted by the create-temple form."""

    name: str | None
    slug: str | None
    intro: str | None = None
    full_description: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    hours: str | None = None
    avatar_emoji: str | None = None
    logo_url: str | None = None
    favicon_url: str | None = None
    cover_image_url: str | None = None
    facebook_url: str | None = None
    line_id: str | None = None
    instagram_url: str | None = None

    def optional_fields(self) -> dict[str, str | None]:
        return {
            "intro": clean_text(self.intro),
            "full_description": clean_text(self.full_description),
            "address": clean_text(self.address),
            "phone": clean_text(self.phone),
            "email": clean_text(self.email),
            "hours": clean_text(self.hours) or DEFAULT_HOURS,
            "avatar_emoji": clean_text(self.avatar_emoji) or DEFAULT_AVATAR,
            "logo_url": clean_text(self.logo_url),
            "favicon_url": clean_text(self.favicon_url),
            "cover_image_url": clean_text(self.cover_image_url),
            "facebook_url": clean_text(self.facebook_url),
            "line_id": clean_text(self.line_id),
            "instagram_url": clean_text(self.instagram_url),
        }


async def create_temple(
    session: AsyncSession,
    principal: str | None,
    form: TempleForm,
    cache: TempleListingCache | None = None,
) -> TempleRow:
    """Provision a temple with its admin membership and default page.

    Raises:
        UnauthorizedError: no authenticated principal.
        InvalidInputError: blank name, or a slug that sanitizes to nothing
            or to more than one DNS label can hold.
        SlugTakenError: the sanitized slug already belongs to another temple.
    """
    if not principal:
        raise UnauthorizedError("auth.required_create")

    name = clean_text(form.name)
    slug = checked_slug(form.slug)
    if not name or not slug:
        raise InvalidInputError("temple.name_and_slug_required", details={"slug": slug or None})

    temple_repo = TempleRepository(session)
    if await temple_repo.is_slug_taken(slug):
        raise SlugTakenError(slug)

    try:
        temple = await temple_repo.create(
            temple_id=generate_id("tpl_"),
            slug=slug,
            name=name,
            timezone=settings.default_timezone,
            created_by=principal,
            gallery_photos=[],
            **form.optional_fields(),
        )
        await MembershipRepository(session).create(
            member_id=generate_id("mem_"),
            temple_id=temple.temple_id,
            auth_user_id=principal,
            role=ADMIN_ROLE,
        )
        await PageRepository(session).create(
            page_id=generate_id("page_"),
            temple_id=temple.temple_id,
            theme=DEFAULT_THEME,
            blocks=[],
        )
        await session.commit()
    except IntegrityError:
        await session.rollback()
        if await temple_repo.is_slug_taken(slug):
            logger.info("Slug %s claimed concurrently; rejecting creation by %s", slug, principal)
            raise SlugTakenError(slug) from None
        raise
    except Exception:
        await session.rollback()
        raise

    logger.info("Temple provisioned", extra={"temple_id": temple.temple_id, "slug": slug, "user_id": principal})

    if cache is not None:
        await cache.invalidate(principal)
    return temple


async def delete_temple(
    session: AsyncSession,
    principal: str | None,
    temple_id: str | None,
    cache: TempleListingCache | None = None,
) -> None:
    """Delete a temple owned by ``principal``.

    Missing and foreign temples both raise :class:`NotFoundOrForbiddenError`
    so non-owners cannot discover other tenants' ids.
    """
    if not principal:
        raise UnauthorizedError("auth.required_delete")
    if not temple_id or not temple_id.strip():
        raise InvalidInputError("temple.id_required")

    repo = TempleRepository(session)
    temple = await repo.get_owned(temple_id, principal)
    if temple is None:
        raise NotFoundOrForbiddenError()

    await repo.delete(temple.temple_id)
    await session.commit()
    logger.info("Temple deleted", extra={"temple_id": temple_id, "user_id": principal})

    if cache is not None:
        await cache.invalidate(principal)


def summarize(temple: TempleRow) -> dict:
    return {
        "temple_id": temple.temple_id,
        "slug": temple.slug,
        "name": temple.name,
        "intro": temple.intro,
        "logo_url": temple.logo_url,
        "is_active": temple.is_active,
        "url": settings.site_url(temple.slug),
        "created_at": temple.created_at.isoformat() if temple.created_at else None,
    }


async def list_user_temples(
    session: AsyncSession,
    principal: str | None,
    cache: TempleListingCache | None = None,
) -> list[dict]:
    """The principal's temples, newest first, served from cache when warm."""
    if not principal:
        raise UnauthorizedError()

    if cache is not None:
        cached = await cache.get(principal)
        if cached is not None:
            return cached

    temples = [summarize(t) for t in await TempleRepository(session).list_by_owner(principal)]
    if cache is not None:
        await cache.set(principal, temples)
    return temples
