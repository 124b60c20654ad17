"""Public temple page data, resolved by slug or by the request's Host."""

from fastapi import APIRouter, Request

from templecloud.config import settings
from templecloud.dependencies import DBSession
from templecloud.errors.exceptions import TempleNotFoundError
from templecloud.models.responses import EventOut, PageOut, PublicTempleOut, ServiceOut, TempleOut
from templecloud.services.resolver import ResolvedTemple, resolve_by_slug
from templecloud.services.slugs import extract_subdomain

router = APIRouter(prefix="/public", tags=["Public"])


def _public_view(resolved: ResolvedTemple) -> PublicTempleOut:
    return PublicTempleOut(
        temple=TempleOut.model_validate(resolved.temple),
        page=PageOut.model_validate(resolved.page) if resolved.page else None,
        events=[EventOut.model_validate(e) for e in resolved.events],
        services=[ServiceOut.model_validate(s) for s in resolved.services],
    )


@router.get("/temples/{slug}", response_model=PublicTempleOut)
async def get_public_temple(slug: str, db: DBSession) -> PublicTempleOut:
    resolved = await resolve_by_slug(db, slug)
    if resolved is None:
        raise TempleNotFoundError(slug)
    return _public_view(resolved)


@router.get("/site", response_model=PublicTempleOut)
async def get_site_for_host(request: Request, db: DBSession) -> PublicTempleOut:
    """Resolve the temple whose subdomain this request was addressed to."""
    host = request.headers.get("x-forwarded-host") or request.headers.get("host")
    label = extract_subdomain(host, settings.root_domain)
    resolved = await resolve_by_slug(db, label) if label else None
    if resolved is None:
        raise TempleNotFoundError(label or "")
    return _public_view(resolved)
