"""Temple provisioning and settings routes (admin side)."""

from fastapi import APIRouter, Form, Request
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field

from templecloud.api.middleware.rate_limit import WRITE_LIMIT, limiter
from templecloud.config import settings
from templecloud.dependencies import DBSession, ListingCache, Locale, Principal
from templecloud.errors.messages import translate
from templecloud.models.responses import TempleDetailOut, TempleSettingsOut
from templecloud.services.provisioning import TempleForm, create_temple, delete_temple, list_user_temples
from templecloud.services.temple_settings import get_temple_details, update_temple_settings

router = APIRouter(tags=["Temples"])


class TempleSettingsUpdate(BaseModel):
    """Fields the settings form may change; omitted fields stay untouched."""

    name: str | None = Field(None, max_length=200)
    slug: str | None = None
    intro: str | None = None
    full_description: str | None = None
    address: str | None = Field(None, max_length=300)
    phone: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=200)
    hours: str | None = Field(None, max_length=200)
    avatar_emoji: str | None = Field(None, max_length=16)
    logo_url: str | None = None
    favicon_url: str | None = None
    cover_image_url: str | None = None
    gallery_photos: list[str] | None = None
    facebook_url: str | None = None
    line_id: str | None = Field(None, max_length=100)
    instagram_url: str | None = None
    is_active: bool | None = None


@router.post("/temples", status_code=303)
@limiter.limit(WRITE_LIMIT)
async def create_temple_route(
    request: Request,
    db: DBSession,
    principal: Principal,
    cache: ListingCache,
    name: str | None = Form(None),
    slug: str | None = Form(None),
    intro: str | None = Form(None),
    full_description: str | None = Form(None),
    address: str | None = Form(None),
    phone: str | None = Form(None),
    email: str | None = Form(None),
    hours: str | None = Form(None),
    avatar_emoji: str | None = Form(None),
    logo_url: str | None = Form(None),
    favicon_url: str | None = Form(None),
    cover_image_url: str | None = Form(None),
    facebook_url: str | None = Form(None),
    line_id: str | None = Form(None),
    instagram_url: str | None = Form(None),
) -> RedirectResponse:
    """Create a temple and send the browser to its new subdomain."""
    form = TempleForm(
        name=name,
        slug=slug,
        intro=intro,
        full_description=full_description,
        address=address,
        phone=phone,
        email=email,
        hours=hours,
        avatar_emoji=avatar_emoji,
        logo_url=logo_url,
        favicon_url=favicon_url,
        cover_image_url=cover_image_url,
        facebook_url=facebook_url,
        line_id=line_id,
        instagram_url=instagram_url,
    )
    temple = await create_temple(db, principal, form, cache)
    return RedirectResponse(settings.site_url(temple.slug), status_code=303)


@router.get("/temples")
async def list_temples(db: DBSession, principal: Principal, cache: ListingCache) -> list[dict]:
    return await list_user_temples(db, principal, cache)


@router.delete("/temples/{temple_id}")
@limiter.limit(WRITE_LIMIT)
async def delete_temple_route(
    request: Request,
    temple_id: str,
    db: DBSession,
    principal: Principal,
    cache: ListingCache,
    locale: Locale,
) -> dict:
    await delete_temple(db, principal, temple_id, cache)
    return {"success": translate("temple.deleted", locale)}


@router.get("/temples/{temple_id}", response_model=TempleDetailOut)
async def get_temple_route(temple_id: str, db: DBSession, principal: Principal) -> TempleDetailOut:
    """Temple with its members, active services and next active events (any member)."""
    return await get_temple_details(db, principal, temple_id)


@router.patch("/temples/{temple_id}")
@limiter.limit(WRITE_LIMIT)
async def update_temple_route(
    request: Request,
    temple_id: str,
    body: TempleSettingsUpdate,
    db: DBSession,
    principal: Principal,
    cache: ListingCache,
) -> dict:
    temple = await update_temple_settings(db, principal, temple_id, body.model_dump(exclude_unset=True), cache)
    return {"success": True, "temple": TempleSettingsOut.model_validate(temple).model_dump(mode="json")}
