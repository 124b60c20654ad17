"""Prayer form settings: public read, admin-only replace.

Bodies use the camelCase keys of the online prayer form.
"""

from fastapi import APIRouter, Request
from pydantic import Field

from templecloud.api.middleware.rate_limit import WRITE_LIMIT, limiter
from templecloud.dependencies import DBSession, Principal
from templecloud.models.responses import CamelModel, PrayerSettingsOut
from templecloud.services.prayer_settings import (
    DonationSetting,
    PrayerServiceSetting,
    get_prayer_settings,
    save_prayer_settings,
)

router = APIRouter(tags=["Prayer services"])


class PrayerServiceIn(CamelModel):
    service_code: str
    is_enabled: bool = False
    custom_price: int | None = Field(None, ge=0)
    max_quantity: int | None = Field(None, ge=0)
    annual_limit: int | None = Field(None, ge=0)


class DonationIn(CamelModel):
    is_enabled: bool = False
    min_amount: int = Field(100, ge=0)
    suggested_amounts: list[int] = Field(default_factory=list)
    allow_anonymous: bool = True
    custom_message: str | None = None


class PrayerSettingsIn(CamelModel):
    services: list[PrayerServiceIn] = Field(default_factory=list)
    donation: DonationIn | None = None


@router.get(
    "/temples/{temple_id}/prayer-services",
    response_model=PrayerSettingsOut,
    response_model_by_alias=True,
)
async def get_prayer_services(temple_id: str, db: DBSession) -> PrayerSettingsOut:
    return await get_prayer_settings(db, temple_id)


@router.put("/temples/{temple_id}/prayer-services")
@limiter.limit(WRITE_LIMIT)
async def put_prayer_services(
    request: Request,
    temple_id: str,
    body: PrayerSettingsIn,
    db: DBSession,
    principal: Principal,
) -> dict:
    await save_prayer_settings(
        db,
        principal,
        temple_id,
        [PrayerServiceSetting(**s.model_dump()) for s in body.services],
        DonationSetting(**body.donation.model_dump()) if body.donation else None,
    )
    return {"success": True}
