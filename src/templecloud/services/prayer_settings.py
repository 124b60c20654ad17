"""Online prayer form settings: which lamp services a temple offers, and donations.

The service catalogue is fixed; temples only switch services on and tune
price and quotas. Reads are public (the prayer form is rendered for anonymous
visitors); writes are limited to temple admins and land in one transaction.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.errors.exceptions import InvalidInputError, NotFoundOrForbiddenError
from templecloud.models.responses import DonationSettingsOut, PrayerServiceOut, PrayerSettingsOut
from templecloud.repositories.prayer_repo import DonationSettingsRepository, PrayerServiceRepository
from templecloud.repositories.temple_repo import TempleRepository
from templecloud.services.id_generator import generate_id
from templecloud.services.permissions import ADMIN_ONLY, require_membership

logger = logging.getLogger(__name__)

# 安太歲, 光明燈, 文昌燈, 拜斗, 月老姻緣簿
SERVICE_CODES = ("taisui", "guangming", "wenchang", "baidou", "yuelao")


@dataclass
class PrayerServiceSetting:
    service_code: str
    is_enabled: bool = False
    custom_price: int | None = None
    max_quantity: int | None = None
    annual_limit: int | None = None


@dataclass
class DonationSetting:
    is_enabled: bool = False
    min_amount: int = 100
    suggested_amounts: list[int] | None = None
    allow_anonymous: bool = True
    custom_message: str | None = None


async def get_prayer_settings(session: AsyncSession, temple_id: str) -> PrayerSettingsOut:
    """Settings for every known service; unconfigured ones read as disabled."""
    if await TempleRepository(session).get(temple_id) is None:
        raise NotFoundOrForbiddenError()

    rows = {r.service_code: r for r in await PrayerServiceRepository(session).list_for_temple(temple_id)}

    services = []
    for code in SERVICE_CODES:
        row = rows.get(code)
        if row is None:
            services.append(PrayerServiceOut(service_code=code))
            continue
        services.append(
            PrayerServiceOut(
                service_code=code,
                is_enabled=row.is_enabled,
                custom_price=row.custom_price,
                max_quantity=row.max_quantity,
                annual_limit=row.annual_limit,
                current_count=row.current_count,
            )
        )

    donation_row = await DonationSettingsRepository(session).get(temple_id)
    if donation_row is None:
        donation = DonationSettingsOut()
    else:
        donation = DonationSettingsOut(
            is_enabled=donation_row.is_enabled,
            min_amount=donation_row.min_amount,
            suggested_amounts=donation_row.suggested_amounts or [],
            allow_anonymous=donation_row.allow_anonymous,
            custom_message=donation_row.custom_message,
        )
    return PrayerSettingsOut(services=services, donation=donation)


def _check_codes(services: list[PrayerServiceSetting]) -> None:
    seen: set[str] = set()
    for service in services:
        if service.service_code not in SERVICE_CODES:
            raise InvalidInputError("prayer.unknown_service", params={"service_code": service.service_code})
        if service.service_code in seen:
            raise InvalidInputError("prayer.duplicate_service", params={"service_code": service.service_code})
        seen.add(service.service_code)


async def save_prayer_settings(
    session: AsyncSession,
    principal: str | None,
    temple_id: str,
    services: list[PrayerServiceSetting],
    donation: DonationSetting | None = None,
) -> None:
    """Upsert the submitted services (and donation settings) atomically.

    ``current_count`` is owned by order intake and never written here.
    """
    await require_membership(session, principal, temple_id, ADMIN_ONLY)
    _check_codes(services)

    service_repo = PrayerServiceRepository(session)
    donation_repo = DonationSettingsRepository(session)
    try:
        existing = {r.service_code: r for r in await service_repo.list_for_temple(temple_id)}
        for service in services:
            values = {
                "is_enabled": service.is_enabled,
                "custom_price": service.custom_price,
                "max_quantity": service.max_quantity,
                "annual_limit": service.annual_limit,
            }
            row = existing.get(service.service_code)
            if row is None:
                await service_repo.create(
                    setting_id=generate_id("psv_"),
                    temple_id=temple_id,
                    service_code=service.service_code,
                    current_count=0,
                    **values,
                )
            else:
                await service_repo.update(row, **values)

        if donation is not None:
            values = {
                "is_enabled": donation.is_enabled,
                "min_amount": donation.min_amount,
                "suggested_amounts": list(donation.suggested_amounts or []),
                "allow_anonymous": donation.allow_anonymous,
                "custom_message": donation.custom_message,
            }
            row = await donation_repo.get(temple_id)
            if row is None:
                await donation_repo.create(temple_id=temple_id, **values)
            else:
                await donation_repo.update(row, **values)

        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(
        "Prayer settings saved",
        extra={"temple_id": temple_id, "user_id": principal, "services": [s.service_code for s in services]},
    )
