"""Prayer service and donation settings repositories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.db.models.prayer import TempleDonationSettingsRow, TemplePrayerServiceRow
from templecloud.repositories.base import BaseRepository


class PrayerServiceRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TemplePrayerServiceRow)

    async def list_for_temple(self, temple_id: str) -> list[TemplePrayerServiceRow]:
        stmt = select(TemplePrayerServiceRow).where(TemplePrayerServiceRow.temple_id == temple_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class DonationSettingsRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TempleDonationSettingsRow)

    async def get(self, temple_id: str) -> TempleDonationSettingsRow | None:
        return await self.get_by_id("temple_id", temple_id)
