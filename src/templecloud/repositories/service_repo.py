"""Temple service repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.db.models.service import TempleServiceRow
from templecloud.repositories.base import BaseRepository


class TempleServiceRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TempleServiceRow)

    async def list_active(self, temple_id: str) -> list[TempleServiceRow]:
        stmt = (
            select(TempleServiceRow)
            .where(
                TempleServiceRow.temple_id == temple_id,
                TempleServiceRow.is_active.is_(True),
            )
            .order_by(TempleServiceRow.sort_order.asc(), TempleServiceRow.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
