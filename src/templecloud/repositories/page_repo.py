"""Temple page configuration repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.db.models.page import TemplePageRow
from templecloud.repositories.base import BaseRepository


class PageRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TemplePageRow)

    async def get_for_temple(self, temple_id: str) -> TemplePageRow | None:
        return await self.get_by_id("temple_id", temple_id)
