"""Temple repository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.db.models.temple import TempleRow
from templecloud.repositories.base import BaseRepository


class TempleRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TempleRow)

    async def get(self, temple_id: str) -> TempleRow | None:
        return await self.get_by_id("temple_id", temple_id)

    async def get_for_update(self, temple_id: str) -> TempleRow | None:
        """Fresh read of the temple, row-locked where the backend supports it.

        ``populate_existing`` overwrites any copy already in the identity
        map, so a retry after a version conflict sees the committed state.
        SQLite ignores ``FOR UPDATE``; the version column catches the race there.
        """
        stmt = (
            select(TempleRow)
            .where(TempleRow.temple_id == temple_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> TempleRow | None:
        return await self.get_by_id("slug", slug)

    async def is_slug_taken(self, slug: str) -> bool:
        stmt = select(TempleRow.temple_id).where(TempleRow.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_owned(self, temple_id: str, owner_id: str) -> TempleRow | None:
        """Return the temple only if ``owner_id`` created it."""
        stmt = select(TempleRow).where(
            TempleRow.temple_id == temple_id,
            TempleRow.created_by == owner_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_owner(self, owner_id: str) -> list[TempleRow]:
        stmt = (
            select(TempleRow)
            .where(TempleRow.created_by == owner_id)
            .order_by(TempleRow.created_at.desc(), TempleRow.temple_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, temple_id: str) -> None:
        # Memberships, page, events and services go with it (ON DELETE CASCADE)
        await self.session.execute(delete(TempleRow).where(TempleRow.temple_id == temple_id))
