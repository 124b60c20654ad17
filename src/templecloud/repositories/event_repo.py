"""Event repository."""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.db.models.event import EventRow
from templecloud.repositories.base import BaseRepository


class EventRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, EventRow)

    async def list_upcoming(self, temple_id: str, on_or_after: date, limit: int = 10) -> list[EventRow]:
        """Active events dated ``on_or_after`` or later, soonest first."""
        stmt = (
            select(EventRow)
            .where(
                EventRow.temple_id == temple_id,
                EventRow.is_active.is_(True),
                EventRow.event_date >= on_or_after,
            )
            .order_by(EventRow.event_date.asc(), EventRow.event_time.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_temple(self, temple_id: str) -> list[EventRow]:
        """Every event of the temple, latest date first (admin listing)."""
        stmt = (
            select(EventRow)
            .where(EventRow.temple_id == temple_id)
            .order_by(EventRow.event_date.desc(), EventRow.event_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active(self, temple_id: str, limit: int = 10) -> list[EventRow]:
        stmt = (
            select(EventRow)
            .where(EventRow.temple_id == temple_id, EventRow.is_active.is_(True))
            .order_by(EventRow.event_date.asc(), EventRow.event_id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_temple(self, temple_id: str, event_id: str) -> EventRow | None:
        stmt = select(EventRow).where(EventRow.event_id == event_id, EventRow.temple_id == temple_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete(self, row: EventRow) -> None:
        await self.session.delete(row)
        await self.session.flush()
