"""Temple membership repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.db.models.membership import TempleMemberRow
from templecloud.repositories.base import BaseRepository


class MembershipRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TempleMemberRow)

    async def get_for_user(
        self, temple_id: str, auth_user_id: str, roles: tuple[str, ...] | None = None
    ) -> TempleMemberRow | None:
        stmt = select(TempleMemberRow).where(
            TempleMemberRow.temple_id == temple_id,
            TempleMemberRow.auth_user_id == auth_user_id,
        )
        if roles:
            stmt = stmt.where(TempleMemberRow.role.in_(roles))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_temple(self, temple_id: str) -> list[TempleMemberRow]:
        stmt = (
            select(TempleMemberRow)
            .where(TempleMemberRow.temple_id == temple_id)
            .order_by(TempleMemberRow.created_at, TempleMemberRow.member_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
