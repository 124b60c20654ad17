"""Temple-scoped authorization checks shared by the admin routes."""

from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.db.models.membership import TempleMemberRow
from templecloud.errors.exceptions import InvalidInputError, NotFoundOrForbiddenError, UnauthorizedError
from templecloud.repositories.membership_repo import MembershipRepository

ADMIN_ONLY = ("admin",)
MANAGER_ROLES = ("admin", "staff")


async def require_membership(
    session: AsyncSession,
    principal: str | None,
    temple_id: str | None,
    roles: tuple[str, ...] | None = None,
    message_key: str = "auth.no_permission_temple",
) -> TempleMemberRow:
    """Return the caller's membership of ``temple_id`` or raise.

    A caller outside the temple (or below ``roles``) gets the same 404 as a
    missing temple, so temple ids cannot be enumerated.
    """
    if not principal:
        raise UnauthorizedError()
    if not temple_id or not temple_id.strip():
        raise InvalidInputError("temple.id_required")

    member = await MembershipRepository(session).get_for_user(temple_id, principal, roles)
    if member is None:
        raise NotFoundOrForbiddenError(message_key)
    return member
