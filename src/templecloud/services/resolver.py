"""Public read path: subdomain label to temple plus what its page shows."""

from dataclasses import dataclass, field
from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.config import settings
from templecloud.db.models.event import EventRow
from templecloud.db.models.page import TemplePageRow
from templecloud.db.models.service import TempleServiceRow
from templecloud.db.models.temple import TempleRow
from templecloud.repositories.event_repo import EventRepository
from templecloud.repositories.page_repo import PageRepository
from templecloud.repositories.service_repo import TempleServiceRepository
from templecloud.repositories.temple_repo import TempleRepository
from templecloud.services.slugs import sanitize_slug

UPCOMING_EVENT_LIMIT = 10


@dataclass
class ResolvedTemple:
    temple: TempleRow
    page: TemplePageRow | None
    events: list[EventRow] = field(default_factory=list)
    services: list[TempleServiceRow] = field(default_factory=list)


def local_today(tz_name: str | None = None) -> date:
    """Current date in the deployment's temple timezone."""
    return datetime.now(ZoneInfo(tz_name or settings.default_timezone)).date()


async def resolve_by_slug(
    session: AsyncSession,
    slug: str | None,
    today: date | None = None,
) -> ResolvedTemple | None:
    """Look up a temple by (untrusted) slug.

    Returns ``None`` when nothing matches; whether that is a 404 is the
    caller's decision. Never writes.
    """
    normalized = sanitize_slug(slug)
    if not normalized:
        return None

    temple = await TempleRepository(session).get_by_slug(normalized)
    if temple is None:
        return None

    today = today or local_today(temple.timezone)
    return ResolvedTemple(
        temple=temple,
        page=await PageRepository(session).get_for_temple(temple.temple_id),
        events=await EventRepository(session).list_upcoming(
            temple.temple_id, today, limit=UPCOMING_EVENT_LIMIT
        ),
        services=await TempleServiceRepository(session).list_active(temple.temple_id),
    )
