"""Temple event management (admin side).

Events are always addressed through their temple: an event id from another
temple is reported exactly like a missing one.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.db.models.event import EventRow
from templecloud.errors.exceptions import InvalidInputError, NotFoundOrForbiddenError
from templecloud.repositories.event_repo import EventRepository
from templecloud.services.id_generator import generate_id
from templecloud.services.permissions import MANAGER_ROLES, require_membership
from templecloud.services.provisioning import clean_text

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("description", "image_url", "event_time", "location")


def _event_fields(changes: dict) -> dict:
    fields: dict = {}
    for key, value in changes.items():
        if key == "title":
            title = clean_text(value)
            if not title:
                raise InvalidInputError("event.title_required")
            fields["title"] = title
        elif key == "event_date":
            if value is None:
                raise InvalidInputError("event.date_required")
            fields["event_date"] = value
        elif key == "is_active":
            if value is not None:
                fields["is_active"] = bool(value)
        elif key == "max_capacity":
            # 0 means no cap
            fields["max_capacity"] = value or None
        elif key == "registration_deadline":
            fields["registration_deadline"] = value
        elif key in TEXT_FIELDS:
            fields[key] = clean_text(value)
    return fields


async def list_events(session: AsyncSession, principal: str | None, temple_id: str) -> list[EventRow]:
    await require_membership(session, principal, temple_id, message_key="auth.no_permission_view")
    return await EventRepository(session).list_for_temple(temple_id)


async def create_event(session: AsyncSession, principal: str | None, temple_id: str, data: dict) -> EventRow:
    await require_membership(session, principal, temple_id, MANAGER_ROLES)
    if "title" not in data:
        raise InvalidInputError("event.title_required")
    if "event_date" not in data:
        raise InvalidInputError("event.date_required")

    fields = {"is_active": True, **_event_fields(data)}
    event = await EventRepository(session).create(
        event_id=generate_id("evt_"),
        temple_id=temple_id,
        **fields,
    )
    await session.commit()
    logger.info("Event created", extra={"temple_id": temple_id, "event_id": event.event_id, "user_id": principal})
    return event


async def _get_event(session: AsyncSession, temple_id: str, event_id: str) -> EventRow:
    event = await EventRepository(session).get_for_temple(temple_id, event_id)
    if event is None:
        raise NotFoundOrForbiddenError("event.not_found")
    return event


async def update_event(
    session: AsyncSession, principal: str | None, temple_id: str, event_id: str, changes: dict
) -> EventRow:
    await require_membership(session, principal, temple_id, MANAGER_ROLES)
    event = await _get_event(session, temple_id, event_id)

    fields = _event_fields(changes)
    if fields:
        await EventRepository(session).update(event, **fields)
        await session.commit()
    return event


async def delete_event(session: AsyncSession, principal: str | None, temple_id: str, event_id: str) -> None:
    await require_membership(session, principal, temple_id, MANAGER_ROLES)
    event = await _get_event(session, temple_id, event_id)

    await EventRepository(session).delete(event)
    await session.commit()
    logger.info("Event deleted", extra={"temple_id": temple_id, "event_id": event_id, "user_id": principal})
