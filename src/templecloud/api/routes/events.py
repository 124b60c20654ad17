"""Temple event management routes."""

from datetime import date, datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from templecloud.api.middleware.rate_limit import WRITE_LIMIT, limiter
from templecloud.dependencies import DBSession, Locale, Principal
from templecloud.errors.messages import translate
from templecloud.models.responses import AdminEventOut
from templecloud.services.events import create_event, delete_event, list_events, update_event

router = APIRouter(tags=["Events"])


class EventCreate(BaseModel):
    title: str = Field(max_length=200)
    event_date: date
    description: str | None = None
    image_url: str | None = None
    event_time: str | None = Field(None, max_length=20)
    location: str | None = Field(None, max_length=200)
    max_capacity: int | None = Field(None, ge=0)
    registration_deadline: datetime | None = None
    is_active: bool = True


class EventUpdate(BaseModel):
    title: str | None = Field(None, max_length=200)
    event_date: date | None = None
    description: str | None = None
    image_url: str | None = None
    event_time: str | None = Field(None, max_length=20)
    location: str | None = Field(None, max_length=200)
    max_capacity: int | None = Field(None, ge=0)
    registration_deadline: datetime | None = None
    is_active: bool | None = None


def _event_body(event) -> dict:
    return {"success": True, "event": AdminEventOut.model_validate(event).model_dump(mode="json")}


@router.get("/temples/{temple_id}/events")
async def list_events_route(temple_id: str, db: DBSession, principal: Principal) -> dict:
    """All events of the temple, latest first (any member)."""
    events = await list_events(db, principal, temple_id)
    return {"success": True, "events": [AdminEventOut.model_validate(e).model_dump(mode="json") for e in events]}


@router.post("/temples/{temple_id}/events", status_code=201)
@limiter.limit(WRITE_LIMIT)
async def create_event_route(
    request: Request,
    temple_id: str,
    body: EventCreate,
    db: DBSession,
    principal: Principal,
) -> dict:
    event = await create_event(db, principal, temple_id, body.model_dump())
    return _event_body(event)


@router.patch("/temples/{temple_id}/events/{event_id}")
@limiter.limit(WRITE_LIMIT)
async def update_event_route(
    request: Request,
    temple_id: str,
    event_id: str,
    body: EventUpdate,
    db: DBSession,
    principal: Principal,
) -> dict:
    event = await update_event(db, principal, temple_id, event_id, body.model_dump(exclude_unset=True))
    return _event_body(event)


@router.delete("/temples/{temple_id}/events/{event_id}")
@limiter.limit(WRITE_LIMIT)
async def delete_event_route(
    request: Request,
    temple_id: str,
    event_id: str,
    db: DBSession,
    principal: Principal,
    locale: Locale,
) -> dict:
    await delete_event(db, principal, temple_id, event_id)
    return {"success": True, "message": translate("event.deleted", locale)}
