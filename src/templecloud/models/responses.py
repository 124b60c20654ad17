"""Pydantic response bodies shared by the HTTP routes."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ErrorBody(BaseModel):
    """Error envelope: ``{"success": false, "error": <localized text>, ...}``.

    Error details (for example the attempted ``slug``) are merged into the top
    level so form clients can re-populate fields.
    """

    model_config = ConfigDict(extra="allow")

    success: bool = False
    error: str
    code: str
    trace_id: str | None = None


class PageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    theme: str
    blocks: list = []


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: str
    title: str
    description: str | None = None
    image_url: str | None = None
    event_date: date
    event_time: str | None = None
    location: str | None = None
    max_capacity: int | None = None


class ServiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    service_id: str
    icon: str | None = None
    name: str
    description: str | None = None
    price: int
    unit: str
    is_popular: bool = False
    sort_order: int = 0


class TempleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    temple_id: str
    slug: str
    name: str
    intro: str | None = None
    full_description: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    hours: str | None = None
    avatar_emoji: str | None = None
    logo_url: str | None = None
    favicon_url: str | None = None
    cover_image_url: str | None = None
    facebook_url: str | None = None
    line_id: str | None = None
    instagram_url: str | None = None
    gallery_photos: list[str] = []
    timezone: str


class PublicTempleOut(BaseModel):
    temple: TempleOut
    page: PageOut | None = None
    events: list[EventOut]
    services: list[ServiceOut]


# --- Admin views ---


class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_id: str
    auth_user_id: str
    role: str


class TempleSettingsOut(TempleOut):
    is_active: bool
    created_by: str


class AdminEventOut(EventOut):
    registration_deadline: datetime | None = None
    is_active: bool


class TempleDetailOut(BaseModel):
    """Everything the temple admin dashboard opens with."""

    temple: TempleSettingsOut
    members: list[MemberOut]
    services: list[ServiceOut]
    events: list[AdminEventOut]


# The online prayer form reads these with camelCase keys


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PrayerServiceOut(CamelModel):
    service_code: str
    is_enabled: bool = False
    custom_price: int | None = None
    max_quantity: int | None = None
    annual_limit: int | None = None
    current_count: int = 0


class DonationSettingsOut(CamelModel):
    is_enabled: bool = False
    min_amount: int = 100
    suggested_amounts: list[int] = [100, 300, 500, 1000, 3000, 5000]
    # Custom amounts are always accepted
    allow_custom_amount: bool = True
    allow_anonymous: bool = True
    custom_message: str | None = None


class PrayerSettingsOut(CamelModel):
    services: list[PrayerServiceOut]
    donation: DonationSettingsOut
