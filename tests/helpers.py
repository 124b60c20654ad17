"""Test helpers: tokens, images, seed rows and a Redis double."""

import io
from datetime import date

from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession

from templecloud.config import settings
from templecloud.db.models import EventRow, TempleMemberRow, TempleServiceRow
from templecloud.services.id_generator import generate_id
from templecloud.services.provisioning import TempleForm, create_temple


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the listing cache."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.deleted: list[str] = []

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value

    async def delete(self, key):
        self.deleted.append(key)
        self.store.pop(key, None)

    async def ping(self):
        return True

    async def close(self):
        pass


def make_token(sub: str, **claims) -> str:
    """Mint an access token the way the identity provider does."""
    from jose import jwt

    payload = {
        "sub": sub,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        **claims,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def auth_headers(sub: str) -> dict:
    return {"Authorization": f"Bearer {make_token(sub)}"}


def image_bytes(fmt: str = "PNG", size: tuple[int, int] = (64, 48), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


async def seed_temple(session: AsyncSession, owner: str = "user_owner", slug: str = "tian-tan", name: str = "天壇"):
    return await create_temple(session, owner, TempleForm(name=name, slug=slug))


async def seed_event(session: AsyncSession, temple_id: str, title: str, on: date, active: bool = True) -> EventRow:
    row = EventRow(
        event_id=generate_id("evt_"),
        temple_id=temple_id,
        title=title,
        event_date=on,
        is_active=active,
    )
    session.add(row)
    await session.commit()
    return row


async def seed_service(
    session: AsyncSession, temple_id: str, name: str, sort_order: int, active: bool = True
) -> TempleServiceRow:
    row = TempleServiceRow(
        service_id=generate_id("svc_"),
        temple_id=temple_id,
        name=name,
        price=500,
        unit="year",
        sort_order=sort_order,
        is_active=active,
    )
    session.add(row)
    await session.commit()
    return row


async def seed_member(session: AsyncSession, temple_id: str, user_id: str, role: str = "staff") -> TempleMemberRow:
    row = TempleMemberRow(member_id=generate_id("mem_"), temple_id=temple_id, auth_user_id=user_id, role=role)
    session.add(row)
    await session.commit()
    return row
