"""Tests for temple provisioning: create, delete and listing.

Covers:
- create_temple writes temple, admin membership and page together
- blank name / degenerate slug -> InvalidInputError, anonymous -> UnauthorizedError
- pre-checked and raced slug collisions both surface as SlugTakenError
- a failure mid-transaction leaves no partial rows
- delete_temple by a non-owner is indistinguishable from a missing temple
- listing cache is invalidated by create and delete
"""

import asyncio
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from helpers import seed_event, seed_service, seed_temple
from templecloud.db.models import EventRow, TempleMemberRow, TemplePageRow, TempleRow, TempleServiceRow
from templecloud.errors.exceptions import (
    InvalidInputError,
    NotFoundOrForbiddenError,
    SlugTakenError,
    UnauthorizedError,
)
from templecloud.repositories.page_repo import PageRepository
from templecloud.repositories.temple_repo import TempleRepository
from templecloud.services.listing_cache import TempleListingCache
from templecloud.services.provisioning import (
    DEFAULT_HOURS,
    TempleForm,
    create_temple,
    delete_temple,
    list_user_temples,
)


async def _count(session: AsyncSession, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


# ---------------------------------------------------------------------------
# create_temple
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_temple_provisions_all_three_rows(db_session):
    form = TempleForm(name="  龍山寺  ", slug="Long Shan!!", intro=" 艋舺 ", phone="   ")
    temple = await create_temple(db_session, "user_1", form)

    assert temple.slug == "long-shan"
    assert temple.name == "龍山寺"
    assert temple.intro == "艋舺"
    assert temple.phone is None
    assert temple.hours == DEFAULT_HOURS
    assert temple.created_by == "user_1"
    assert temple.timezone == "Asia/Taipei"
    assert temple.gallery_photos == []

    members = (await db_session.execute(select(TempleMemberRow))).scalars().all()
    assert [(m.temple_id, m.auth_user_id, m.role) for m in members] == [(temple.temple_id, "user_1", "admin")]

    page = (await db_session.execute(select(TemplePageRow))).scalar_one()
    assert page.temple_id == temple.temple_id
    assert page.theme == "default"
    assert page.blocks == []


@pytest.mark.asyncio
async def test_create_temple_requires_principal(db_session):
    with pytest.raises(UnauthorizedError) as exc_info:
        await create_temple(db_session, None, TempleForm(name="天壇", slug="tian-tan"))
    assert exc_info.value.message_key == "auth.required_create"
    assert await _count(db_session, TempleRow) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("name, slug", [("", "tian-tan"), ("   ", "tian-tan"), ("天壇", "!!!"), ("天壇", "天壇"), (None, None)])
async def test_create_temple_rejects_blank_name_or_slug(db_session, name, slug):
    with pytest.raises(InvalidInputError) as exc_info:
        await create_temple(db_session, "user_1", TempleForm(name=name, slug=slug))
    assert exc_info.value.status_code == 400
    assert exc_info.value.message_key == "temple.name_and_slug_required"
    assert await _count(db_session, TempleRow) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("slug", ["a" * 64, "x" * 100, "Temple " * 20])
async def test_create_temple_rejects_slug_longer_than_a_dns_label(db_session, slug):
    with pytest.raises(InvalidInputError) as exc_info:
        await create_temple(db_session, "user_1", TempleForm(name="天壇", slug=slug))
    assert exc_info.value.message_key == "temple.slug_too_long"
    assert exc_info.value.params == {"max_length": 63}
    assert await _count(db_session, TempleRow) == 0


@pytest.mark.asyncio
async def test_create_temple_accepts_slug_of_exactly_63_characters(db_session):
    # Trailing junk is stripped before the length is checked
    temple = await create_temple(db_session, "user_1", TempleForm(name="天壇", slug="b" * 63 + "!!!"))
    assert temple.slug == "b" * 63


@pytest.mark.asyncio
async def test_create_temple_rejects_taken_slug(db_session):
    await seed_temple(db_session, owner="user_1", slug="tian-tan")

    with pytest.raises(SlugTakenError) as exc_info:
        await create_temple(db_session, "user_2", TempleForm(name="Other", slug="  TIAN--tan "))
    assert exc_info.value.details == {"slug": "tian-tan"}
    assert await _count(db_session, TempleRow) == 1
    assert await _count(db_session, TempleMemberRow) == 1


@pytest.mark.asyncio
async def test_failure_mid_transaction_leaves_nothing_behind(db_session, monkeypatch):
    async def broken_create(self, **kwargs):
        raise RuntimeError("page insert failed")

    monkeypatch.setattr(PageRepository, "create", broken_create)

    with pytest.raises(RuntimeError):
        await create_temple(db_session, "user_1", TempleForm(name="天壇", slug="tian-tan"))

    assert await _count(db_session, TempleRow) == 0
    assert await _count(db_session, TempleMemberRow) == 0
    assert await _count(db_session, TemplePageRow) == 0


@pytest.mark.asyncio
async def test_slug_claimed_after_precheck_is_reported_as_taken(db_session, monkeypatch):
    """The unique constraint catches a competitor that slipped past the pre-check."""
    await seed_temple(db_session, owner="user_1", slug="mazu")

    original = TempleRepository.is_slug_taken
    calls = []

    async def stale_precheck(self, slug):
        calls.append(slug)
        if len(calls) == 1:
            return False
        return await original(self, slug)

    monkeypatch.setattr(TempleRepository, "is_slug_taken", stale_precheck)

    with pytest.raises(SlugTakenError):
        await create_temple(db_session, "user_2", TempleForm(name="媽祖廟", slug="mazu"))

    assert calls == ["mazu", "mazu"]
    assert await _count(db_session, TempleRow) == 1
    assert await _count(db_session, TempleMemberRow) == 1
    assert await _count(db_session, TemplePageRow) == 1


@pytest.mark.asyncio
async def test_concurrent_creates_with_same_slug(file_db_engine):
    factory = async_sessionmaker(file_db_engine, class_=AsyncSession, expire_on_commit=False)

    async def attempt(user_id: str):
        async with factory() as session:
            return await create_temple(session, user_id, TempleForm(name=f"{user_id} temple", slug="Tian Tan"))

    results = await asyncio.gather(attempt("user_a"), attempt("user_b"), return_exceptions=True)

    created = [r for r in results if isinstance(r, TempleRow)]
    rejected = [r for r in results if isinstance(r, SlugTakenError)]
    assert len(created) == 1
    assert len(rejected) == 1

    async with factory() as session:
        assert await _count(session, TempleRow) == 1
        member = (await session.execute(select(TempleMemberRow))).scalar_one()
        assert member.auth_user_id == created[0].created_by
        assert await _count(session, TemplePageRow) == 1


@pytest.mark.asyncio
async def test_create_temple_invalidates_listing_cache(db_session, redis):
    cache = TempleListingCache(redis)
    await cache.set("user_1", [])

    await create_temple(db_session, "user_1", TempleForm(name="天壇", slug="tian-tan"), cache)

    assert TempleListingCache.key("user_1") in redis.deleted
    assert await cache.get("user_1") is None


# ---------------------------------------------------------------------------
# delete_temple
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_temple_by_owner_cascades(db_session, redis):
    temple = await seed_temple(db_session, owner="user_1")
    await seed_event(db_session, temple.temple_id, "法會", date(2030, 1, 1))
    await seed_service(db_session, temple.temple_id, "光明燈", 1)

    await delete_temple(db_session, "user_1", temple.temple_id, TempleListingCache(redis))

    for model in (TempleRow, TempleMemberRow, TemplePageRow, EventRow, TempleServiceRow):
        assert await _count(db_session, model) == 0
    assert TempleListingCache.key("user_1") in redis.deleted


@pytest.mark.asyncio
async def test_delete_temple_by_non_owner_looks_like_missing(db_session):
    temple = await seed_temple(db_session, owner="user_1")

    with pytest.raises(NotFoundOrForbiddenError) as foreign:
        await delete_temple(db_session, "user_2", temple.temple_id)
    with pytest.raises(NotFoundOrForbiddenError) as missing:
        await delete_temple(db_session, "user_2", "tpl_does_not_exist")

    assert foreign.value.status_code == missing.value.status_code == 404
    assert foreign.value.message_key == missing.value.message_key
    assert await _count(db_session, TempleRow) == 1


@pytest.mark.asyncio
async def test_delete_temple_requires_principal_and_id(db_session):
    with pytest.raises(UnauthorizedError) as exc_info:
        await delete_temple(db_session, None, "tpl_x")
    assert exc_info.value.message_key == "auth.required_delete"

    with pytest.raises(InvalidInputError):
        await delete_temple(db_session, "user_1", "  ")


# ---------------------------------------------------------------------------
# list_user_temples
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_user_temples_only_returns_own(db_session, redis):
    await seed_temple(db_session, owner="user_1", slug="one")
    await seed_temple(db_session, owner="user_2", slug="two")
    cache = TempleListingCache(redis)

    temples = await list_user_temples(db_session, "user_1", cache)

    assert [t["slug"] for t in temples] == ["one"]
    assert temples[0]["url"] == "http://one.localhost:3000"
    # Second read is served from the cache
    assert await cache.get("user_1") == temples
