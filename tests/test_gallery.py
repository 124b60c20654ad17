"""Gallery list updates under concurrent writers.

Covers:
- parallel appends keep every photo (as many writers as retry attempts)
- parallel appends cannot overshoot the limit
- the version column turns a stale write into StaleDataError
- remove_photo reports whether anything was removed
"""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from helpers import seed_temple
from templecloud.errors.exceptions import InvalidInputError, NotFoundOrForbiddenError, ServerError
from templecloud.repositories.temple_repo import TempleRepository
from templecloud.services import versioned
from templecloud.services.gallery import append_photo, remove_photo

BASE = "https://assets.test/temples"


@pytest.fixture
def file_factory(file_db_engine):
    return async_sessionmaker(file_db_engine, class_=AsyncSession, expire_on_commit=False)


async def _photos(factory, temple_id: str) -> list[str]:
    async with factory() as session:
        temple = await TempleRepository(session).get(temple_id)
        return list(temple.gallery_photos)


@pytest.mark.asyncio
async def test_append_and_remove(db_session):
    temple = await seed_temple(db_session)

    photos = await append_photo(db_session, temple.temple_id, f"{BASE}/a.jpg", max_photos=5)
    assert photos == [f"{BASE}/a.jpg"]

    remaining, removed = await remove_photo(db_session, temple.temple_id, f"{BASE}/missing.jpg")
    assert (remaining, removed) == ([f"{BASE}/a.jpg"], False)

    remaining, removed = await remove_photo(db_session, temple.temple_id, f"{BASE}/a.jpg")
    assert (remaining, removed) == ([], True)


@pytest.mark.asyncio
async def test_append_to_unknown_temple_looks_like_forbidden(db_session):
    with pytest.raises(NotFoundOrForbiddenError):
        await append_photo(db_session, "tpl_missing", f"{BASE}/a.jpg", max_photos=5)


@pytest.mark.asyncio
async def test_concurrent_appends_keep_every_photo(file_factory):
    async with file_factory() as session:
        temple = await seed_temple(session)

    async def attempt(name: str):
        async with file_factory() as session:
            return await append_photo(session, temple.temple_id, f"{BASE}/{name}.jpg", max_photos=10)

    results = await asyncio.gather(*(attempt(f"p{i}") for i in range(versioned.MAX_ATTEMPTS)))

    assert all(isinstance(r, list) for r in results)
    expected = [f"{BASE}/p{i}.jpg" for i in range(versioned.MAX_ATTEMPTS)]
    assert sorted(await _photos(file_factory, temple.temple_id)) == expected


@pytest.mark.asyncio
async def test_concurrent_appends_respect_the_limit(file_factory):
    async with file_factory() as session:
        temple = await seed_temple(session)
        await append_photo(session, temple.temple_id, f"{BASE}/first.jpg", max_photos=2)

    async def attempt(name: str):
        async with file_factory() as session:
            return await append_photo(session, temple.temple_id, f"{BASE}/{name}.jpg", max_photos=2)

    results = await asyncio.gather(attempt("a"), attempt("b"), return_exceptions=True)

    accepted = [r for r in results if isinstance(r, list)]
    rejected = [r for r in results if isinstance(r, InvalidInputError)]
    assert len(accepted) == 1
    assert len(rejected) == 1
    assert rejected[0].message_key == "upload.gallery_limit"
    assert len(await _photos(file_factory, temple.temple_id)) == 2


@pytest.mark.asyncio
async def test_stale_copy_cannot_overwrite_a_newer_commit(file_factory):
    async with file_factory() as session:
        temple = await seed_temple(session)

    async with file_factory() as first, file_factory() as second:
        stale = await TempleRepository(first).get(temple.temple_id)
        fresh = await TempleRepository(second).get(temple.temple_id)

        await TempleRepository(second).update(fresh, gallery_photos=[f"{BASE}/b.jpg"])
        await second.commit()

        with pytest.raises(StaleDataError):
            await TempleRepository(first).update(stale, gallery_photos=[f"{BASE}/a.jpg"])
        await first.rollback()

    assert await _photos(file_factory, temple.temple_id) == [f"{BASE}/b.jpg"]


@pytest.mark.asyncio
async def test_persistent_conflict_gives_up(db_session, monkeypatch):
    temple = await seed_temple(db_session)
    calls = []

    async def always_stale(self, row, **kwargs):
        calls.append(kwargs)
        raise StaleDataError("conflict")

    monkeypatch.setattr(TempleRepository, "update", always_stale)

    with pytest.raises(ServerError) as exc_info:
        await append_photo(db_session, temple.temple_id, f"{BASE}/a.jpg", max_photos=5)

    assert exc_info.value.message_key == "server.conflict"
    assert len(calls) == versioned.MAX_ATTEMPTS
