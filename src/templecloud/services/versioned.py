"""Read-modify-write of a temple row under optimistic locking.

``TempleRow`` carries a version column, so two sessions that read the same
version cannot both commit a change: the loser's flush raises
``StaleDataError``. The loser rolls back, re-reads and re-applies its change
against the fresh row, which keeps list-valued columns such as
``gallery_photos`` from losing entries to a concurrent writer.
"""

import logging
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from templecloud.db.models.temple import TempleRow
from templecloud.errors.exceptions import NotFoundOrForbiddenError, ServerError
from templecloud.repositories.temple_repo import TempleRepository

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


async def update_temple(
    session: AsyncSession,
    temple_id: str,
    change: Callable[[TempleRow], dict],
    *,
    not_found_key: str = "auth.no_permission_temple",
) -> TempleRow:
    """Apply ``change`` to a freshly read temple and commit it.

    ``change`` receives the current row and returns the column values to
    write; it may raise to abort, in which case nothing is written. An empty
    dict skips the write.
    """
    repo = TempleRepository(session)
    for attempt in range(1, MAX_ATTEMPTS + 1):
        temple = await repo.get_for_update(temple_id)
        if temple is None:
            await session.rollback()
            raise NotFoundOrForbiddenError(not_found_key)

        try:
            fields = change(temple)
        except Exception:
            await session.rollback()
            raise
        if not fields:
            await session.commit()
            return temple

        try:
            await repo.update(temple, **fields)
            await session.commit()
            return temple
        except StaleDataError:
            await session.rollback()
            logger.info(
                "Temple changed concurrently; retrying",
                extra={"temple_id": temple_id, "attempt": attempt},
            )
        except Exception:
            await session.rollback()
            raise

    logger.error("Temple update kept conflicting", extra={"temple_id": temple_id, "attempts": MAX_ATTEMPTS})
    raise ServerError("server.conflict")
