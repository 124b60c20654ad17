"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request

from templecloud.errors.messages import negotiate_locale
from templecloud.services.listing_cache import TempleListingCache
from templecloud.services.uploads import UploadService


async def get_db(request: Request) -> AsyncGenerator:
    """Yield a database session from the app's session factory."""
    session_factory = request.app.state.db_session_factory
    async with session_factory() as session:
        yield session


def get_principal(request: Request) -> str | None:
    """Authenticated user id, or ``None`` for anonymous or invalid credentials.

    Routes decide what an anonymous caller gets; mutating operations turn
    ``None`` into a 401.
    """
    user = getattr(request.state, "user", None) or {}
    if "_auth_error" in user:
        return None
    sub = user.get("sub")
    if not sub or sub == "anonymous":
        return None
    return sub


def get_listing_cache(request: Request) -> TempleListingCache:
    return TempleListingCache(getattr(request.app.state, "redis", None))


def get_upload_service(request: Request) -> UploadService:
    return UploadService(request.app.state.storage)


def get_locale(request: Request) -> str:
    return negotiate_locale(request.headers.get("accept-language"))


# Type aliases for dependency injection
DBSession = Annotated[object, Depends(get_db)]
Principal = Annotated[str | None, Depends(get_principal)]
ListingCache = Annotated[TempleListingCache, Depends(get_listing_cache)]
Uploads = Annotated[UploadService, Depends(get_upload_service)]
Locale = Annotated[str, Depends(get_locale)]
