"""Serve assets from the in-process store (local mode only)."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from templecloud.errors.exceptions import NotFoundOrForbiddenError
from templecloud.storage.memory import MemoryStorage

router = APIRouter(tags=["Assets"], include_in_schema=False)


@router.get("/assets/{key:path}")
async def get_local_asset(key: str, request: Request) -> Response:
    storage = request.app.state.storage
    if not isinstance(storage, MemoryStorage) or key not in storage.objects:
        raise NotFoundOrForbiddenError("temple.not_found")
    data, content_type = storage.objects[key]
    return Response(content=data, media_type=content_type)
