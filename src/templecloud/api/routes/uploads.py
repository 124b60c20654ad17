"""Image upload routes (multipart).

Success bodies use the camelCase keys the admin UI already consumes:
``{"success": true, "logoUrl": ..., "faviconUrl": ...}``.
"""

from fastapi import APIRouter, File, Form, Request, UploadFile

from templecloud.api.middleware.rate_limit import WRITE_LIMIT, limiter
from templecloud.config import settings
from templecloud.dependencies import DBSession, Principal, Uploads
from templecloud.errors.exceptions import (
    ImageValidationError,
    InvalidInputError,
    NotFoundOrForbiddenError,
    UnauthorizedError,
)
from templecloud.repositories.temple_repo import TempleRepository
from templecloud.services.gallery import append_photo, limit_error, remove_photo
from templecloud.services.permissions import MANAGER_ROLES, require_membership
from templecloud.services.uploads import UploadedFile, is_temporary_id, resolve_upload_id

router = APIRouter(prefix="/upload", tags=["Uploads"])


async def _read(file: UploadFile | None) -> UploadedFile:
    if file is None or not file.filename:
        raise ImageValidationError("upload.no_file")
    # One byte past the ceiling is enough to reject oversize files
    data = await file.read(settings.upload_max_bytes + 1)
    return UploadedFile(filename=file.filename, content_type=file.content_type, data=data)


@router.post("/logo")
@limiter.limit(WRITE_LIMIT)
async def upload_logo(
    request: Request,
    db: DBSession,
    principal: Principal,
    uploads: Uploads,
    file: UploadFile | None = File(None),
    templeId: str | None = Form(None),
    oldLogoUrl: str | None = Form(None),
    oldFaviconUrl: str | None = Form(None),
) -> dict:
    if not principal:
        raise UnauthorizedError()
    upload = await _read(file)
    upload_id = resolve_upload_id(templeId)
    if not is_temporary_id(templeId):
        await require_membership(db, principal, upload_id, MANAGER_ROLES)

    result = await uploads.upload_logo(upload_id, upload, oldLogoUrl, oldFaviconUrl)
    body = {"success": True, "logoUrl": result.logo_url}
    if result.favicon_url:
        body["faviconUrl"] = result.favicon_url
    return body


@router.post("/cover")
@limiter.limit(WRITE_LIMIT)
async def upload_cover(
    request: Request,
    db: DBSession,
    principal: Principal,
    uploads: Uploads,
    file: UploadFile | None = File(None),
    templeId: str | None = Form(None),
    oldCoverUrl: str | None = Form(None),
) -> dict:
    if not principal:
        raise UnauthorizedError()
    upload = await _read(file)
    upload_id = resolve_upload_id(templeId)
    if not is_temporary_id(templeId):
        await require_membership(db, principal, upload_id, MANAGER_ROLES)

    cover_url = await uploads.upload_cover(upload_id, upload, oldCoverUrl)
    return {"success": True, "coverUrl": cover_url}


@router.post("/gallery")
@limiter.limit(WRITE_LIMIT)
async def upload_gallery_photo(
    request: Request,
    db: DBSession,
    principal: Principal,
    uploads: Uploads,
    file: UploadFile | None = File(None),
    templeId: str | None = Form(None),
) -> dict:
    if not principal:
        raise UnauthorizedError()
    if file is None or not templeId:
        raise InvalidInputError("upload.gallery_temple_required")
    await require_membership(db, principal, templeId, MANAGER_ROLES)

    temple = await TempleRepository(db).get(templeId)
    if temple is None:
        raise NotFoundOrForbiddenError("auth.no_permission_temple")
    # Fast rejection before spending an upload; append_photo re-checks under lock
    if len(temple.gallery_photos or []) >= settings.gallery_max_photos:
        raise limit_error(settings.gallery_max_photos)

    photo_url = await uploads.upload_gallery_photo(templeId, await _read(file))
    try:
        photos = await append_photo(db, templeId, photo_url, settings.gallery_max_photos)
    except Exception:
        await uploads.discard(photo_url)
        raise
    return {"success": True, "photoUrl": photo_url, "totalPhotos": len(photos)}


@router.delete("/gallery")
@limiter.limit(WRITE_LIMIT)
async def delete_gallery_photo(
    request: Request,
    db: DBSession,
    principal: Principal,
    uploads: Uploads,
    templeId: str | None = None,
    photoUrl: str | None = None,
) -> dict:
    if not principal:
        raise UnauthorizedError()
    if not templeId or not photoUrl:
        raise InvalidInputError("upload.photo_url_required")
    await require_membership(db, principal, templeId, MANAGER_ROLES)

    remaining, removed = await remove_photo(db, templeId, photoUrl)
    if removed:
        await uploads.discard(photoUrl)
    return {"success": True, "totalPhotos": len(remaining)}
