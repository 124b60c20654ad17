"""User-facing message catalogue.

Every error and success string shown to a temple administrator lives here,
keyed by a dotted identifier. ``zh-TW`` is the primary language of the
product; ``en`` is carried for API consumers that ask for it through
``Accept-Language``.
"""

from templecloud.config import settings

MESSAGES: dict[str, dict[str, str]] = {
    "zh-TW": {
        "auth.required": "請先登入",
        "auth.required_create": "請先登入以建立寺廟",
        "auth.required_delete": "請先登入以刪除寺廟",
        "auth.no_permission_temple": "您沒有權限管理這個廟宇",
        "auth.no_permission_view": "您沒有權限查看此寺廟",
        "temple.slug_too_long": "網址名稱不可超過 {max_length} 個字元",
        "temple.name_required": "請輸入寺廟名稱",
        "event.not_found": "找不到活動",
        "event.title_required": "請輸入活動名稱",
        "event.date_required": "請選擇活動日期",
        "event.deleted": "活動已刪除",
        "prayer.unknown_service": "不支援的祈福服務：{service_code}",
        "prayer.duplicate_service": "祈福服務重複設定：{service_code}",
        "temple.not_found": "找不到廟宇",
        "temple.not_found_or_forbidden": "找不到寺廟或您沒有權限",
        "temple.name_and_slug_required": "請輸入寺廟名稱和網址名稱",
        "temple.id_required": "需要寺廟ID",
        "temple.slug_taken": "此網址名稱已被使用，請選擇其他名稱",
        "temple.deleted": "寺廟已成功刪除",
        "upload.no_file": "請選擇圖片檔案",
        "upload.empty_file": "檔案內容為空，請重新選擇",
        "upload.invalid_format": "檔案格式不支援，請上傳 JPG、PNG 或 WebP",
        "upload.file_too_large": "檔案大小不可超過 {max_mb} MB",
        "upload.failed": "上傳失敗",
        "upload.logo_failed": "標誌上傳失敗",
        "upload.cover_failed": "封面圖片上傳失敗",
        "upload.gallery_failed": "照片上傳失敗",
        "upload.processing_failed": "處理圖片時發生錯誤",
        "upload.gallery_limit": "相簿已達上限 (最多 {max_count} 張照片)",
        "upload.gallery_temple_required": "請選擇圖片檔案並提供寺廟ID",
        "upload.photo_url_required": "請提供要刪除的照片網址",
        "validation.invalid_request": "請求格式錯誤",
        "server.generic": "伺服器錯誤，請稍後再試",
        "server.timeout": "請求超時，請稍後再試",
        "server.conflict": "資料正被其他人修改，請稍後再試",
    },
    "en": {
        "auth.required": "Please sign in first",
        "auth.required_create": "Please sign in to create a temple",
        "auth.required_delete": "Please sign in to delete a temple",
        "auth.no_permission_temple": "You do not have permission to manage this temple",
        "auth.no_permission_view": "You do not have permission to view this temple",
        "temple.slug_too_long": "The subdomain must be at most {max_length} characters",
        "temple.name_required": "Please enter a temple name",
        "event.not_found": "Event not found",
        "event.title_required": "Please enter an event title",
        "event.date_required": "Please choose an event date",
        "event.deleted": "Event deleted",
        "prayer.unknown_service": "Unsupported prayer service: {service_code}",
        "prayer.duplicate_service": "Prayer service configured twice: {service_code}",
        "temple.not_found": "Temple not found",
        "temple.not_found_or_forbidden": "Temple not found or you do not have permission",
        "temple.name_and_slug_required": "Please enter a temple name and a subdomain",
        "temple.id_required": "A temple ID is required",
        "temple.slug_taken": "This subdomain is already taken, please choose another",
        "temple.deleted": "Temple deleted",
        "upload.no_file": "Please choose an image file",
        "upload.empty_file": "The file is empty, please choose another",
        "upload.invalid_format": "Unsupported format, please upload JPG, PNG or WebP",
        "upload.file_too_large": "Files must be smaller than {max_mb} MB",
        "upload.failed": "Upload failed",
        "upload.logo_failed": "Logo upload failed",
        "upload.cover_failed": "Cover image upload failed",
        "upload.gallery_failed": "Photo upload failed",
        "upload.processing_failed": "The image could not be processed",
        "upload.gallery_limit": "The gallery is full (at most {max_count} photos)",
        "upload.gallery_temple_required": "Please choose an image file and provide a temple ID",
        "upload.photo_url_required": "Please provide the URL of the photo to delete",
        "validation.invalid_request": "Malformed request",
        "server.generic": "Server error, please try again later",
        "server.timeout": "The request timed out, please try again later",
        "server.conflict": "The data is being changed by someone else, please try again later",
    },
}

SUPPORTED_LOCALES = tuple(MESSAGES)


def negotiate_locale(accept_language: str | None) -> str:
    """Pick the best supported locale from an Accept-Language header."""
    if not accept_language:
        return settings.default_locale

    candidates: list[tuple[float, str]] = []
    for part in accept_language.split(","):
        piece = part.strip()
        if not piece:
            continue
        tag, _, params = piece.partition(";")
        quality = 1.0
        if params.strip().startswith("q="):
            try:
                quality = float(params.strip()[2:])
            except ValueError:
                quality = 0.0
        candidates.append((quality, tag.strip()))

    for _, tag in sorted(candidates, key=lambda c: c[0], reverse=True):
        lowered = tag.lower()
        for locale in SUPPORTED_LOCALES:
            if lowered == locale.lower() or lowered.split("-")[0] == locale.lower().split("-")[0]:
                return locale
    return settings.default_locale


def translate(key: str, locale: str | None = None, **params) -> str:
    """Render message ``key`` in ``locale``, falling back to the default locale."""
    catalogue = MESSAGES.get(locale or settings.default_locale) or MESSAGES[settings.default_locale]
    template = catalogue.get(key) or MESSAGES[settings.default_locale].get(key, key)
    return template.format(**params) if params else template
