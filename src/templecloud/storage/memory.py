"""In-process object store for local mode and tests."""

import logging

logger = logging.getLogger(__name__)


class MemoryStorage:
    def __init__(self, public_base: str = "http://localhost:8080/assets"):
        self.public_base = public_base.rstrip("/")
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.deleted: list[str] = []

    def public_url(self, key: str) -> str:
        return f"{self.public_base}/{key}"

    def key_from_url(self, url: str) -> str | None:
        prefix = f"{self.public_base}/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        self.objects[key] = (data, content_type)
        return self.public_url(key)

    async def delete_by_url(self, url: str) -> bool:
        key = self.key_from_url(url)
        if key is None or key not in self.objects:
            return False
        del self.objects[key]
        self.deleted.append(key)
        return True
