"""Object storage gateway contract."""

from typing import Protocol


class ObjectStorage(Protocol):
    """Narrow contract the upload service needs from a blob store."""

    def public_url(self, key: str) -> str: ...

    def key_from_url(self, url: str) -> str | None:
        """Object key for a URL this store issued, else ``None``."""
        ...

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        ...

    async def delete_by_url(self, url: str) -> bool:
        """Best-effort delete; ``False`` if the URL is foreign or the delete failed."""
        ...
