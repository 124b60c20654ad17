"""Object storage gateways."""

from templecloud.config import Settings
from templecloud.storage.base import ObjectStorage
from templecloud.storage.memory import MemoryStorage
from templecloud.storage.r2 import R2Storage


def create_storage(config: Settings) -> ObjectStorage:
    """R2 in deployed environments, an in-process store in local mode."""
    if config.local_mode:
        return MemoryStorage(f"http://{config.host}:{config.port}/assets")
    return R2Storage(config)


__all__ = ["ObjectStorage", "MemoryStorage", "R2Storage", "create_storage"]
