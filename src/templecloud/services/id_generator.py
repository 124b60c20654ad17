"""Prefixed ID generation utility."""

import secrets
import string
import time
import uuid

_BASE36 = string.digits + string.ascii_lowercase


def generate_id(prefix: str) -> str:
    """Generate a prefixed unique ID.

    Args:
        prefix: The prefix (e.g., "tpl_", "mem_", "evt_").

    Returns:
        A string like "tpl_a1b2c3d4e5f6a7b8".
    """
    short_uuid = uuid.uuid4().hex[:16]
    return f"{prefix}{short_uuid}"


def random_base36(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def timestamp_ms() -> int:
    return int(time.time() * 1000)
