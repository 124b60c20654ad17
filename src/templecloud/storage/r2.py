"""Cloudflare R2 storage through the S3-compatible API (boto3)."""

import asyncio
import logging
from datetime import datetime, timezone

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from templecloud.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000, immutable"


class R2Storage:
    def __init__(self, config: Settings | None = None, client=None):
        config = config or default_settings
        if client is None and not all(
            [config.r2_account_id, config.r2_access_key_id, config.r2_secret_access_key]
        ):
            raise ValueError("R2 configuration missing. Please check your environment variables.")

        self.account_id = config.r2_account_id
        self.bucket_name = config.r2_bucket_name
        self.public_base = (config.r2_public_bucket_url or "").rstrip("/") or None
        self.s3_client = client or boto3.client(
            "s3",
            endpoint_url=f"https://{config.r2_account_id}.r2.cloudflarestorage.com",
            aws_access_key_id=config.r2_access_key_id,
            aws_secret_access_key=config.r2_secret_access_key,
            region_name="auto",
        )
        if self.public_base is None:
            logger.warning("TEMPLE_R2_PUBLIC_BUCKET_URL not configured; falling back to r2.dev URLs")

    def public_url(self, key: str) -> str:
        if self.public_base:
            return f"{self.public_base}/{key}"
        return f"https://pub-{self.account_id}.r2.dev/{key}"

    def key_from_url(self, url: str) -> str | None:
        prefix = self.public_url("")
        if not url or not url.startswith(prefix):
            return None
        key = url[len(prefix):]
        return key or None

    def _put_object(self, key: str, data: bytes, content_type: str) -> None:
        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=data,
            ContentType=content_type,
            CacheControl=CACHE_CONTROL,
            Metadata={"uploadedAt": datetime.now(timezone.utc).isoformat()},
        )

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        """Upload and return the public URL; boto errors propagate."""
        try:
            await asyncio.to_thread(self._put_object, key, data, content_type)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to upload %s to R2: %s", key, exc)
            raise
        return self.public_url(key)

    async def delete_by_url(self, url: str) -> bool:
        key = self.key_from_url(url)
        if key is None:
            logger.warning("Refusing to delete foreign asset URL %s", url)
            return False
        try:
            await asyncio.to_thread(self.s3_client.delete_object, Bucket=self.bucket_name, Key=key)
            return True
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to delete %s from R2: %s", key, exc)
            return False
