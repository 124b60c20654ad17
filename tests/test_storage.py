"""R2 gateway against a stubbed S3 client, plus the storage factory."""

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.stub import ANY, Stubber

from templecloud.config import Settings
from templecloud.storage import MemoryStorage, R2Storage, create_storage
from templecloud.storage.r2 import CACHE_CONTROL


def _s3_client():
    return boto3.client(
        "s3",
        endpoint_url="https://acct.r2.cloudflarestorage.com",
        aws_access_key_id="test",
        aws_secret_access_key="test",
        region_name="auto",
    )


@pytest.fixture
def r2_config():
    return Settings(r2_account_id="acct", r2_public_bucket_url="https://cdn.temple.example/")


@pytest.fixture
def stubbed():
    client = _s3_client()
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


@pytest.mark.asyncio
async def test_put_uploads_with_cache_headers(r2_config, stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "put_object",
        {},
        {
            "Bucket": "temple-assets",
            "Key": "temples/tpl_1/logo-1.jpg",
            "Body": b"jpeg",
            "ContentType": "image/jpeg",
            "CacheControl": CACHE_CONTROL,
            "Metadata": {"uploadedAt": ANY},
        },
    )
    storage = R2Storage(r2_config, client=client)

    url = await storage.put("temples/tpl_1/logo-1.jpg", b"jpeg", "image/jpeg")

    assert url == "https://cdn.temple.example/temples/tpl_1/logo-1.jpg"


@pytest.mark.asyncio
async def test_put_propagates_client_errors(r2_config, stubbed):
    client, stubber = stubbed
    stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)
    storage = R2Storage(r2_config, client=client)

    with pytest.raises(ClientError):
        await storage.put("temples/tpl_1/logo-1.jpg", b"jpeg", "image/jpeg")


@pytest.mark.asyncio
async def test_delete_by_url_maps_url_to_key(r2_config, stubbed):
    client, stubber = stubbed
    stubber.add_response("delete_object", {}, {"Bucket": "temple-assets", "Key": "temples/tpl_1/cover-1.jpg"})
    storage = R2Storage(r2_config, client=client)

    assert await storage.delete_by_url("https://cdn.temple.example/temples/tpl_1/cover-1.jpg") is True


@pytest.mark.asyncio
async def test_delete_by_url_refuses_foreign_urls(r2_config, stubbed):
    client, _ = stubbed
    storage = R2Storage(r2_config, client=client)

    assert await storage.delete_by_url("https://elsewhere.example/temples/tpl_1/cover-1.jpg") is False
    assert await storage.delete_by_url("") is False


@pytest.mark.asyncio
async def test_delete_failure_returns_false(r2_config, stubbed):
    client, stubber = stubbed
    stubber.add_client_error("delete_object", service_error_code="InternalError", http_status_code=500)
    storage = R2Storage(r2_config, client=client)

    assert await storage.delete_by_url("https://cdn.temple.example/temples/tpl_1/cover-1.jpg") is False


def test_public_url_falls_back_to_r2_dev():
    storage = R2Storage(Settings(r2_account_id="acct"), client=_s3_client())
    assert storage.public_url("a/b.jpg") == "https://pub-acct.r2.dev/a/b.jpg"
    assert storage.key_from_url("https://pub-acct.r2.dev/a/b.jpg") == "a/b.jpg"


def test_missing_credentials_are_rejected():
    with pytest.raises(ValueError):
        R2Storage(Settings(r2_account_id="", r2_access_key_id="", r2_secret_access_key=""))


def test_create_storage_picks_backend():
    assert isinstance(create_storage(Settings(local_mode=True)), MemoryStorage)
    deployed = Settings(
        local_mode=False,
        r2_account_id="acct",
        r2_access_key_id="key",
        r2_secret_access_key="secret",
    )
    assert isinstance(create_storage(deployed), R2Storage)
