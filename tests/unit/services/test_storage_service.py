import pytest
import httpx
from unittest.mock import MagicMock, patch

from tailormate.core.exceptions import ConfigurationError, UploadError
from tailormate.services.storage_service import StorageService


@pytest.fixture
def storage_service():
    return StorageService(url="https://test.supabase.co/", api_key="anon-key")


@pytest.mark.asyncio
async def test_upload_success(storage_service):
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = MagicMock(status_code=200, json=lambda: {"Key": "customers/client-intake/a.jpg"})

        result = await storage_service.upload(
            "customers", "client-intake/a.jpg", b"jpeg-bytes", "image/jpeg", "user-token"
        )

        assert result == {"path": "client-intake/a.jpg"}
        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == "https://test.supabase.co/storage/v1/object/customers/client-intake/a.jpg"
        assert kwargs["content"] == b"jpeg-bytes"
        assert kwargs["headers"]["Authorization"] == "Bearer user-token"
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["headers"]["x-upsert"] == "false"
        assert kwargs["headers"]["Content-Type"] == "image/jpeg"


@pytest.mark.asyncio
async def test_upload_failure(storage_service):
    with patch("httpx.AsyncClient.post") as mock_post:
        mock_post.return_value = MagicMock(status_code=400, text="The resource already exists")

        with pytest.raises(UploadError, match="Upload failed: The resource already exists"):
            await storage_service.upload("customers", "a.jpg", b"x", "image/jpeg", "user-token")


@pytest.mark.asyncio
async def test_upload_transport_error(storage_service):
    with patch("httpx.AsyncClient.post", side_effect=httpx.ConnectError("connection refused")):
        with pytest.raises(UploadError, match="Storage upload error: connection refused") as exc_info:
            await storage_service.upload("customers", "a.jpg", b"x", "image/jpeg", "user-token")

    assert isinstance(exc_info.value.original_error, httpx.ConnectError)


def test_get_public_url(storage_service):
    url = storage_service.get_public_url("customers", "orders-intake/123-form.pdf")

    assert url == "https://test.supabase.co/storage/v1/object/public/customers/orders-intake/123-form.pdf"


def test_missing_supabase_url_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="SUPABASE_URL"):
        StorageService(url="", api_key="anon-key")
