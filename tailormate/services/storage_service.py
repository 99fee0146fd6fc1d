"""Storage service for handling Supabase storage operations."""

from typing import Any, Dict, Optional

import httpx

from tailormate.core.config import settings
from tailormate.core.exceptions import ConfigurationError, UploadError
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)


class StorageService:
    """Service for writing intake documents to Supabase storage.

    Requests are made with the acting tailor's access token so that bucket
    policies apply to the caller, not to a service role.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.url = (url if url is not None else settings.supabase_url).rstrip("/")
        if not self.url:
            raise ConfigurationError("SUPABASE_URL is not configured")
        self.api_key = api_key if api_key is not None else settings.supabase_anon_key
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.base_api_url = f"{self.url}/storage/v1"

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "apikey": self.api_key,
        }

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str,
        access_token: str,
        upsert: bool = False,
    ) -> Dict[str, Any]:
        """Upload one object to Supabase storage.

        Args:
            bucket: Target bucket name.
            path: Target path within the bucket.
            content: Raw bytes of the document.
            content_type: Media type sent with the object.
            access_token: Bearer token of the acting tailor.
            upsert: Overwrite an existing object at the same path.

        Returns:
            Dict with the stored ``path``.

        Raises:
            UploadError: If the upload fails.
        """
        upload_url = f"{self.base_api_url}/object/{bucket}/{path}"
        headers = {
            **self._headers(access_token),
            "Content-Type": content_type or "application/octet-stream",
            "x-upsert": "true" if upsert else "false",
        }

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    upload_url,
                    headers=headers,
                    content=content,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            LOGGER.error(f"Error uploading file to Supabase: {str(e)}", exc_info=True)
            raise UploadError(f"Storage upload error: {str(e)}", original_error=e)

        if response.status_code != 200:
            LOGGER.error(
                f"Failed to upload file to Supabase: {response.text}",
                extra={"bucket": bucket, "path": path, "status_code": response.status_code},
            )
            raise UploadError(f"Upload failed: {response.text}")

        LOGGER.debug(f"Uploaded {path} to bucket {bucket}")
        return {"path": path}

    def get_public_url(self, bucket: str, path: str) -> str:
        """Public retrieval URL of an object; assumes the object exists."""
        return f"{self.base_api_url}/object/public/{bucket}/{path}"
