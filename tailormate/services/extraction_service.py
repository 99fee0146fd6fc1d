"""Client for the document extraction edge function."""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from tailormate.core.config import settings
from tailormate.core.exceptions import ConfigurationError, ExtractionServiceError
from tailormate.schemas.intake import ExtractionResult
from tailormate.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ExtractionService:
    """Sends stored document paths to the extraction endpoint.

    The endpoint answers ``{"results": [{fileName, rawText, structured}, ...]}``
    with one entry per submitted path, in submission order.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.endpoint = endpoint if endpoint is not None else settings.extraction_url
        if not self.endpoint.startswith(("http://", "https://")):
            raise ConfigurationError(f"Extraction endpoint is not an absolute URL: {self.endpoint!r}")
        self.api_key = api_key if api_key is not None else settings.supabase_anon_key
        self.timeout = timeout if timeout is not None else settings.http_timeout

    async def extract(self, paths: List[str], access_token: str) -> List[ExtractionResult]:
        """Run extraction over already-uploaded documents.

        Args:
            paths: Storage paths, in document order.
            access_token: Bearer token of the acting tailor.

        Returns:
            Parsed results. May be shorter than ``paths`` when the service
            returns fewer entries.

        Raises:
            ExtractionServiceError: On a non-2xx answer (message is the raw
                body) or when the service cannot be reached.
        """
        headers = {
            "Authorization": f"Bearer {access_token}",
            "apikey": self.api_key,
            "Content-Type": "application/json",
        }

        LOGGER.info(f"Requesting extraction for {len(paths)} document(s)")
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.endpoint,
                    headers=headers,
                    json={"files": list(paths)},
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            LOGGER.error(f"Extraction request failed: {str(e)}", exc_info=True)
            raise ExtractionServiceError(f"Extraction request failed: {str(e)}", original_error=e)

        if not response.is_success:
            LOGGER.error(
                f"Extraction service returned {response.status_code}",
                extra={"status_code": response.status_code},
            )
            raise ExtractionServiceError(response.text, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise ExtractionServiceError(
                f"Extraction service returned invalid JSON: {response.text}",
                status_code=response.status_code,
                original_error=e,
            )

        results = self._parse_results(payload)
        if len(results) < len(paths):
            LOGGER.warning(f"Extraction returned {len(results)} result(s) for {len(paths)} document(s)")
        return results

    @staticmethod
    def _parse_results(payload: Any) -> List[ExtractionResult]:
        entries: List[Dict[str, Any]] = []
        if isinstance(payload, dict):
            entries = payload.get("results") or []

        results: List[ExtractionResult] = []
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            try:
                results.append(ExtractionResult.model_validate(entry))
            except PydanticValidationError as e:
                LOGGER.warning(f"Dropping malformed extraction entry: {e}")
        return results
