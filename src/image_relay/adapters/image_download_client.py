"""Download client for generated images."""

import logging
from dataclasses import dataclass

import httpx

from image_relay.domain.errors import DownloadError
from image_relay.services.generation import ImageDownloadClient

logger = logging.getLogger(__name__)


@dataclass
class HttpxImageDownloadClient(ImageDownloadClient):
    """Image download client using httpx."""

    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(cls, timeout: float = 30.0) -> "HttpxImageDownloadClient":
        """Create a download client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True), timeout=timeout)

    async def fetch(self, url: str) -> bytes:
        """Download the generated image bytes."""
        try:
            response = await self.http_client.get(url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Downloading generated image failed: %s", exc)
            raise DownloadError(f"Download failed: {exc}") from exc
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
