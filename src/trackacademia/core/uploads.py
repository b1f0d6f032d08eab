"""Book cover uploads.

The upload transport is an external image host; only the returned public
URL is ever stored on a Book. Files are checked against the configured size
ceiling and MIME whitelist before any network call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx
import structlog

from trackacademia.config.app_config import UploadConfig
from trackacademia.errors import UploadError

logger = structlog.get_logger(__name__)

CLOUDINARY_API = "https://api.cloudinary.com/v1_1"


def validate_cover(content_type: str | None, size: int, config: UploadConfig) -> None:
    """Reject files that are empty, too large or not an allowed image type.

    Raises:
        UploadError: With ``rejected=True``
    """
    if size <= 0:
        raise UploadError("Invalid file provided for upload", rejected=True)
    if size > config.max_bytes:
        limit_mb = config.max_bytes // (1024 * 1024)
        raise UploadError(f"File size exceeds {limit_mb}MB limit", rejected=True)
    if content_type not in config.allowed_types:
        raise UploadError(
            "Only JPEG, PNG, GIF, or WebP images are allowed", rejected=True
        )


class CoverUploader(ABC):
    """Abstract base class for image hosts."""

    @abstractmethod
    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        """Upload an image and return its public URL."""

    async def close(self) -> None:
        """Release uploader resources."""


class CloudinaryUploader(CoverUploader):
    """Unsigned uploads to Cloudinary using an upload preset."""

    def __init__(
        self,
        config: UploadConfig,
        client: httpx.AsyncClient | None = None,
    ):
        if not config.cloud_name or not config.upload_preset:
            raise ValueError("Cloudinary needs cloud_name and upload_preset")
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout)

    async def upload(self, filename: str, content: bytes, content_type: str) -> str:
        url = f"{CLOUDINARY_API}/{self._config.cloud_name}/image/upload"
        logger.info("uploads.started", filename=filename, size=len(content))

        try:
            response = await self._client.post(
                url,
                data={
                    "upload_preset": self._config.upload_preset,
                    "folder": self._config.folder,
                },
                files={"file": (filename, content, content_type)},
            )
        except httpx.TransportError as e:
            logger.error("uploads.unreachable", filename=filename, error=str(e))
            raise UploadError(f"Failed to upload image: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error or "error" in data:
            message = (data.get("error") or {}).get("message", "Unknown upload error")
            logger.error(
                "uploads.failed",
                filename=filename,
                status=response.status_code,
                error=message,
            )
            raise UploadError(f"Failed to upload image: {message}")

        secure_url = data.get("secure_url")
        if not secure_url:
            raise UploadError("Failed to upload image: no URL returned")

        logger.info("uploads.completed", filename=filename, url=secure_url)
        return secure_url

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


async def upload_cover(
    uploader: CoverUploader,
    config: UploadConfig,
    filename: str,
    content: bytes,
    content_type: str | None,
) -> str:
    """Validate then upload a cover image.

    Returns:
        Public URL of the uploaded image

    Raises:
        UploadError: File rejected (``rejected=True``) or transport failure
    """
    validate_cover(content_type, len(content), config)
    return await uploader.upload(filename, content, content_type)
