"""Tests for cover upload validation and the Cloudinary uploader (F3)."""

import httpx
import pytest

from trackacademia.config.app_config import UploadConfig
from trackacademia.core.uploads import CloudinaryUploader, upload_cover, validate_cover
from trackacademia.errors import UploadError

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def upload_config():
    return UploadConfig(
        backend="cloudinary",
        cloud_name="demo",
        upload_preset="unsigned",
        max_bytes=1024 * 1024,
    )


def _uploader(config, handler) -> CloudinaryUploader:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CloudinaryUploader(config, client=client)


class TestValidateCover:
    """Tests for validate_cover."""

    def test_accepts_allowed_image(self, upload_config):
        validate_cover("image/png", len(PNG), upload_config)

    def test_empty_file(self, upload_config):
        with pytest.raises(UploadError) as exc_info:
            validate_cover("image/png", 0, upload_config)
        assert exc_info.value.rejected
        assert str(exc_info.value) == "Invalid file provided for upload"

    def test_too_large(self, upload_config):
        with pytest.raises(UploadError) as exc_info:
            validate_cover("image/png", 2 * 1024 * 1024, upload_config)
        assert exc_info.value.rejected
        assert str(exc_info.value) == "File size exceeds 1MB limit"

    @pytest.mark.parametrize("content_type", ["application/pdf", "image/svg+xml", None])
    def test_wrong_type(self, upload_config, content_type):
        with pytest.raises(UploadError) as exc_info:
            validate_cover(content_type, 10, upload_config)
        assert exc_info.value.rejected


class TestCloudinaryUploader:
    """Tests for CloudinaryUploader over a mock transport."""

    def test_requires_cloud_name_and_preset(self):
        with pytest.raises(ValueError):
            CloudinaryUploader(UploadConfig(backend="cloudinary"))

    @pytest.mark.asyncio
    async def test_upload_returns_secure_url(self, upload_config):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(
                200, json={"secure_url": "https://res.cloudinary.com/demo/cover.png"}
            )

        url = await upload_cover(
            _uploader(upload_config, handler),
            upload_config,
            "cover.png",
            PNG,
            "image/png",
        )

        assert url == "https://res.cloudinary.com/demo/cover.png"
        assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
        assert b"unsigned" in seen["body"]
        assert b"trackacademia_books" in seen["body"]

    @pytest.mark.asyncio
    async def test_rejected_file_never_sent(self, upload_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("should not be called")

        with pytest.raises(UploadError):
            await upload_cover(
                _uploader(upload_config, handler),
                upload_config,
                "notes.pdf",
                b"%PDF",
                "application/pdf",
            )

    @pytest.mark.asyncio
    async def test_host_error(self, upload_config):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"error": {"message": "Upload preset not found"}})

        with pytest.raises(UploadError) as exc_info:
            await _uploader(upload_config, handler).upload("c.png", PNG, "image/png")
        assert not exc_info.value.rejected
        assert "Upload preset not found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self, upload_config):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(UploadError) as exc_info:
            await _uploader(upload_config, handler).upload("c.png", PNG, "image/png")
        assert not exc_info.value.rejected

    @pytest.mark.asyncio
    async def test_missing_secure_url(self, upload_config):
        uploader = _uploader(upload_config, lambda request: httpx.Response(200, json={}))
        with pytest.raises(UploadError):
            await uploader.upload("c.png", PNG, "image/png")
