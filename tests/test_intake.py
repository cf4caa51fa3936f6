"""Unit tests for image intake."""

import base64
import io

import pytest
from starlette.datastructures import Headers, UploadFile

from tryon_studio.errors import IntakeError
from tryon_studio.services.intake import capture_image, capture_upload, decode_data_url


class TestCaptureImage:
    """Tests for validating raw upload bytes."""

    def test_png_is_captured(self, png_bytes):
        image = capture_image(png_bytes, media_type="image/png", filename="outfit.png")

        assert image.data == png_bytes
        assert image.media_type == "image/png"

    def test_detected_type_wins_over_declared(self, jpeg_bytes):
        """A JPEG mislabelled by the browser keeps its real type."""
        image = capture_image(jpeg_bytes, media_type="image/png")

        assert image.media_type == "image/jpeg"

    def test_empty_file_rejected(self):
        with pytest.raises(IntakeError, match="empty"):
            capture_image(b"", media_type="image/png")

    def test_oversize_file_rejected(self, png_bytes):
        with pytest.raises(IntakeError, match="too large"):
            capture_image(png_bytes, media_type="image/png", max_bytes=len(png_bytes) - 1)

    def test_non_image_rejected(self):
        with pytest.raises(IntakeError, match="could not be read as an image"):
            capture_image(b"%PDF-1.4 not an image", media_type="application/pdf")

    def test_truncated_image_rejected(self, png_bytes):
        with pytest.raises(IntakeError):
            capture_image(png_bytes[:20], media_type="image/png")


class TestCaptureUpload:
    """Tests for reading FastAPI uploads."""

    @pytest.mark.asyncio
    async def test_upload_is_read(self, png_bytes):
        upload = UploadFile(
            file=io.BytesIO(png_bytes),
            filename="me.png",
            headers=Headers({"content-type": "image/png"}),
        )

        image = await capture_upload(upload)

        assert image.data == png_bytes
        assert image.media_type == "image/png"

    @pytest.mark.asyncio
    async def test_oversize_upload_rejected(self, png_bytes):
        # Size is checked before decoding, so the padding never has to be a valid image
        upload = UploadFile(file=io.BytesIO(png_bytes + b"\0" * 8192), filename="me.png")

        with pytest.raises(IntakeError, match="too large") as excinfo:
            await capture_upload(upload, max_bytes=2048)

        assert "exceeds the limit of 2 KiB" in excinfo.value.message


class TestDecodeDataUrl:
    """Tests for base64 data URL decoding."""

    def test_data_url(self, png_bytes):
        data_url = f"data:image/png;base64,{base64.b64encode(png_bytes).decode()}"

        image = decode_data_url(data_url)

        assert image.data == png_bytes
        assert image.to_data_url() == data_url

    def test_raw_base64(self, jpeg_bytes):
        image = decode_data_url(base64.b64encode(jpeg_bytes).decode())

        assert image.media_type == "image/jpeg"

    def test_invalid_base64_rejected(self):
        with pytest.raises(IntakeError, match="base64"):
            decode_data_url("data:image/png;base64,not base64!!")

    def test_missing_comma_rejected(self):
        with pytest.raises(IntakeError, match="Malformed"):
            decode_data_url("data:image/png;base64")
