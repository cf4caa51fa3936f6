"""Image intake: turn uploaded bytes into a CapturedImage."""

import base64
import binascii
import io
import logging

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from ..errors import IntakeError
from ..models import CapturedImage

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 10 * 1024 * 1024


def _detect_media_type(data: bytes) -> str | None:
    """Return the MIME type Pillow detects, or None if it has no mapping.

    Raises IntakeError if the payload is not an image at all.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise IntakeError("The selected file could not be read as an image.") from e

    return Image.MIME.get(fmt) if fmt else None


def capture_image(
    data: bytes,
    media_type: str | None = None,
    filename: str | None = None,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> CapturedImage:
    """Validate raw upload bytes and wrap them as a CapturedImage.

    Args:
        data: Raw file contents
        media_type: Media type declared by the browser, if any
        filename: Original filename, used only for log messages
        max_bytes: Upload size limit

    Returns:
        CapturedImage with the detected media type (falls back to the declared one)
    """
    label = filename or "upload"

    if not data:
        logger.info("Rejected %s: empty file", label)
        raise IntakeError("The selected file is empty.")

    if len(data) > max_bytes:
        logger.info("Rejected %s: %d bytes exceeds limit of %d", label, len(data), max_bytes)
        raise IntakeError(f"The selected file is too large; it exceeds the limit of {max_bytes // 1024} KiB.")

    try:
        detected = _detect_media_type(data)
    except IntakeError:
        logger.info("Rejected %s: not an image (declared %s)", label, media_type)
        raise

    resolved = detected
    if resolved is None:
        if media_type and media_type.startswith("image/"):
            resolved = media_type
        else:
            raise IntakeError("The selected file is not a supported image type.")

    logger.info("Captured %s: %s, %d bytes", label, resolved, len(data))
    return CapturedImage(data=data, media_type=resolved)


async def capture_upload(upload: UploadFile, max_bytes: int = DEFAULT_MAX_BYTES) -> CapturedImage:
    """Read a FastAPI upload and capture it."""
    try:
        # Read one byte past the limit so oversize files are detected without reading them fully
        data = await upload.read(max_bytes + 1)
    except OSError as e:
        raise IntakeError(f"The selected file could not be read: {e}") from e
    finally:
        await upload.close()

    return capture_image(
        data,
        media_type=upload.content_type,
        filename=upload.filename,
        max_bytes=max_bytes,
    )


def decode_data_url(value: str, max_bytes: int = DEFAULT_MAX_BYTES) -> CapturedImage:
    """Decode a base64 data URL (or bare base64) and capture it."""
    declared = None
    encoded = value
    if value.startswith("data:"):
        # Remove data URL prefix (e.g., "data:image/png;base64,")
        try:
            header, encoded = value.split(",", 1)
        except ValueError as e:
            raise IntakeError("Malformed data URL.") from e
        declared = header[len("data:"):].split(";", 1)[0] or None

    try:
        raw_bytes = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise IntakeError("Image data is not valid base64.") from e

    return capture_image(raw_bytes, media_type=declared, max_bytes=max_bytes)
