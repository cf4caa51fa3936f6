# Test fixtures and configuration
import io
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tryon_studio.models import CapturedImage  # noqa: E402


def _encode(color: str, fmt: str, size=(4, 4)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    """Small valid PNG image bytes."""
    return _encode("red", "PNG")


@pytest.fixture
def jpeg_bytes():
    """Small valid JPEG image bytes."""
    return _encode("blue", "JPEG")


@pytest.fixture
def result_png_bytes():
    """A different PNG, standing in for a generated image."""
    return _encode("green", "PNG", size=(8, 8))


@pytest.fixture
def subject_image(jpeg_bytes):
    return CapturedImage(data=jpeg_bytes, media_type="image/jpeg")


@pytest.fixture
def outfit_image(png_bytes):
    return CapturedImage(data=png_bytes, media_type="image/png")


@pytest.fixture
def generated_image(result_png_bytes):
    return CapturedImage(data=result_png_bytes, media_type="image/png")


@pytest.fixture
def mock_generator(generated_image):
    """Generation client stand-in that succeeds with `generated_image`."""
    generator = MagicMock()
    generator.generate_tryon = AsyncMock(return_value=generated_image)
    generator.check_connection = AsyncMock(return_value=True)
    generator.close = AsyncMock()
    return generator
