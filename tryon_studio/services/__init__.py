"""External services and image intake."""

from .gemini_client import GeminiClient
from .intake import capture_image, capture_upload, decode_data_url

__all__ = [
    "GeminiClient",
    "capture_image",
    "capture_upload",
    "decode_data_url",
]
