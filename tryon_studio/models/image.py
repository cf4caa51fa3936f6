"""Captured image model."""

import base64

from pydantic import BaseModel, ConfigDict, Field


class CapturedImage(BaseModel):
    """An uploaded or generated image held in memory with its media type."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    media_type: str = Field(description="e.g., 'image/png', 'image/jpeg'")

    @property
    def size(self) -> int:
        return len(self.data)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_url(self) -> str:
        """Encode as a data URL suitable for an <img> src."""
        return f"data:{self.media_type};base64,{self.to_base64()}"
