"""Gemini API client for virtual try-on image generation."""

import base64
import binascii
import logging
from typing import Any

import httpx

from ..config import GeminiConfig
from ..errors import GenerationError
from ..models import CapturedImage

logger = logging.getLogger(__name__)


TRYON_INSTRUCTION = """Combine the person from the first image and the outfit from the second image into one photorealistic image.

Keep the exact same person from the first image: preserve their face, hair, skin tone, body shape, pose, and the background exactly.
ONLY change their clothing to the outfit shown in the second image, matching its colors, pattern, fabric, and details.
Return a single image of the person wearing the outfit, with natural folds, shadows, and lighting consistent with the original photo."""


class GeminiClient:
    """Client for the Gemini generateContent endpoint."""

    def __init__(self, config: GeminiConfig, api_key: str | None = None):
        self.config = config
        self.api_key = api_key
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client

    @property
    def model_url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/models/{self.config.model}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key
        return headers

    async def check_connection(self) -> bool:
        """Verify the generation endpoint is reachable and knows the model."""
        try:
            response = await self.client.get(self.model_url, headers=self._headers())
            return response.status_code == 200
        except httpx.TransportError:
            return False

    def build_request(self, subject: CapturedImage, outfit: CapturedImage) -> dict[str, Any]:
        """Build the generateContent body: subject, outfit, then the instruction."""
        body: dict[str, Any] = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"inline_data": {"mime_type": subject.media_type, "data": subject.to_base64()}},
                        {"inline_data": {"mime_type": outfit.media_type, "data": outfit.to_base64()}},
                        {"text": TRYON_INSTRUCTION},
                    ],
                }
            ],
            "generationConfig": {
                "responseModalities": ["IMAGE", "TEXT"],
            },
        }
        if self.config.temperature is not None:
            body["generationConfig"]["temperature"] = self.config.temperature
        return body

    async def generate_tryon(self, subject: CapturedImage, outfit: CapturedImage) -> CapturedImage:
        """Generate a try-on image from a subject photo and an outfit photo.

        Args:
            subject: Photo of the person
            outfit: Photo of the clothing item or outfit

        Returns:
            The generated image

        Raises:
            GenerationError: endpoint unreachable, non-success status, or no image in the response
        """
        body = self.build_request(subject, outfit)
        logger.info(
            "Requesting try-on from %s (subject %d bytes, outfit %d bytes)",
            self.config.model, subject.size, outfit.size,
        )

        try:
            response = await self.client.post(
                f"{self.model_url}:generateContent",
                json=body,
                headers=self._headers(),
            )
        except httpx.TransportError as e:
            logger.warning("Generation endpoint unreachable: %s", e)
            raise GenerationError(f"The generation endpoint is unreachable ({e.__class__.__name__}).") from e

        if response.status_code < 200 or response.status_code >= 300:
            detail = self._error_detail(response)
            logger.warning("Generation endpoint returned %d: %s", response.status_code, detail)
            raise GenerationError(f"The generation endpoint returned {response.status_code}: {detail}")

        try:
            payload = response.json()
        except ValueError as e:
            raise GenerationError("The generation endpoint returned a malformed response.") from e
        if not isinstance(payload, dict):
            raise GenerationError("The generation endpoint returned a malformed response.")

        try:
            image = self._extract_image(payload)
        except (AttributeError, TypeError) as e:
            # A nested field had the wrong shape (e.g. a list where an object belongs)
            raise GenerationError("The generation endpoint returned a malformed response.") from e
        logger.info("Try-on generated: %s, %d bytes", image.media_type, image.size)
        return image

    def _error_detail(self, response: httpx.Response) -> str:
        """Pull the provider's error message out of a failed response."""
        message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
        return message or response.text[:500] or response.reason_phrase

    def _extract_image(self, payload: dict[str, Any]) -> CapturedImage:
        """Return the first inline image in a generateContent response."""
        feedback = payload.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            raise GenerationError(f"The request was blocked ({feedback['blockReason']}).")

        candidates = payload.get("candidates") or []
        texts: list[str] = []
        finish_reason = None

        for candidate in candidates:
            finish_reason = finish_reason or candidate.get("finishReason")
            parts = (candidate.get("content") or {}).get("parts") or []
            for part in parts:
                # REST responses use camelCase; accept snake_case too
                inline = part.get("inlineData") or part.get("inline_data")
                if inline and inline.get("data"):
                    try:
                        data = base64.b64decode(inline["data"], validate=True)
                    except (binascii.Error, ValueError) as e:
                        raise GenerationError("The generated image payload is not valid base64.") from e
                    media_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
                    return CapturedImage(data=data, media_type=media_type)
                if part.get("text"):
                    texts.append(part["text"].strip())

        reason = "The model did not return an image."
        if texts:
            reason += f" Model response: {' '.join(texts)[:300]}"
        elif finish_reason and finish_reason != "STOP":
            reason += f" Finish reason: {finish_reason}."
        logger.warning("No image in generation response (finish reason %s)", finish_reason)
        raise GenerationError(reason)

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
