"""Single-writer dispatcher that owns the application state."""

import logging
from typing import Protocol

from ..errors import GenerationError, InputError
from ..models import ApplicationState, CapturedImage, Phase, Slot
from .events import (
    Event,
    GenerationDiscarded,
    GenerationFailed,
    GenerationSucceeded,
    ImageUploaded,
    Reset,
    TryOnRejected,
    TryOnStarted,
)
from .reducer import MISSING_IMAGES_MESSAGE, reduce

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class TryOnGenerator(Protocol):
    async def generate_tryon(self, subject: CapturedImage, outfit: CapturedImage) -> CapturedImage: ...


class TryOnSession:
    """Holds the ApplicationState for one page session and applies events to it.

    Every state change happens synchronously between awaits, so concurrent
    handlers on the same event loop never observe a half-applied update.
    """

    def __init__(self, generator: TryOnGenerator):
        self.generator = generator
        self._state = ApplicationState()
        self._attempt = 0  # bumped on reset; outcomes of older attempts are dropped

    @property
    def state(self) -> ApplicationState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def can_try_on(self) -> bool:
        return self._state.can_try_on

    def dispatch(self, event: Event) -> ApplicationState:
        before = self._state.phase
        self._state = reduce(self._state, event)
        logger.debug("%s: %s -> %s", type(event).__name__, before.value, self._state.phase.value)
        return self._state

    def upload(self, slot: Slot, image: CapturedImage) -> ApplicationState:
        """Store a newly captured image in its slot."""
        return self.dispatch(ImageUploaded(slot=slot, image=image))

    def reset(self) -> ApplicationState:
        """Start over. A pending request still runs, but its outcome is dropped."""
        self._attempt += 1
        return self.dispatch(Reset())

    async def try_on(self) -> ApplicationState:
        """Run one generation attempt and record its outcome.

        Raises:
            InputError: an image is missing (the message is also stored in
                state) or a request is already in flight (state untouched)
        """
        if not self._state.in_flight and not self._state.has_both_images:
            self.dispatch(TryOnRejected(message=MISSING_IMAGES_MESSAGE))
            raise InputError(MISSING_IMAGES_MESSAGE)

        self.dispatch(TryOnStarted())
        attempt = self._attempt
        subject, outfit = self._state.subject_image, self._state.outfit_image

        try:
            image = await self.generator.generate_tryon(subject, outfit)
        except GenerationError as e:
            logger.warning("Try-on failed: %s", e.message)
            outcome: Event = GenerationFailed(message=f"Failed to generate image. {e.message}")
        except Exception:
            logger.exception("Unexpected error during try-on")
            outcome = GenerationFailed(message=f"Failed to generate image. {UNKNOWN_ERROR_MESSAGE}")
        else:
            outcome = GenerationSucceeded(image=image)

        if attempt != self._attempt:
            logger.info("Dropping outcome of a try-on started before reset")
            return self.dispatch(GenerationDiscarded())
        return self.dispatch(outcome)
