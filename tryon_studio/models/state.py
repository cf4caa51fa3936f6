"""Application state and its derived phase."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, computed_field, model_validator

from .image import CapturedImage


class Slot(str, Enum):
    """The two upload slots."""
    SUBJECT = "subject"
    OUTFIT = "outfit"


class Phase(str, Enum):
    """Where the try-on flow currently is."""
    AWAITING_INPUTS = "awaiting_inputs"  # 0 or 1 image present
    READY = "ready"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ApplicationState(BaseModel):
    """Complete UI state for one page session.

    Instances are immutable; transitions build a new, re-validated state.
    """

    model_config = ConfigDict(frozen=True)

    subject_image: CapturedImage | None = None
    outfit_image: CapturedImage | None = None
    result: CapturedImage | None = None
    in_flight: bool = False
    error_message: str | None = None

    @model_validator(mode="after")
    def _result_xor_error(self) -> "ApplicationState":
        if self.result is not None and self.error_message is not None:
            raise ValueError("result and error_message cannot both be set")
        if self.in_flight and (self.result is not None or self.error_message is not None):
            raise ValueError("an in-flight state carries no outcome")
        return self

    @computed_field
    @property
    def has_both_images(self) -> bool:
        return self.subject_image is not None and self.outfit_image is not None

    @computed_field
    @property
    def can_try_on(self) -> bool:
        """The trigger is enabled iff both slots are filled and nothing is in flight."""
        return self.has_both_images and not self.in_flight

    @computed_field
    @property
    def phase(self) -> Phase:
        if self.in_flight:
            return Phase.IN_FLIGHT
        if self.result is not None:
            return Phase.SUCCEEDED
        if self.error_message is not None:
            return Phase.FAILED
        if self.has_both_images:
            return Phase.READY
        return Phase.AWAITING_INPUTS

    def image_for(self, slot: Slot) -> CapturedImage | None:
        return self.subject_image if slot is Slot.SUBJECT else self.outfit_image
