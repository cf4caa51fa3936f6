"""Events that drive the application state."""

from dataclasses import dataclass

from ..models import CapturedImage, Slot


@dataclass(frozen=True)
class ImageUploaded:
    slot: Slot
    image: CapturedImage


@dataclass(frozen=True)
class TryOnStarted:
    pass


@dataclass(frozen=True)
class GenerationSucceeded:
    image: CapturedImage


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class GenerationDiscarded:
    """The pending request resolved after a reset; its outcome is dropped."""


@dataclass(frozen=True)
class TryOnRejected:
    message: str


@dataclass(frozen=True)
class Reset:
    pass


Event = (
    ImageUploaded
    | TryOnStarted
    | TryOnRejected
    | GenerationSucceeded
    | GenerationFailed
    | GenerationDiscarded
    | Reset
)
