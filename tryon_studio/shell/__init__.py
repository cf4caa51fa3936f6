"""Application shell: events, transitions, and the session dispatcher."""

from .events import (
    GenerationDiscarded,
    GenerationFailed,
    GenerationSucceeded,
    ImageUploaded,
    Reset,
    TryOnRejected,
    TryOnStarted,
)
from .reducer import reduce
from .session import TryOnSession

__all__ = [
    "GenerationDiscarded",
    "GenerationFailed",
    "GenerationSucceeded",
    "ImageUploaded",
    "Reset",
    "TryOnRejected",
    "TryOnStarted",
    "reduce",
    "TryOnSession",
]
