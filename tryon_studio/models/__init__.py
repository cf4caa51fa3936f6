"""Data models for the Virtual Try-On studio."""

from .image import CapturedImage
from .state import ApplicationState, Phase, Slot

__all__ = [
    "CapturedImage",
    "ApplicationState",
    "Phase",
    "Slot",
]
