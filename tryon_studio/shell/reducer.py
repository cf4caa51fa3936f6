"""State transition function for the try-on flow."""

from typing import Any

from ..errors import InputError
from ..models import ApplicationState, Slot
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

MISSING_IMAGES_MESSAGE = "Please upload both your photo and an outfit photo."
ALREADY_IN_FLIGHT_MESSAGE = "A try-on is already being generated."


def evolve(state: ApplicationState, **changes: Any) -> ApplicationState:
    """Build the next state, re-running validation."""
    fields = {name: getattr(state, name) for name in ApplicationState.model_fields}
    fields.update(changes)
    return ApplicationState(**fields)


def reduce(state: ApplicationState, event: Event) -> ApplicationState:
    """Return the state that follows `event`.

    Raises:
        InputError: the event is not valid in the current state
    """
    if isinstance(event, ImageUploaded):
        key = "subject_image" if event.slot is Slot.SUBJECT else "outfit_image"
        if state.in_flight:
            # The pending outcome still lands when the request resolves
            return evolve(state, **{key: event.image})
        return evolve(state, **{key: event.image}, result=None, error_message=None)

    if isinstance(event, TryOnStarted):
        if state.in_flight:
            raise InputError(ALREADY_IN_FLIGHT_MESSAGE)
        if not state.has_both_images:
            raise InputError(MISSING_IMAGES_MESSAGE)
        return evolve(state, in_flight=True, result=None, error_message=None)

    if isinstance(event, TryOnRejected):
        if state.in_flight:
            raise InputError(ALREADY_IN_FLIGHT_MESSAGE)
        return evolve(state, result=None, error_message=event.message)

    if isinstance(event, GenerationSucceeded):
        if not state.in_flight:
            raise InputError("No try-on is in flight.")
        return evolve(state, in_flight=False, result=event.image, error_message=None)

    if isinstance(event, GenerationFailed):
        if not state.in_flight:
            raise InputError("No try-on is in flight.")
        return evolve(state, in_flight=False, result=None, error_message=event.message)

    if isinstance(event, GenerationDiscarded):
        if not state.in_flight:
            raise InputError("No try-on is in flight.")
        return evolve(state, in_flight=False)

    if isinstance(event, Reset):
        # A pending request keeps the trigger locked until it resolves
        return ApplicationState(in_flight=state.in_flight)

    raise TypeError(f"Unknown event: {event!r}")
