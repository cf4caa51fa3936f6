"""Error taxonomy for the try-on flow.

Every error carries a message fit to show the user as-is.
"""


class TryOnError(Exception):
    """Base class for all try-on failures."""

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.__class__.__name__


class InputError(TryOnError):
    """Try-on was triggered without both images, or while a request is in flight."""


class IntakeError(TryOnError):
    """An uploaded file could not be read as an image."""


class GenerationError(TryOnError):
    """The generation endpoint was unreachable, refused the request, or returned no image."""
