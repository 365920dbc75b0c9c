"""Exception hierarchy for image-filters."""


class ImageFiltersError(Exception):
    """Base class for every error raised by the package."""


class ResourceNotFoundError(ImageFiltersError, FileNotFoundError):
    """A named (or default) image resource could not be located."""


class DecodeError(ImageFiltersError, ValueError):
    """An image handle could not be turned into an RGBA pixel buffer."""


class EncodeError(ImageFiltersError, ValueError):
    """A pixel buffer could not be turned back into an image handle."""


class InvalidDimensionsError(ImageFiltersError, ValueError):
    """A pixel buffer has zero width/height or a malformed layout."""


class UnknownFilterError(ImageFiltersError, ValueError):
    """A filter name is not one of the supported identifiers."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown filter name: {name!r}")


class InvalidFactorError(ImageFiltersError, ValueError):
    """A transform factor is NaN or infinite."""
