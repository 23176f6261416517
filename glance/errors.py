"""Exceptions raised by the glance image library."""


class CoreError(Exception):
    """Base class for every error raised by glance."""


class OutOfBoundsError(CoreError, IndexError):
    """A pixel position lies outside the image."""


class InvalidDataError(CoreError, ValueError):
    """Pixel data does not fit the requested image layout."""


class InvalidCastError(CoreError, TypeError):
    """A value cannot be converted to the requested pixel type."""