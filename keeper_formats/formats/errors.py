"""Exceptions raised by format handlers.

Every rejection carries a human-readable message; ``str(err)`` is what the
host shows to the uploader.
"""


class FormatError(Exception):
    """Base class for all handler failures."""


class EmptyInput(FormatError):
    """Raised for zero-length data or an empty path."""


class WrongExtension(FormatError):
    """Raised when the path extension is not accepted by the format."""


class BadMagic(FormatError):
    """Raised when the leading bytes do not match the format signature."""


class TooSmall(FormatError):
    """Raised when data is too short to hold the format signature."""

    def __init__(self, message: str, size: int, minimum: int):
        super().__init__(message)
        self.size = size
        self.minimum = minimum


class UnparseableFilename(FormatError):
    """Raised when a filename cannot be split into its required components."""


class IndexGenerationError(FormatError):
    """Raised when an index document cannot be built."""
