# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for tiffdir

This module defines the exceptions raised while decoding TIFF/Exif
directory structures. Only MetadataReadError ever reaches callers of
the top-level reader; the others are converted into directory error
strings by the IFD walker.

Copyright 2025 DNAi inc.
"""


class TiffDirError(Exception):
    """
    Base exception for all tiffdir errors.

    All tiffdir exceptions inherit from this class, allowing
    catch-all error handling for any decoding-related errors.
    """
    def __init__(self, message: str = ""):
        """
        Initialize the exception with an optional error message.

        Args:
            message: Descriptive error message explaining what went wrong
        """
        self.message = message
        super().__init__(message)


class FormatError(TiffDirError):
    """
    Raised when a TIFF structure cannot be recognised.

    This exception is raised when:
    - The byte order marker is neither "II" nor "MM"
    - The TIFF magic number is unknown
    - The header is truncated
    """
    pass


class BoundsError(TiffDirError):
    """
    Raised when a read falls outside the valid range of a byte window.
    """
    def __init__(self, message: str = "", offset: int = 0, length: int = 0):
        self.offset = offset
        self.length = length
        super().__init__(message)


class CycleDetected(TiffDirError):
    """Raised when an IFD offset has already been visited during a parse."""
    pass


class LimitExceeded(TiffDirError):
    """Raised when a configured directory or tag limit is exceeded."""
    pass


class MetadataReadError(TiffDirError):
    """
    Raised when metadata cannot be read from a file.

    This exception is raised when:
    - No file path or file data was provided
    - The file does not exist or cannot be opened
    """
    pass
