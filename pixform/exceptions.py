"""exceptions.py

Defines custom exception classes for pixform, giving callers a typed way to
tell invalid geometry, unknown kernels, bad orientation metadata and codec
failures apart.

All exceptions inherit from PixformError, allowing for unified error handling.
"""

from typing import Optional


class PixformError(Exception):  # pylint: disable=too-few-public-methods
    """Base class for all pixform errors."""


class InvalidDimensionError(PixformError, ValueError):  # pylint: disable=too-few-public-methods
    """Raised for negative or disallowed zero sizes and inconsistent buffer geometry.

    Covers target sizes that cannot be honoured (both resize dimensions zero,
    negative widths) and pixel buffers whose stride or payload length do not
    agree with their width and height.
    """


class UnsupportedKernelError(PixformError, ValueError):  # pylint: disable=too-few-public-methods
    """Raised for an unrecognized resample filter or a malformed convolution kernel."""


class InvalidAngleError(PixformError, ValueError):  # pylint: disable=too-few-public-methods
    """Raised for a rotation angle that is infinite or NaN."""


class MalformedMetadataError(PixformError):  # pylint: disable=too-few-public-methods
    """Raised when orientation metadata is unreadable and auto-orientation was requested."""


class CollaboratorFailure(PixformError):  # pylint: disable=too-few-public-methods
    """Wraps an error coming from an external codec or file system.

    The underlying exception is kept on ``cause`` and is not interpreted.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        """Initialize a CollaboratorFailure.

        Args:
            message (str): A description of the failure.
            cause (Optional[BaseException]): The original exception, if any.
        """
        self.cause = cause
        super().__init__(message)


class UnsupportedFormatError(CollaboratorFailure):  # pylint: disable=too-few-public-methods
    """Raised when the container format is not recognized or cannot be written."""


class CorruptDataError(CollaboratorFailure):  # pylint: disable=too-few-public-methods
    """Raised when a recognized container holds data the codec cannot decode."""


class CompositeError(CollaboratorFailure):  # pylint: disable=too-few-public-methods
    """An operation failed and releasing its resource failed too.

    Both failures stay inspectable: ``primary`` is the operation error and
    ``secondary`` the error raised while closing the handle.
    """

    def __init__(self, primary: BaseException, secondary: BaseException) -> None:
        """Initialize a CompositeError.

        Args:
            primary (BaseException): The error raised by the operation itself.
            secondary (BaseException): The error raised when closing the handle.
        """
        self.primary = primary
        self.secondary = secondary
        super().__init__(f"original error: {primary}, defer close error: {secondary}", cause=primary)
