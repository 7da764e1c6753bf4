"""pixform: geometric and convolution transforms on in-memory RGBA pixel buffers.

Every transform takes a PixelBuffer and returns a new one; inputs are never
modified. Decoding and encoding live in ``pixform.pipeline.image_loader`` and
``pixform.pipeline.image_saver``.
"""

from .buffer import PixelBuffer
from .exceptions import (
    CollaboratorFailure,
    CompositeError,
    CorruptDataError,
    InvalidAngleError,
    InvalidDimensionError,
    MalformedMetadataError,
    PixformError,
    UnsupportedFormatError,
    UnsupportedKernelError,
)
from .pipeline import *  # noqa: F401,F403
from .pipeline import __all__ as _pipeline_all

__all__ = [
    "CollaboratorFailure",
    "CompositeError",
    "CorruptDataError",
    "InvalidAngleError",
    "InvalidDimensionError",
    "MalformedMetadataError",
    "PixelBuffer",
    "PixformError",
    "UnsupportedFormatError",
    "UnsupportedKernelError",
    *_pipeline_all,
]
