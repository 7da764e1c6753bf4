"""orientation.py

Normalizes images carrying an EXIF orientation tag. Each of the eight tags
maps to exactly one axis transform that brings the image back to tag 1.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import IntEnum
from typing import Any

from pixform.buffer import PixelBuffer
from pixform.exceptions import MalformedMetadataError
from pixform.utils.log import get_logger

from . import axis

LOGGER = get_logger(__name__)

# EXIF 0x0112
ORIENTATION_TAG = 0x0112


class Orientation(IntEnum):
    """EXIF orientation values, named by the transform the camera applied."""

    NORMAL = 1
    FLIP_H = 2
    ROTATE_180 = 3
    FLIP_V = 4
    TRANSPOSE = 5
    ROTATE_270 = 6
    TRANSVERSE = 7
    ROTATE_90 = 8


CORRECTIONS: dict[Orientation, Callable[[PixelBuffer], PixelBuffer]] = {
    Orientation.NORMAL: axis.clone,
    Orientation.FLIP_H: axis.flip_h,
    Orientation.ROTATE_180: axis.rotate180,
    Orientation.FLIP_V: axis.flip_v,
    Orientation.TRANSPOSE: axis.transpose,
    Orientation.ROTATE_270: axis.rotate270,
    Orientation.TRANSVERSE: axis.transverse,
    Orientation.ROTATE_90: axis.rotate90,
}


def to_orientation(tag: int | None) -> Orientation:
    """Unknown or missing tags are treated as :attr:`Orientation.NORMAL`."""
    if tag is None:
        return Orientation.NORMAL
    try:
        return Orientation(tag)
    except ValueError:
        LOGGER.debug("Ignoring unknown orientation tag %r", tag)
        return Orientation.NORMAL


def read_orientation(exif: Mapping[int, Any] | None) -> Orientation:
    """Extract the orientation from decoded EXIF data.

    Raises:
        MalformedMetadataError: The tag is present but is not an integer.
    """
    if not exif:
        return Orientation.NORMAL
    raw = exif.get(ORIENTATION_TAG)
    if raw is None:
        return Orientation.NORMAL
    # Some writers store SHORT values as one-element tuples
    if isinstance(raw, (tuple, list)) and len(raw) == 1:
        raw = raw[0]
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise MalformedMetadataError(f"Orientation tag has non-integer value {raw!r}")
    return to_orientation(raw)


def fix_orientation(src: PixelBuffer, tag: int | None) -> PixelBuffer:
    """Return ``src`` rotated/flipped so that it displays as orientation 1."""
    orientation = to_orientation(tag)
    if orientation is not Orientation.NORMAL:
        LOGGER.debug("Correcting orientation %s", orientation.name)
    return CORRECTIONS[orientation](src)
