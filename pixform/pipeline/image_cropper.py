"""image_cropper.py.

Rectangular crops of pixel buffers, either by explicit area or by size and
anchor position.
"""

from __future__ import annotations

from enum import Enum

from pixform.buffer import PixelBuffer

CropArea = tuple[int, int, int, int]


class Anchor(Enum):
    """Which part of the image a sized crop keeps."""

    CENTER = "center"
    TOP_LEFT = "top_left"
    TOP = "top"
    TOP_RIGHT = "top_right"
    LEFT = "left"
    RIGHT = "right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM = "bottom"
    BOTTOM_RIGHT = "bottom_right"


def _half(n: int) -> int:
    # truncate toward zero so negative slack splits the same way as positive
    return int(n / 2)


def anchor_point(width: int, height: int, crop_width: int, crop_height: int, anchor: Anchor) -> tuple[int, int]:
    """Top-left corner of a ``crop_width`` x ``crop_height`` box placed at ``anchor``."""
    if anchor is Anchor.TOP_LEFT:
        return 0, 0
    if anchor is Anchor.TOP:
        return _half(width - crop_width), 0
    if anchor is Anchor.TOP_RIGHT:
        return width - crop_width, 0
    if anchor is Anchor.LEFT:
        return 0, _half(height - crop_height)
    if anchor is Anchor.RIGHT:
        return width - crop_width, _half(height - crop_height)
    if anchor is Anchor.BOTTOM_LEFT:
        return 0, height - crop_height
    if anchor is Anchor.BOTTOM:
        return _half(width - crop_width), height - crop_height
    if anchor is Anchor.BOTTOM_RIGHT:
        return width - crop_width, height - crop_height
    return _half(width - crop_width), _half(height - crop_height)


def crop(src: PixelBuffer, crop_area: CropArea) -> PixelBuffer:
    """Cut out ``crop_area`` = (left, top, right, bottom).

    The area is intersected with the image bounds first; an area that misses
    the image entirely gives a zero-area buffer.
    """
    left, top, right, bottom = crop_area
    left, top = max(left, 0), max(top, 0)
    right, bottom = min(right, src.width), min(bottom, src.height)
    if right <= left or bottom <= top:
        return PixelBuffer.empty()
    return PixelBuffer.from_array(src.to_array()[top:bottom, left:right])


def crop_anchor(src: PixelBuffer, width: int, height: int, anchor: Anchor = Anchor.CENTER) -> PixelBuffer:
    """Cut a ``width`` x ``height`` region positioned by ``anchor``."""
    x, y = anchor_point(src.width, src.height, width, height, anchor)
    return crop(src, (x, y, x + width, y + height))


def crop_center(src: PixelBuffer, width: int, height: int) -> PixelBuffer:
    return crop_anchor(src, width, height, Anchor.CENTER)
