"""Exact pixel permutations: flips, transpose, transverse and quarter turns.

None of these interpolate; every output byte is a copy of an input byte.
"""

from __future__ import annotations

import numpy as np

from pixform.buffer import PixelBuffer


def _permute(src: PixelBuffer, view: np.ndarray) -> PixelBuffer:
    if src.is_empty:
        height, width = view.shape[:2]
        return PixelBuffer.new(width, height)
    return PixelBuffer.from_array(view)


def clone(src: PixelBuffer) -> PixelBuffer:
    """Copy ``src`` into a tightly packed buffer."""
    return src.clone()


def flip_h(src: PixelBuffer) -> PixelBuffer:
    """Mirror left to right: ``(x, y) -> (w-1-x, y)``."""
    return _permute(src, src.to_array()[:, ::-1])


def flip_v(src: PixelBuffer) -> PixelBuffer:
    """Mirror top to bottom: ``(x, y) -> (x, h-1-y)``."""
    return _permute(src, src.to_array()[::-1, :])


def transpose(src: PixelBuffer) -> PixelBuffer:
    """Mirror across the main diagonal: ``(x, y) -> (y, x)``."""
    return _permute(src, src.to_array().transpose(1, 0, 2))


def transverse(src: PixelBuffer) -> PixelBuffer:
    """Mirror across the anti-diagonal: ``(x, y) -> (h-1-y, w-1-x)``."""
    return _permute(src, src.to_array()[::-1, ::-1].transpose(1, 0, 2))


def rotate90(src: PixelBuffer) -> PixelBuffer:
    """Rotate a quarter turn counter-clockwise: ``(x, y) -> (y, w-1-x)``."""
    return _permute(src, np.rot90(src.to_array(), 1))


def rotate180(src: PixelBuffer) -> PixelBuffer:
    """Rotate a half turn: ``(x, y) -> (w-1-x, h-1-y)``."""
    return _permute(src, src.to_array()[::-1, ::-1])


def rotate270(src: PixelBuffer) -> PixelBuffer:
    """Rotate a quarter turn clockwise: ``(x, y) -> (h-1-y, x)``."""
    return _permute(src, np.rot90(src.to_array(), -1))
