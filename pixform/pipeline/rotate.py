"""rotate.py

Arbitrary-angle rotation by inverse mapping. Quarter turns are delegated to
the exact permutations in :mod:`pixform.pipeline.axis`; everything else is
bilinearly sampled, with the background colour filling both the area outside
the source and any neighbour tap that falls off its edge.
"""

from __future__ import annotations

import math
from typing import Union

import numpy as np
from PIL import ImageColor

from pixform.buffer import PixelBuffer, quantize
from pixform.exceptions import InvalidAngleError
from pixform.utils.log import get_logger

from . import axis
from .parallel import DEFAULT_CONFIG, TransformConfig, parallel_rows

LOGGER = get_logger(__name__)

Color = Union[tuple[int, int, int], tuple[int, int, int, int], str]

TRANSPARENT: tuple[int, int, int, int] = (0, 0, 0, 0)
BLACK: tuple[int, int, int, int] = (0, 0, 0, 255)


def to_rgba(color: Color) -> tuple[int, int, int, int]:
    """Normalize an RGB/RGBA tuple or a Pillow colour string to an RGBA tuple."""
    if isinstance(color, str):
        color = ImageColor.getrgb(color)
    channels = tuple(int(c) for c in color)
    if len(channels) == 3:
        channels = (*channels, 255)
    if len(channels) != 4 or any(not 0 <= c <= 255 for c in channels):
        raise ValueError(f"Invalid colour {color!r}: expected 3 or 4 channels in 0..255")
    r, g, b, a = channels
    return r, g, b, a


def normalize_angle(angle: float) -> float:
    """Map ``angle`` degrees into ``[0, 360)``.

    Raises:
        InvalidAngleError: ``angle`` is infinite or NaN.
    """
    if not math.isfinite(angle):
        raise InvalidAngleError(f"Rotation angle must be finite, got {angle}")
    return angle - math.floor(angle / 360.0) * 360.0


def rotate_point(x: float, y: float, sin: float, cos: float) -> tuple[float, float]:
    return x * cos - y * sin, x * sin + y * cos


def rotated_size(width: int, height: int, angle: float) -> tuple[int, int]:
    """Smallest integer box holding the rotated pixel-centre corners of a ``width`` x ``height`` image."""
    angle = normalize_angle(angle)
    if width <= 0 or height <= 0:
        return 0, 0

    rad = math.pi * angle / 180.0
    sin, cos = math.sin(rad), math.cos(rad)
    corners = [
        (0.0, 0.0),
        rotate_point(float(width - 1), 0.0, sin, cos),
        rotate_point(float(width - 1), float(height - 1), sin, cos),
        rotate_point(0.0, float(height - 1), sin, cos),
    ]
    xs = [c[0] for c in corners]
    ys = [c[1] for c in corners]

    new_width = max(xs) - min(xs) + 1
    if new_width - math.floor(new_width) > 0.1:
        new_width += 1
    new_height = max(ys) - min(ys) + 1
    if new_height - math.floor(new_height) > 0.1:
        new_height += 1
    return int(new_width), int(new_height)


def rotate(
    src: PixelBuffer,
    angle: float,
    background: Color = TRANSPARENT,
    settings: TransformConfig | None = None,
) -> PixelBuffer:
    """Rotate ``src`` counter-clockwise by ``angle`` degrees.

    Args:
        src: Source buffer.
        angle: Any angle in degrees; normalized into [0, 360).
        background: Fill colour for uncovered output pixels.
        settings: Worker settings.

    Returns:
        A new buffer sized to contain the whole rotated image.

    Raises:
        InvalidAngleError: ``angle`` is infinite or NaN.
    """
    angle = normalize_angle(angle)
    if angle == 0:
        return axis.clone(src)
    if angle == 90:
        return axis.rotate90(src)
    if angle == 180:
        return axis.rotate180(src)
    if angle == 270:
        return axis.rotate270(src)

    dst_width, dst_height = rotated_size(src.width, src.height, angle)
    if dst_width <= 0 or dst_height <= 0:
        return PixelBuffer.empty()

    bg = np.array(to_rgba(background), dtype=np.float64)
    bg_bytes = bg.astype(np.uint8)
    LOGGER.debug("Rotating %dx%d by %.3f degrees into %dx%d", src.width, src.height, angle, dst_width, dst_height)

    src_width, src_height = src.width, src.height
    pixels = src.to_array().astype(np.float64)
    src_x_off = src_width / 2 - 0.5
    src_y_off = src_height / 2 - 0.5
    dst_x_off = dst_width / 2 - 0.5
    dst_y_off = dst_height / 2 - 0.5
    rad = math.pi * angle / 180.0
    sin, cos = math.sin(rad), math.cos(rad)

    dst = np.empty((dst_height, dst_width, 4), dtype=np.uint8)

    def job(start: int, stop: int) -> None:
        ys, xs = np.mgrid[start:stop, 0:dst_width].astype(np.float64)
        xs -= dst_x_off
        ys -= dst_y_off
        xf = xs * cos - ys * sin + src_x_off
        yf = xs * sin + ys * cos + src_y_off

        x0 = np.floor(xf)
        y0 = np.floor(yf)
        xq = xf - x0
        yq = yf - y0
        x0 = x0.astype(np.intp)
        y0 = y0.astype(np.intp)
        covered = (x0 >= -1) & (x0 < src_width) & (y0 >= -1) & (y0 < src_height)

        acc = np.zeros((stop - start, dst_width, 4), dtype=np.float64)
        taps = (
            (0, 0, (1 - xq) * (1 - yq)),
            (1, 0, xq * (1 - yq)),
            (0, 1, (1 - xq) * yq),
            (1, 1, xq * yq),
        )
        for dx, dy, weight in taps:
            px = x0 + dx
            py = y0 + dy
            inside = (px >= 0) & (px < src_width) & (py >= 0) & (py < src_height)
            samples = pixels[np.clip(py, 0, src_height - 1), np.clip(px, 0, src_width - 1)]
            samples = np.where(inside[..., None], samples, bg)
            acc += samples * weight[..., None]

        dst[start:stop] = np.where(covered[..., None], quantize(acc), bg_bytes)

    parallel_rows(dst_height, job, settings or DEFAULT_CONFIG)
    return PixelBuffer.from_array(dst)
