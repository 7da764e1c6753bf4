"""resize.py

Separable two-pass scaling (horizontal pass first, then vertical) plus the
fit / fill / thumbnail helpers built on top of it.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from pixform.buffer import PixelBuffer, quantize
from pixform.exceptions import InvalidDimensionError
from pixform.utils.log import get_logger

from .filters import ResampleFilter, resolve_filter
from .image_cropper import Anchor, crop_anchor
from .parallel import DEFAULT_CONFIG, TransformConfig, parallel_rows

LOGGER = get_logger(__name__)


def precompute_weights(
    dst_size: int, src_size: int, rfilter: ResampleFilter
) -> tuple[NDArray[np.intp], NDArray[np.float64]]:
    """Compute source taps and normalized weights for every output index.

    Returns:
        ``(indices, weights)``, both shaped ``(dst_size, taps)``. Taps that
        fall outside the source are clamped to the nearest edge index; unused
        slots carry a zero weight.
    """
    assert dst_size > 0 and src_size > 0
    du = src_size / dst_size
    scale = max(du, 1.0)
    radius = math.ceil(scale * rfilter.support)
    taps = 2 * radius + 1

    indices = np.zeros((dst_size, taps), dtype=np.intp)
    weights = np.zeros((dst_size, taps), dtype=np.float64)

    for v in range(dst_size):
        fu = (v + 0.5) * du - 0.5
        begin = math.ceil(fu - radius)
        end = math.floor(fu + radius)
        for k, u in enumerate(range(begin, end + 1)):
            indices[v, k] = min(max(u, 0), src_size - 1)
            weights[v, k] = rfilter.weight((u - fu) / scale)
        total = weights[v].sum()
        if total != 0:
            weights[v] /= total
        else:
            # nothing in the window weighs in: fall back to the nearest source pixel
            weights[v] = 0.0
            indices[v, 0] = min(max(math.floor(fu + 0.5), 0), src_size - 1)
            weights[v, 0] = 1.0

    return indices, weights


def _resize_horizontal(
    src: NDArray[np.uint8], width: int, rfilter: ResampleFilter, settings: TransformConfig
) -> NDArray[np.uint8]:
    height, src_width = src.shape[:2]
    indices, weights = precompute_weights(width, src_width, rfilter)
    dst = np.empty((height, width, 4), dtype=np.uint8)

    def job(start: int, stop: int) -> None:
        block = src[start:stop].astype(np.float64)
        acc = np.zeros((stop - start, width, 4), dtype=np.float64)
        for k in range(indices.shape[1]):
            acc += block[:, indices[:, k]] * weights[None, :, k, None]
        dst[start:stop] = quantize(acc)

    parallel_rows(height, job, settings)
    return dst


def _resize_vertical(
    src: NDArray[np.uint8], height: int, rfilter: ResampleFilter, settings: TransformConfig
) -> NDArray[np.uint8]:
    src_height, width = src.shape[:2]
    indices, weights = precompute_weights(height, src_height, rfilter)
    dst = np.empty((height, width, 4), dtype=np.uint8)

    def job(start: int, stop: int) -> None:
        acc = np.zeros((stop - start, width, 4), dtype=np.float64)
        for k in range(indices.shape[1]):
            acc += src[indices[start:stop, k]].astype(np.float64) * weights[start:stop, k, None, None]
        dst[start:stop] = quantize(acc)

    parallel_rows(height, job, settings)
    return dst


def _resize_nearest(src: NDArray[np.uint8], width: int, height: int, settings: TransformConfig) -> NDArray[np.uint8]:
    src_height, src_width = src.shape[:2]
    xs = np.minimum(((np.arange(width) + 0.5) * (src_width / width)).astype(np.intp), src_width - 1)
    ys = np.minimum(((np.arange(height) + 0.5) * (src_height / height)).astype(np.intp), src_height - 1)
    dst = np.empty((height, width, 4), dtype=np.uint8)

    def job(start: int, stop: int) -> None:
        dst[start:stop] = src[ys[start:stop]][:, xs]

    parallel_rows(height, job, settings)
    return dst


def _check_target(width: int, height: int) -> None:
    if width < 0 or height < 0:
        raise InvalidDimensionError(f"Negative target size: {width}x{height}")
    if width == 0 and height == 0:
        raise InvalidDimensionError("At most one of width and height may be zero")


def target_size(src_width: int, src_height: int, width: int, height: int) -> tuple[int, int]:
    """Resolve a requested size, filling in one zero side from the aspect ratio."""
    _check_target(width, height)
    if width == 0:
        width = max(1, math.floor(height * src_width / src_height + 0.5))
    if height == 0:
        height = max(1, math.floor(width * src_height / src_width + 0.5))
    return width, height


def resize(
    src: PixelBuffer,
    width: int,
    height: int,
    rfilter: ResampleFilter | str | None = None,
    settings: TransformConfig | None = None,
) -> PixelBuffer:
    """Resize ``src`` to ``width`` x ``height``.

    Args:
        src: Source buffer.
        width: Target width, or 0 to derive it from ``height``.
        height: Target height, or 0 to derive it from ``width``.
        rfilter: Resample filter or filter name; defaults to ``settings.default_filter``.
        settings: Worker and default-filter settings.

    Returns:
        A new buffer. Zero-area sources give a zero-area result.

    Raises:
        InvalidDimensionError: Negative sizes, or both sizes zero.
        UnsupportedKernelError: Unknown filter name.
    """
    settings = settings or DEFAULT_CONFIG
    resolved = resolve_filter(rfilter if rfilter is not None else settings.default_filter)
    _check_target(width, height)
    if src.is_empty:
        return PixelBuffer.empty()

    dst_width, dst_height = target_size(src.width, src.height, width, height)
    LOGGER.debug(
        "Resizing %dx%d -> %dx%d with %s", src.width, src.height, dst_width, dst_height, resolved.name
    )

    pixels = src.to_array()
    if resolved.support <= 0:
        if (dst_width, dst_height) == src.size:
            return src.clone()
        return PixelBuffer.from_array(_resize_nearest(pixels, dst_width, dst_height, settings))

    if dst_width != src.width:
        pixels = _resize_horizontal(pixels, dst_width, resolved, settings)
    if dst_height != src.height:
        pixels = _resize_vertical(pixels, dst_height, resolved, settings)
    return PixelBuffer.from_array(pixels)


def fit(
    src: PixelBuffer,
    max_width: int,
    max_height: int,
    rfilter: ResampleFilter | str | None = None,
    settings: TransformConfig | None = None,
) -> PixelBuffer:
    """Scale ``src`` down to fit inside ``max_width`` x ``max_height``, keeping aspect ratio.

    Sources that already fit are returned as a copy.
    """
    if max_width <= 0 or max_height <= 0:
        raise InvalidDimensionError(f"Fit bounds must be positive, got {max_width}x{max_height}")
    if src.is_empty:
        return PixelBuffer.empty()
    if src.width <= max_width and src.height <= max_height:
        return src.clone()

    src_ratio = src.width / src.height
    max_ratio = max_width / max_height
    if src_ratio > max_ratio:
        new_width, new_height = max_width, int(max_width / src_ratio)
    else:
        new_width, new_height = int(max_height * src_ratio), max_height
    return resize(src, new_width, new_height, rfilter, settings)


def fill(
    src: PixelBuffer,
    width: int,
    height: int,
    anchor: Anchor = Anchor.CENTER,
    rfilter: ResampleFilter | str | None = None,
    settings: TransformConfig | None = None,
) -> PixelBuffer:
    """Scale and crop ``src`` to exactly ``width`` x ``height``.

    The crop keeps the region selected by ``anchor``. Large sources are
    cropped before resizing so less data goes through the filter.
    """
    if width <= 0 or height <= 0:
        raise InvalidDimensionError(f"Fill size must be positive, got {width}x{height}")
    if src.is_empty:
        return PixelBuffer.empty()
    if src.size == (width, height):
        return src.clone()

    src_ratio = src.width / src.height
    dst_ratio = width / height
    if src.width >= 100 and src.height >= 100:
        if src_ratio < dst_ratio:
            crop_height = src.width * height / width
            tmp = crop_anchor(src, src.width, int(max(1.0, crop_height) + 0.5), anchor)
        else:
            crop_width = src.height * width / height
            tmp = crop_anchor(src, int(max(1.0, crop_width) + 0.5), src.height, anchor)
        return resize(tmp, width, height, rfilter, settings)

    if src_ratio < dst_ratio:
        tmp = resize(src, width, 0, rfilter, settings)
    else:
        tmp = resize(src, 0, height, rfilter, settings)
    return crop_anchor(tmp, width, height, anchor)


def thumbnail(
    src: PixelBuffer,
    width: int,
    height: int,
    rfilter: ResampleFilter | str | None = None,
    settings: TransformConfig | None = None,
) -> PixelBuffer:
    """Centre-cropped ``fill``."""
    return fill(src, width, height, Anchor.CENTER, rfilter, settings)
