"""convolution.py

Separable 1-D convolution (Gaussian blur), one-pass 3x3 / 5x5 kernels
(sharpen, edge detection, emboss) and unsharp masking. Every variant
replicates edge pixels instead of padding with zeros.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

import numpy as np
from numpy.typing import NDArray

from pixform.buffer import PixelBuffer, quantize
from pixform.exceptions import UnsupportedKernelError
from pixform.utils.log import get_logger

from .parallel import DEFAULT_CONFIG, TransformConfig, parallel_rows

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class Kernel:
    """Odd-length 1-D convolution kernel.

    Attributes:
        weights: ``2r + 1`` coefficients, centre tap in the middle.
    """

    weights: tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.weights) % 2 != 1:
            raise UnsupportedKernelError(f"Kernel length must be odd, got {len(self.weights)}")

    @property
    def radius(self) -> int:
        return len(self.weights) // 2

    @classmethod
    def identity(cls) -> Kernel:
        return cls((1.0,))

    @classmethod
    def from_weights(cls, weights: Sequence[float], normalize: bool = False) -> Kernel:
        """Build a kernel from fixed coefficients, optionally scaled to sum to 1."""
        values = tuple(float(w) for w in weights)
        if normalize:
            total = math.fsum(values)
            if total != 0:
                values = tuple(w / total for w in values)
        return cls(values)

    @classmethod
    def gaussian(cls, sigma: float) -> Kernel:
        """Gaussian sampled at integer offsets up to ``ceil(3 * sigma)``, renormalized to sum 1."""
        if sigma <= 0:
            return cls.identity()
        radius = math.ceil(sigma * 3.0)
        density = [
            math.exp(-(x * x) / (2 * sigma * sigma)) / (sigma * math.sqrt(2 * math.pi))
            for x in range(-radius, radius + 1)
        ]
        return cls.from_weights(density, normalize=True)


@dataclass(frozen=True)
class ConvolveOptions:
    """Post-processing for 3x3 / 5x5 convolution.

    Attributes:
        normalize: Scale the kernel so its weights sum to 1 (or its positive weights, if the sum is 0).
        abs: Take the absolute value of each result before biasing.
        bias: Constant added to every result.
    """

    normalize: bool = False
    abs: bool = False
    bias: int = 0


SHARPEN_3X3: tuple[float, ...] = (0, -1, 0, -1, 5, -1, 0, -1, 0)
EDGE_DETECT_3X3: tuple[float, ...] = (-1, -1, -1, -1, 8, -1, -1, -1, -1)
EMBOSS_3X3: tuple[float, ...] = (-1, -1, 0, -1, 1, 1, 0, 1, 1)


def _pass(pixels: NDArray[np.float64], kernel: Kernel, axis: int, settings: TransformConfig) -> NDArray[np.float64]:
    """Convolve along one axis (1 = rows, 0 = columns) with edge replication."""
    radius = kernel.radius
    pad = [(0, 0)] * 3
    pad[axis] = (radius, radius)
    padded = np.pad(pixels, pad, mode="edge")
    height = pixels.shape[0]
    out = np.empty_like(pixels)
    size = pixels.shape[axis]

    def job(start: int, stop: int) -> None:
        if axis == 1:
            rows = padded[start:stop]
            acc = np.zeros_like(out[start:stop])
            for k, w in enumerate(kernel.weights):
                if w != 0:
                    acc += rows[:, k : k + size] * w
        else:
            acc = np.zeros_like(out[start:stop])
            for k, w in enumerate(kernel.weights):
                if w != 0:
                    acc += padded[start + k : stop + k] * w
        out[start:stop] = acc

    parallel_rows(height, job, settings)
    return out


def convolve(src: PixelBuffer, kernel: Kernel, settings: TransformConfig | None = None) -> PixelBuffer:
    """Apply ``kernel`` along rows and then columns.

    All four channels, alpha included, go through the same arithmetic on the
    stored non-premultiplied values.
    """
    settings = settings or DEFAULT_CONFIG
    if src.is_empty:
        return PixelBuffer.empty()
    if kernel.radius == 0 and kernel.weights[0] == 1.0:
        return src.clone()

    pixels = src.to_array().astype(np.float64)
    horizontal = quantize(_pass(pixels, kernel, 1, settings)).astype(np.float64)
    vertical = _pass(horizontal, kernel, 0, settings)
    return PixelBuffer.from_array(quantize(vertical))


def blur(src: PixelBuffer, sigma: float, settings: TransformConfig | None = None) -> PixelBuffer:
    """Gaussian blur with standard deviation ``sigma``; ``sigma <= 0`` returns a copy."""
    if sigma <= 0:
        return src.clone()
    kernel = Kernel.gaussian(sigma)
    LOGGER.debug("Blurring %dx%d with sigma=%.3f (radius %d)", src.width, src.height, sigma, kernel.radius)
    return convolve(src, kernel, settings)


def _normalize_2d(weights: list[float]) -> list[float]:
    total = math.fsum(weights)
    if total != 0:
        return [w / total for w in weights]
    positive = math.fsum(w for w in weights if w > 0)
    if positive != 0:
        return [w / positive for w in weights]
    return weights


def _convolve_2d(
    src: PixelBuffer,
    weights: Sequence[float],
    side: int,
    options: ConvolveOptions | None,
    settings: TransformConfig | None,
) -> PixelBuffer:
    if len(weights) != side * side:
        raise UnsupportedKernelError(f"A {side}x{side} kernel needs {side * side} weights, got {len(weights)}")
    if src.is_empty:
        return PixelBuffer.empty()

    options = options or ConvolveOptions()
    coefs = [float(w) for w in weights]
    if options.normalize:
        coefs = _normalize_2d(coefs)

    radius = side // 2
    pixels = src.to_array()
    height, width = pixels.shape[:2]
    padded = np.pad(pixels[..., :3].astype(np.float64), ((radius, radius), (radius, radius), (0, 0)), mode="edge")
    dst = np.empty_like(pixels)

    def job(start: int, stop: int) -> None:
        acc = np.zeros((stop - start, width, 3), dtype=np.float64)
        i = 0
        for ky in range(side):
            for kx in range(side):
                w = coefs[i]
                i += 1
                if w != 0:
                    acc += padded[start + ky : stop + ky, kx : kx + width] * w
        if options.abs:
            acc = np.abs(acc)
        if options.bias:
            acc += options.bias
        dst[start:stop, :, :3] = quantize(acc)
        dst[start:stop, :, 3] = pixels[start:stop, :, 3]

    parallel_rows(height, job, settings or DEFAULT_CONFIG)
    return PixelBuffer.from_array(dst)


def convolve_3x3(
    src: PixelBuffer,
    kernel: Sequence[float],
    options: ConvolveOptions | None = None,
    settings: TransformConfig | None = None,
) -> PixelBuffer:
    """Convolve colour channels with a row-major 3x3 kernel; alpha is copied unchanged."""
    return _convolve_2d(src, kernel, 3, options, settings)


def convolve_5x5(
    src: PixelBuffer,
    kernel: Sequence[float],
    options: ConvolveOptions | None = None,
    settings: TransformConfig | None = None,
) -> PixelBuffer:
    """Convolve colour channels with a row-major 5x5 kernel; alpha is copied unchanged."""
    return _convolve_2d(src, kernel, 5, options, settings)


def sharpen(src: PixelBuffer, settings: TransformConfig | None = None) -> PixelBuffer:
    return convolve_3x3(src, SHARPEN_3X3, settings=settings)


def edge_detect(src: PixelBuffer, settings: TransformConfig | None = None) -> PixelBuffer:
    return convolve_3x3(src, EDGE_DETECT_3X3, settings=settings)


def emboss(src: PixelBuffer, settings: TransformConfig | None = None) -> PixelBuffer:
    return convolve_3x3(src, EMBOSS_3X3, ConvolveOptions(bias=128), settings=settings)


def unsharp_mask(src: PixelBuffer, sigma: float, settings: TransformConfig | None = None) -> PixelBuffer:
    """Sharpen by adding back the difference between ``src`` and its Gaussian blur."""
    if sigma <= 0 or src.is_empty:
        return src.clone()
    blurred = blur(src, sigma, settings).to_array().astype(np.float64)
    original = src.to_array().astype(np.float64)
    return PixelBuffer.from_array(quantize(original + (original - blurred)))
