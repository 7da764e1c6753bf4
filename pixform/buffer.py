"""buffer.py

Defines PixelBuffer, the 8-bit non-premultiplied RGBA raster every transform in
pixform reads from and writes to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pixform.exceptions import InvalidDimensionError

CHANNELS = 4


def quantize(values: NDArray[np.floating[Any]]) -> NDArray[np.uint8]:
    """Round half up and clamp float channel values into uint8."""
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Immutable RGBA raster with an explicit row stride.

    Attributes:
        width (int): Width in pixels.
        height (int): Height in pixels.
        stride (int): Bytes per row, at least ``width * 4``.
        pix (bytes): Pixel payload of exactly ``stride * height`` bytes. Pixel
            (x, y) lives at ``pix[y*stride + x*4 : y*stride + x*4 + 4]`` as R, G, B, A.
    """

    width: int
    height: int
    stride: int
    pix: bytes

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise InvalidDimensionError(f"Negative buffer size: {self.width}x{self.height}")
        if self.stride < self.width * CHANNELS:
            raise InvalidDimensionError(f"Stride {self.stride} is smaller than width*4 ({self.width * CHANNELS})")
        if len(self.pix) != self.stride * self.height:
            raise InvalidDimensionError(
                f"Payload holds {len(self.pix)} bytes, expected stride*height = {self.stride * self.height}"
            )
        if not isinstance(self.pix, bytes):
            # Freeze caller-supplied bytearrays so no transform can alias them.
            object.__setattr__(self, "pix", bytes(self.pix))

    @classmethod
    def new(cls, width: int, height: int) -> PixelBuffer:
        """Create a fully transparent black buffer with a tight stride."""
        if width < 0 or height < 0:
            raise InvalidDimensionError(f"Negative buffer size: {width}x{height}")
        stride = width * CHANNELS
        return cls(width=width, height=height, stride=stride, pix=bytes(stride * height))

    @classmethod
    def empty(cls) -> PixelBuffer:
        """The canonical zero-area buffer."""
        return cls(width=0, height=0, stride=0, pix=b"")

    @classmethod
    def from_array(cls, array: NDArray[Any]) -> PixelBuffer:
        """Build a tightly packed buffer from an ``(h, w, 4)`` array.

        Values are converted to uint8; callers are expected to have clamped them.
        """
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise InvalidDimensionError(f"Expected an (h, w, 4) array, got shape {array.shape}")
        height, width = int(array.shape[0]), int(array.shape[1])
        data = np.ascontiguousarray(array, dtype=np.uint8)
        return cls(width=width, height=height, stride=width * CHANNELS, pix=data.tobytes())

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def to_array(self) -> NDArray[np.uint8]:
        """Return a read-only ``(h, w, 4)`` uint8 view of the pixels, ignoring stride padding."""
        flat = np.frombuffer(self.pix, dtype=np.uint8)
        rows = flat.reshape(self.height, self.stride)
        return rows[:, : self.width * CHANNELS].reshape(self.height, self.width, CHANNELS)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the (R, G, B, A) tuple at ``(x, y)``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        offset = y * self.stride + x * CHANNELS
        r, g, b, a = self.pix[offset : offset + CHANNELS]
        return r, g, b, a

    def clone(self) -> PixelBuffer:
        """Return a copy with a tight stride."""
        if self.stride == self.width * CHANNELS:
            return PixelBuffer(self.width, self.height, self.stride, self.pix)
        return PixelBuffer.from_array(self.to_array())

    def same_pixels(self, other: PixelBuffer, tolerance: int = 0) -> bool:
        """Compare dimensions and per-channel values, ignoring stride.

        Args:
            other: Buffer to compare against.
            tolerance: Largest allowed absolute difference per channel.
        """
        if self.size != other.size:
            return False
        if self.is_empty:
            return True
        diff = np.abs(self.to_array().astype(np.int16) - other.to_array().astype(np.int16))
        return bool(diff.max() <= tolerance)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.same_pixels(other)

    def __hash__(self) -> int:
        return hash((self.width, self.height, self.to_array().tobytes()))

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height}, stride={self.stride})"
