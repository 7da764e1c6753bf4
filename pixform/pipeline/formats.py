"""Container formats understood by the codec glue, and encoder options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import os

from pixform.exceptions import UnsupportedFormatError
from pixform.utils import config


class Format(Enum):
    """Image container formats."""

    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    TIFF = "TIFF"
    BMP = "BMP"

    def __str__(self) -> str:
        return self.value

    @property
    def pil_name(self) -> str:
        """Format name as registered with Pillow."""
        return self.value


FORMAT_EXTENSIONS: dict[str, Format] = {
    "jpg": Format.JPEG,
    "jpeg": Format.JPEG,
    "png": Format.PNG,
    "gif": Format.GIF,
    "tif": Format.TIFF,
    "tiff": Format.TIFF,
    "bmp": Format.BMP,
}


def format_from_extension(ext: str) -> Format:
    """Map a file extension (with or without the leading dot, any case) to a Format.

    Raises:
        UnsupportedFormatError: The extension is not one of FORMAT_EXTENSIONS.
    """
    key = ext.lower().lstrip(".")
    try:
        return FORMAT_EXTENSIONS[key]
    except KeyError:
        raise UnsupportedFormatError(f"unsupported image format: {ext!r}") from None


def format_from_filename(filename: str) -> Format:
    return format_from_extension(os.path.splitext(filename)[1])


def format_from_pil(name: str | None) -> Format | None:
    """Reverse lookup of a Pillow format name; None for formats we cannot write."""
    for fmt in Format:
        if fmt.pil_name == name:
            return fmt
    return None


@dataclass(frozen=True)
class EncodeOptions:
    """Format-specific encoder settings.

    Attributes:
        jpeg_quality: JPEG quality, 1-100.
        png_compression_level: zlib level for PNG, 0-9.
        gif_num_colors: Palette size for GIF, 1-256.
        gif_dither: Apply Floyd-Steinberg dithering when building the GIF palette.
    """

    jpeg_quality: int = 95
    png_compression_level: int = 6
    gif_num_colors: int = 256
    gif_dither: bool = True

    def __post_init__(self) -> None:
        # Clamp out-of-range values the way the encoders would anyway
        object.__setattr__(self, "jpeg_quality", min(100, max(1, self.jpeg_quality)))
        object.__setattr__(self, "png_compression_level", min(9, max(0, self.png_compression_level)))
        object.__setattr__(self, "gif_num_colors", min(256, max(1, self.gif_num_colors)))

    @classmethod
    def from_config(cls) -> EncodeOptions:
        return cls(
            jpeg_quality=config.get_jpeg_quality(),
            png_compression_level=config.get_png_compression_level(),
        )
