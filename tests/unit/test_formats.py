"""Tests for format lookup and encoder options."""

import pytest

from pixform.exceptions import CollaboratorFailure, UnsupportedFormatError
from pixform.pipeline.formats import (
    EncodeOptions,
    Format,
    format_from_extension,
    format_from_filename,
    format_from_pil,
)


@pytest.mark.parametrize(
    "ext,expected",
    [
        ("jpg", Format.JPEG),
        ("jpeg", Format.JPEG),
        (".JPG", Format.JPEG),
        ("png", Format.PNG),
        (".Png", Format.PNG),
        ("gif", Format.GIF),
        ("tif", Format.TIFF),
        ("TIFF", Format.TIFF),
        ("bmp", Format.BMP),
    ],
)
def test_format_from_extension(ext, expected) -> None:
    assert format_from_extension(ext) is expected


@pytest.mark.parametrize("ext", ["", "webp", "jpg2", "."])
def test_unknown_extension(ext) -> None:
    with pytest.raises(UnsupportedFormatError) as exc_info:
        format_from_extension(ext)

    assert isinstance(exc_info.value, CollaboratorFailure)


def test_format_from_filename() -> None:
    assert format_from_filename("/tmp/photos/IMG_0001.JPG") is Format.JPEG
    with pytest.raises(UnsupportedFormatError):
        format_from_filename("README")


def test_format_names() -> None:
    assert [str(f) for f in Format] == ["JPEG", "PNG", "GIF", "TIFF", "BMP"]
    assert format_from_pil("PNG") is Format.PNG
    assert format_from_pil("WEBP") is None
    assert format_from_pil(None) is None


class TestEncodeOptions:
    def test_defaults(self) -> None:
        opts = EncodeOptions()

        assert (opts.jpeg_quality, opts.png_compression_level, opts.gif_num_colors) == (95, 6, 256)
        assert opts.gif_dither

    def test_values_are_clamped(self) -> None:
        opts = EncodeOptions(jpeg_quality=0, png_compression_level=12, gif_num_colors=1000)

        assert opts.jpeg_quality == 1
        assert opts.png_compression_level == 9
        assert opts.gif_num_colors == 256
