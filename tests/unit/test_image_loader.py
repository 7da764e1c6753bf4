"""Tests for decoding images into PixelBuffers."""

import io

import numpy as np
import pytest
from PIL import Image, PngImagePlugin

from pixform.exceptions import (
    CollaboratorFailure,
    CompositeError,
    CorruptDataError,
    MalformedMetadataError,
    UnsupportedFormatError,
)
from pixform.pipeline import axis
from pixform.pipeline.image_loader import ImageLoader
from pixform.pipeline.image_processing_interfaces import ImageData
from pixform.pipeline.orientation import ORIENTATION_TAG


def _encode(array, fmt="PNG", orientation=None):
    """Encode an RGBA/RGB array with Pillow, optionally tagging its orientation."""
    img = Image.fromarray(array)
    kwargs = {}
    if orientation is not None:
        exif = Image.Exif()
        exif[ORIENTATION_TAG] = orientation
        kwargs["exif"] = exif
    out = io.BytesIO()
    img.save(out, format=fmt, **kwargs)
    return out.getvalue()


@pytest.fixture
def loader():
    return ImageLoader()


@pytest.fixture
def rgba_array(random_buffer):
    return np.array(random_buffer.to_array())


class TestDecode:
    def test_png_round_trip_is_exact(self, loader, rgba_array, random_buffer) -> None:
        result = loader.decode(io.BytesIO(_encode(rgba_array)))

        assert result.buffer.pix == random_buffer.pix
        assert result.metadata["format"] == "PNG"
        assert result.metadata["mode"] == "RGBA"
        assert (result.width, result.height) == (13, 7)

    def test_rgb_gets_opaque_alpha(self, loader) -> None:
        rgb = np.full((3, 2, 3), 77, dtype=np.uint8)

        result = loader.decode(io.BytesIO(_encode(rgb, "BMP")))

        assert result.metadata["format"] == "BMP"
        assert result.buffer.pixel(1, 2) == (77, 77, 77, 255)

    def test_grayscale_expands_to_rgba(self, loader) -> None:
        img = Image.new("L", (4, 4), 200)
        out = io.BytesIO()
        img.save(out, format="PNG")

        result = loader.decode(io.BytesIO(out.getvalue()))

        assert result.buffer.pixel(0, 0) == (200, 200, 200, 255)

    def test_unknown_format(self, loader) -> None:
        with pytest.raises(UnsupportedFormatError, match="image: unknown format"):
            loader.decode(io.BytesIO(b"definitely not an image"))

    def test_truncated_data(self, loader) -> None:
        rng = np.random.default_rng(7)
        data = _encode(rng.integers(0, 256, size=(64, 64, 4), dtype=np.uint8))

        with pytest.raises(CorruptDataError):
            loader.decode(io.BytesIO(data[: len(data) // 2]))


class TestAutoOrient:
    @pytest.mark.parametrize(
        "tag,stored_as",
        [
            (1, axis.clone),
            (2, axis.flip_h),
            (3, axis.rotate180),
            (4, axis.flip_v),
            (5, axis.transpose),
            (6, axis.rotate90),
            (7, axis.transverse),
            (8, axis.rotate270),
        ],
    )
    def test_tags_are_applied(self, loader, random_buffer, tag, stored_as) -> None:
        stored = np.array(stored_as(random_buffer).to_array())

        result = loader.decode(io.BytesIO(_encode(stored, orientation=tag)), auto_orient=True)

        assert result.buffer.pix == random_buffer.pix
        assert result.metadata["orientation"] == tag

    def test_tag_ignored_without_auto_orient(self, loader, rgba_array) -> None:
        result = loader.decode(io.BytesIO(_encode(rgba_array, orientation=6)))

        assert result.buffer.size == (13, 7)
        assert result.metadata["orientation"] == 1

    def test_missing_exif(self, loader, rgba_array, random_buffer) -> None:
        result = loader.decode(io.BytesIO(_encode(rgba_array)), auto_orient=True)

        assert result.buffer.pix == random_buffer.pix

    def test_unreadable_exif(self, loader, rgba_array, monkeypatch) -> None:
        def broken_exif(self):
            raise SyntaxError("not a TIFF file")

        monkeypatch.setattr(PngImagePlugin.PngImageFile, "getexif", broken_exif)

        with pytest.raises(MalformedMetadataError):
            loader.decode(io.BytesIO(_encode(rgba_array, orientation=6)), auto_orient=True)


class TestLoad:
    def test_load_from_file_system(self, memory_fs, rgba_array, random_buffer) -> None:
        memory_fs.files["in/pic.png"] = _encode(rgba_array)

        result = ImageLoader(memory_fs).load("in/pic.png")

        assert result.buffer.pix == random_buffer.pix
        assert result.source_path == "in/pic.png"

    def test_missing_file(self, memory_fs, caplog) -> None:
        with pytest.raises(CollaboratorFailure) as exc_info:
            ImageLoader(memory_fs).load("nope.png")

        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert "Could not open nope.png" in caplog.text

    def test_metadata_can_be_extended(self, memory_fs, rgba_array) -> None:
        memory_fs.files["pic.png"] = _encode(rgba_array)
        result = ImageLoader(memory_fs).load("pic.png")

        result.update_metadata({"label": "holiday"})

        assert result.metadata["label"] == "holiday"
        assert result.metadata["format"] == "PNG"

    def test_decode_and_close_both_fail(self, memory_fs) -> None:
        memory_fs.files["bad.png"] = b"garbage"
        memory_fs.fail_close = True

        with pytest.raises(CompositeError) as exc_info:
            ImageLoader(memory_fs).load("bad.png")

        assert isinstance(exc_info.value.primary, UnsupportedFormatError)

    def test_close_failure_after_decode(self, memory_fs, rgba_array) -> None:
        memory_fs.files["ok.png"] = _encode(rgba_array)
        memory_fs.fail_close = True

        with pytest.raises(CollaboratorFailure) as exc_info:
            ImageLoader(memory_fs).load("ok.png")

        assert not isinstance(exc_info.value, CompositeError)

    def test_local_disk(self, temp_dir, rgba_array) -> None:
        path = temp_dir / "pic.png"
        path.write_bytes(_encode(rgba_array))

        result = ImageLoader().load(str(path))

        assert result.buffer.size == (13, 7)
        assert result.metadata["width"] == 13


class _RecordingDecoder:
    """Decoder stand-in that returns a fixed image and remembers what it read."""

    def __init__(self, buffer):
        self.buffer = buffer
        self.calls = []

    def decode(self, stream, auto_orient=False):
        self.calls.append((stream.read(), auto_orient))
        return ImageData(buffer=self.buffer, metadata={"format": "FAKE"})


class TestInjectedDecoder:
    def test_load_uses_injected_decoder(self, memory_fs, striped_4x4) -> None:
        memory_fs.files["pic.raw"] = b"raw bytes"
        decoder = _RecordingDecoder(striped_4x4)

        result = ImageLoader(memory_fs, decoder=decoder).load("pic.raw", auto_orient=True)

        assert decoder.calls == [(b"raw bytes", True)]
        assert result.buffer is striped_4x4
        assert result.source_path == "pic.raw"
        assert result.metadata["format"] == "FAKE"

    def test_default_decoder_is_the_loader(self, memory_fs) -> None:
        loader = ImageLoader(memory_fs)

        assert loader.decoder is loader
