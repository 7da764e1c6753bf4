"""
Configuration file for pytest.

This file defines shared fixtures for the test suite. Fixtures defined here are
automatically available to all tests.
"""

import io
import pathlib
import tempfile

import numpy as np
import pytest

from pixform.buffer import PixelBuffer
from pixform.pipeline.parallel import TransformConfig


@pytest.fixture(scope="function")
def temp_dir():
    """
    Pytest fixture to create a temporary directory for a test function.

    Yields:
        pathlib.Path: The path to the created temporary directory.
    """
    with tempfile.TemporaryDirectory(prefix="pixform_test_") as tmpdir:
        yield pathlib.Path(tmpdir)


@pytest.fixture(scope="session")
def make_buffer():
    """Factory building a tightly packed PixelBuffer from rows of byte values."""

    def _make(width, height, pix):
        return PixelBuffer(width=width, height=height, stride=width * 4, pix=bytes(pix))

    return _make


@pytest.fixture
def buffer_2x3(make_buffer):
    """2x3 buffer with six distinct pixels."""
    return make_buffer(
        2,
        3,
        [
            0x00, 0x11, 0x22, 0x33, 0xCC, 0xDD, 0xEE, 0xFF,
            0xFF, 0x00, 0x00, 0x00, 0x00, 0xFF, 0x00, 0x00,
            0x00, 0x00, 0xFF, 0x00, 0x00, 0x00, 0x00, 0xFF,
        ],
    )


@pytest.fixture
def striped_4x4(make_buffer):
    """4x4 opaque buffer with red, green, blue and white rows."""
    rows = [
        [0xFF, 0x00, 0x00, 0xFF] * 4,
        [0x00, 0xFF, 0x00, 0xFF] * 4,
        [0x00, 0x00, 0xFF, 0xFF] * 4,
        [0xFF, 0xFF, 0xFF, 0xFF] * 4,
    ]
    return make_buffer(4, 4, [b for row in rows for b in row])


@pytest.fixture
def random_buffer():
    """Deterministic pseudo-random 13x7 RGBA buffer."""
    rng = np.random.default_rng(1234)
    return PixelBuffer.from_array(rng.integers(0, 256, size=(7, 13, 4), dtype=np.uint8))


@pytest.fixture
def serial_config():
    """Transform settings that keep every job on the calling thread."""
    return TransformConfig(max_workers=1)


@pytest.fixture
def threaded_config():
    """Transform settings that split even tiny images across workers."""
    return TransformConfig(max_workers=4, min_rows_per_worker=1)


class _MemoryFile(io.BytesIO):
    """BytesIO that hands its contents back to the owning MemoryFileSystem on close."""

    def __init__(self, fs, name, data=b""):
        super().__init__(data)
        self._fs = fs
        self._name = name

    def close(self):
        if self.closed:
            return
        self._fs.files[self._name] = self.getvalue()
        super().close()
        if self._fs.fail_close:
            raise OSError(f"close failed for {self._name}")


class MemoryFileSystem:
    """In-memory FileSystem with switchable open/create/close failures."""

    def __init__(self):
        self.files = {}
        self.fail_create = False
        self.fail_close = False

    def open(self, name):
        if name not in self.files:
            raise FileNotFoundError(name)
        return _MemoryFile(self, name, self.files[name])

    def create(self, name):
        if self.fail_create:
            raise PermissionError(name)
        return _MemoryFile(self, name)


@pytest.fixture
def memory_fs():
    """Fresh in-memory file system."""
    return MemoryFileSystem()
