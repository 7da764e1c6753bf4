"""image_loader.py

Provides the ImageLoader class, a Decoder implementation that reads images
with Pillow and converts them to RGBA PixelBuffers, optionally applying the
EXIF orientation.
"""

import os
from typing import BinaryIO, Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from pixform.buffer import PixelBuffer
from pixform.exceptions import (
    CollaboratorFailure,
    CorruptDataError,
    MalformedMetadataError,
    UnsupportedFormatError,
)
from pixform.utils.log import get_logger

from .filesystem import FileSystem, LocalFileSystem, run_and_close
from .image_processing_interfaces import Decoder, ImageData
from .orientation import Orientation, fix_orientation, read_orientation

LOGGER = get_logger(__name__)


class ImageLoader:
    """Decoder that loads images using Pillow.

    The file system and decoder are injected so callers and tests control where
    bytes come from and how they are read.
    """

    def __init__(self, fs: Optional[FileSystem] = None, decoder: Optional[Decoder] = None) -> None:
        """Initialize ImageLoader.

        Args:
            fs: File system used by :meth:`load`; defaults to the local disk.
            decoder: Decoder used by :meth:`load`; defaults to this loader's Pillow decoder.
        """
        self.fs: FileSystem = fs or LocalFileSystem()
        self.decoder: Decoder = decoder or self

    def decode(self, stream: BinaryIO, auto_orient: bool = False) -> ImageData:
        """Decode an image stream into an RGBA PixelBuffer.

        Args:
            stream (BinaryIO): Readable binary stream.
            auto_orient (bool): Rotate/flip the pixels according to the EXIF orientation tag.

        Returns:
            ImageData: The decoded buffer and decoder metadata.

        Raises:
            UnsupportedFormatError: Pillow does not recognize the data.
            CorruptDataError: The data is recognized but cannot be decoded.
            MalformedMetadataError: ``auto_orient`` is set and the EXIF data is unreadable.
        """
        try:
            with Image.open(stream) as img:
                img.load()
                orientation = self._orientation(img) if auto_orient else Orientation.NORMAL
                metadata = {
                    "format": img.format,
                    "mode": img.mode,
                    "orientation": int(orientation),
                }
                rgba = img.convert("RGBA")
        except UnidentifiedImageError as e:
            raise UnsupportedFormatError(f"image: unknown format ({e})", e) from e
        except (OSError, ValueError, SyntaxError, EOFError) as e:
            raise CorruptDataError(f"Could not decode image data: {e}", e) from e

        buffer = PixelBuffer.from_array(np.asarray(rgba))
        if orientation is not Orientation.NORMAL:
            buffer = fix_orientation(buffer, orientation)
        metadata["width"] = buffer.width
        metadata["height"] = buffer.height
        return ImageData(buffer=buffer, metadata=metadata)

    @staticmethod
    def _orientation(img: Image.Image) -> Orientation:
        try:
            exif = img.getexif()
        except (OSError, ValueError, SyntaxError, TypeError) as e:
            raise MalformedMetadataError(f"Unreadable EXIF data: {e}") from e
        return read_orientation(exif)

    def load(self, source_path: str, auto_orient: bool = False) -> ImageData:
        """Open ``source_path`` through the file system and decode it.

        Raises:
            CollaboratorFailure: The file could not be opened or closed.
            CompositeError: Decoding failed and closing the file failed as well.
        """
        try:
            handle = self.fs.open(source_path)
        except OSError as e:
            LOGGER.error("Could not open %s: %s", source_path, e)
            raise CollaboratorFailure(f"Error opening image file {source_path}: {e}", e) from e

        image_data = run_and_close(handle, lambda fp: self.decoder.decode(fp, auto_orient=auto_orient))
        image_data.source_path = source_path
        LOGGER.info(
            "Loaded %s: %sx%s %s",
            os.path.basename(source_path),
            image_data.width,
            image_data.height,
            image_data.metadata.get("format"),
        )
        return image_data
