"""image_saver.py.

Provides the ImageSaver class, an Encoder implementation that writes
PixelBuffers with Pillow.
"""

import os
from typing import Any, BinaryIO, Optional

import numpy as np
from PIL import Image

from pixform.buffer import PixelBuffer
from pixform.exceptions import CollaboratorFailure, UnsupportedFormatError
from pixform.utils.log import get_logger

from .filesystem import FileSystem, LocalFileSystem, run_and_close
from .formats import EncodeOptions, Format, format_from_filename
from .image_processing_interfaces import Encoder

LOGGER = get_logger(__name__)


class ImageSaver:
    """Encoder that saves PixelBuffers using Pillow."""

    def __init__(
        self,
        fs: Optional[FileSystem] = None,
        options: Optional[EncodeOptions] = None,
        encoder: Optional[Encoder] = None,
    ) -> None:
        """Initialize ImageSaver.

        Args:
            fs: File system used by :meth:`save`; defaults to the local disk.
            options: Encoder settings used when a call passes none.
            encoder: Encoder used by :meth:`save`; defaults to this saver's Pillow encoder.
        """
        self.fs: FileSystem = fs or LocalFileSystem()
        self.options = options or EncodeOptions()
        self.encoder: Encoder = encoder or self

    @staticmethod
    def _to_pil(buffer: PixelBuffer) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(buffer.to_array()))

    def encode(
        self,
        stream: BinaryIO,
        buffer: PixelBuffer,
        fmt: Format,
        options: Optional[EncodeOptions] = None,
    ) -> None:
        """Encode ``buffer`` into ``stream``.

        Args:
            stream (BinaryIO): Writable binary stream.
            buffer (PixelBuffer): Pixels to encode.
            fmt (Format): Target container format.
            options (Optional[EncodeOptions]): Overrides the saver's default options.

        Raises:
            UnsupportedFormatError: ``fmt`` is not a Format.
            CollaboratorFailure: Pillow failed to encode the image.
        """
        if not isinstance(fmt, Format):
            raise UnsupportedFormatError(f"unsupported image format: {fmt!r}")
        if buffer.is_empty:
            raise CollaboratorFailure(f"Cannot encode a zero-area image ({buffer.width}x{buffer.height})")
        opts = options or self.options
        img = self._to_pil(buffer)
        save_kwargs: dict[str, Any] = {"format": fmt.pil_name}

        if fmt is Format.JPEG:
            if img.getextrema()[3][0] < 255:
                # JPEG has no alpha: composite translucent pixels over black
                background = Image.new("RGB", img.size, (0, 0, 0))
                background.paste(img, mask=img.getchannel("A"))
                img = background
            else:
                img = img.convert("RGB")
            save_kwargs["quality"] = opts.jpeg_quality
        elif fmt is Format.PNG:
            save_kwargs["compress_level"] = opts.png_compression_level
        elif fmt is Format.GIF:
            dither = Image.Dither.FLOYDSTEINBERG if opts.gif_dither else Image.Dither.NONE
            img = img.convert("RGB").quantize(colors=opts.gif_num_colors, dither=dither)

        try:
            img.save(stream, **save_kwargs)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise CollaboratorFailure(f"Could not encode image as {fmt}: {e}", e) from e

    def save(
        self,
        buffer: PixelBuffer,
        destination_path: str,
        options: Optional[EncodeOptions] = None,
        fmt: Optional[Format] = None,
    ) -> None:
        """Save ``buffer`` to ``destination_path``; the format follows the extension unless given.

        Raises:
            UnsupportedFormatError: The extension is not a supported format.
            CollaboratorFailure: The file could not be created, written or closed.
            CompositeError: Encoding failed and closing the file failed as well.
        """
        target = fmt or format_from_filename(destination_path)
        try:
            handle = self.fs.create(destination_path)
        except OSError as e:
            LOGGER.error("Could not create %s: %s", destination_path, e)
            raise CollaboratorFailure(f"Error creating image file {destination_path}: {e}", e) from e

        run_and_close(handle, lambda fp: self.encoder.encode(fp, buffer, target, options))
        LOGGER.info("Saved %s as %s (%dx%d)", os.path.basename(destination_path), target, buffer.width, buffer.height)
