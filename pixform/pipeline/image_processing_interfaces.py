"""image_processing_interfaces.py.

Defines the data container handed back by decoders and the interfaces the
codec collaborators implement. Transforms never depend on these; only the
loader/saver glue does.
"""

from dataclasses import dataclass, field
from typing import Any, BinaryIO, Protocol

from pixform.buffer import PixelBuffer

from .formats import EncodeOptions, Format


@dataclass
class ImageData:
    """A decoded image together with what the decoder learned about it.

    Attributes:
        buffer (PixelBuffer): The decoded pixels.
        source_path (Optional[str]): The file the image came from, if any.
        metadata (Dict[str, Any]): Decoder facts such as ``format``, ``mode``
            and the ``orientation`` tag that was applied.
    """

    buffer: PixelBuffer
    source_path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    def update_metadata(self, new_meta: dict[str, Any]) -> None:
        """Merge ``new_meta`` into the metadata dictionary."""
        self.metadata.update(new_meta)


class Decoder(Protocol):
    """Turns an encoded byte stream into pixels."""

    def decode(self, stream: BinaryIO, auto_orient: bool = False) -> ImageData:
        """Decode ``stream``.

        Args:
            stream: Readable binary stream positioned at the image start.
            auto_orient: Apply the EXIF orientation tag to the pixels.

        Raises:
            UnsupportedFormatError: The container format is unknown.
            CorruptDataError: The stream is recognized but unreadable.
            MalformedMetadataError: ``auto_orient`` was set and the orientation
                tag could not be read.
        """
        ...


class Encoder(Protocol):
    """Turns pixels into an encoded byte stream."""

    def encode(
        self,
        stream: BinaryIO,
        buffer: PixelBuffer,
        fmt: Format,
        options: EncodeOptions | None = None,
    ) -> None:
        """Write ``buffer`` to ``stream`` in ``fmt``.

        Raises:
            UnsupportedFormatError: ``fmt`` cannot be written.
            CollaboratorFailure: The encoder itself failed.
        """
        ...
