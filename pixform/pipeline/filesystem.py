"""File access used by the loader and saver.

The file system is always passed in explicitly, so tests hand a fake to the
loader or saver they build instead of swapping shared state.
"""

from __future__ import annotations

from collections.abc import Callable
import os
from typing import BinaryIO, Protocol, TypeVar

from pixform.exceptions import CollaboratorFailure, CompositeError

T = TypeVar("T")


class FileSystem(Protocol):
    """Opens files for reading and creates files for writing."""

    def open(self, name: str) -> BinaryIO: ...

    def create(self, name: str) -> BinaryIO: ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def open(self, name: str) -> BinaryIO:
        return open(name, "rb")

    def create(self, name: str) -> BinaryIO:
        dir_path = os.path.dirname(name)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)
        return open(name, "wb")


def run_and_close(handle: BinaryIO, operation: Callable[[BinaryIO], T]) -> T:
    """Run ``operation(handle)`` and always close ``handle``.

    Raises:
        CompositeError: Both the operation and the close failed.
        CollaboratorFailure: Only the close failed.
        Exception: Whatever the operation raised, if closing succeeded.
    """
    try:
        result = operation(handle)
    except Exception as primary:
        try:
            handle.close()
        except Exception as secondary:
            raise CompositeError(primary, secondary) from primary
        raise

    try:
        handle.close()
    except Exception as exc:
        raise CollaboratorFailure(f"failed to close file: {exc}", exc) from exc
    return result
