"""Sink interface for downloaded photos."""

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .local import PendingPhoto


@runtime_checkable
class PhotoSink(Protocol):
    """Where downloaded photo bytes end up.

    A sink hands out a pending file per download. Bytes are streamed into
    it and only become visible at the destination path once committed, so
    a failed download never replaces an existing photo.
    """

    def destination(self, identifier: str) -> Path:
        """Return the absolute path a photo for ``identifier`` is saved to."""
        ...

    def open(self, identifier: str) -> "PendingPhoto":
        """Start writing a photo for ``identifier``.

        Raises:
            StorageError: If the photo cannot be written.
        """
        ...


class StorageError(Exception):
    """Base exception for storage-related errors."""
    pass
