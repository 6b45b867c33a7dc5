"""Local filesystem implementation of PhotoSink."""
import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO, Optional

from .base import PhotoSink, StorageError

logger = logging.getLogger(__name__)

PHOTO_SUFFIX = ".jpg"
PARTIAL_SUFFIX = ".part"


class PendingPhoto:
    """A photo being written next to its destination.

    Bytes go to a uniquely named ``.part`` file in the destination
    directory. ``commit()`` moves it over the destination in one step,
    ``discard()`` removes it. Leaving the ``with`` block without committing
    discards.
    """

    def __init__(self, destination: Path):
        self.destination = destination
        self.bytes_written = 0
        self._committed = False

        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=destination.name + ".",
                suffix=PARTIAL_SUFFIX,
                dir=str(destination.parent),
            )
        except OSError as e:
            logger.error(f"Failed to create temporary file for {destination}: {e}")
            raise StorageError(f"Failed to create temporary file: {e}") from e

        self.temp_path = Path(tmp_name)
        self._file: Optional[BinaryIO] = os.fdopen(fd, "wb")

    def write(self, chunk: bytes) -> int:
        """Append a chunk of the photo body."""
        if self._file is None:
            raise StorageError("Pending photo is already closed")
        written = self._file.write(chunk)
        self.bytes_written += written
        return written

    def _close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def commit(self) -> Path:
        """Move the written bytes to the destination, replacing any existing file.

        Returns:
            Path: Absolute destination path.

        Raises:
            StorageError: If the file cannot be moved into place.
        """
        try:
            self._close()
            os.replace(self.temp_path, self.destination)
        except OSError as e:
            logger.error(f"Failed to save photo to {self.destination}: {e}")
            self.discard()
            raise StorageError(f"Failed to save photo: {e}") from e

        self._committed = True
        logger.debug(f"Saved {self.bytes_written} bytes to: {self.destination}")
        return self.destination

    def discard(self) -> None:
        """Remove the partial file."""
        self._close()
        if self._committed:
            return
        try:
            self.temp_path.unlink(missing_ok=True)
            logger.debug(f"Discarded partial file: {self.temp_path}")
        except OSError as e:
            logger.warning(f"Failed to remove partial file {self.temp_path}: {e}")

    def __enter__(self) -> "PendingPhoto":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._committed:
            self.discard()


class LocalPhotoSink(PhotoSink):
    """Saves photos as ``{output_dir}/{identifier}.jpg`` on the local filesystem.

    The output directory defaults to the system temp directory. A missing
    directory is an error unless ``create_dirs`` is set.
    """

    def __init__(self, output_dir: Optional[str | Path] = "", create_dirs: bool = False):
        """Initialize local photo sink.

        Args:
            output_dir: Directory photos are saved to. Empty or None means
                        the system temp directory.
            create_dirs: Create the directory (and parents) when missing.
        """
        if output_dir:
            self.output_dir = Path(output_dir)
        else:
            self.output_dir = Path(tempfile.gettempdir())
        self.create_dirs = create_dirs

    def destination(self, identifier: str) -> Path:
        """Return the absolute path a photo for ``identifier`` is saved to."""
        return (self.output_dir / f"{identifier}{PHOTO_SUFFIX}").resolve()

    def ensure_output_dir(self) -> None:
        """Check the output directory exists, creating it if allowed.

        Raises:
            StorageError: If the directory is missing or cannot be created.
        """
        if self.output_dir.is_dir():
            return

        if self.output_dir.exists():
            raise StorageError(f"Output path is not a directory: {self.output_dir}")

        if not self.create_dirs:
            raise StorageError(f"Output directory does not exist: {self.output_dir}")

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created output directory: {self.output_dir}")
        except OSError as e:
            logger.error(f"Failed to create output directory: {e}")
            raise StorageError(f"Failed to create output directory: {e}") from e

    def open(self, identifier: str) -> PendingPhoto:
        """Start writing a photo for ``identifier``.

        Raises:
            StorageError: If the output directory is unusable.
        """
        self.ensure_output_dir()
        return PendingPhoto(self.destination(identifier))
