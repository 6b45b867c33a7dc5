"""Storage module for downloaded photos."""

from .base import PhotoSink, StorageError
from .local import LocalPhotoSink, PendingPhoto

__all__ = ["PhotoSink", "StorageError", "LocalPhotoSink", "PendingPhoto"]
