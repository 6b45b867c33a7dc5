"""Pydantic schemas for photo requests and results."""

from .photo import PhotoRequest, PhotoResult, PhotoUnavailableError

__all__ = [
    "PhotoRequest",
    "PhotoResult",
    "PhotoUnavailableError",
]
