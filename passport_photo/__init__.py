"""Client for retrieving user photos from the Passport image service."""

__version__ = "0.0.1"

from passport_photo.client import PhotoClient, create_photo_client  # noqa: E402
from passport_photo.schemas import (  # noqa: E402
    PhotoRequest,
    PhotoResult,
    PhotoUnavailableError,
)

__all__ = [
    "PhotoClient",
    "PhotoRequest",
    "PhotoResult",
    "PhotoUnavailableError",
    "create_photo_client",
    "__version__",
]
