"""Passport photo client."""
import logging
import time
from typing import Mapping, Optional

import httpx
from pydantic import ValidationError

from config import Settings
from passport_photo.endpoints import (
    PhotoEndpoint,
    build_private_endpoint,
    build_public_endpoint,
    normalize_base_url,
)
from passport_photo.schemas import PhotoRequest, PhotoResult
from passport_photo.storage import LocalPhotoSink, StorageError

logger = logging.getLogger(__name__)


class PhotoClient:
    """Retrieves user photos from Passport and saves them to disk.

    Two endpoints are prepared at construction: the public one is always
    available, the private one only when a token is given. Without a token
    private retrieval is not attempted at all.

    Every retrieval returns a ``PhotoResult``. Transport errors, non-200
    responses, a missing token and unusable output directories all end up
    as a failed result; nothing is raised to the caller.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        *,
        timeout: float = 30.0,
        create_dirs: bool = False,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the photo client.

        Args:
            base_url: Passport base URL, e.g. ``https://passport.example.edu``.
            token: Bearer token enabling private photo retrieval.
            timeout: Request timeout in seconds.
            create_dirs: Create missing output directories instead of failing.
            transport: Optional httpx transport, used for testing.
        """
        self.base_url = normalize_base_url(base_url)
        self.timeout = timeout
        self.create_dirs = create_dirs

        self.public_endpoint: PhotoEndpoint = build_public_endpoint(self.base_url)
        self._public_http_client = self.public_endpoint.build_client(timeout, transport)

        self.private_endpoint: Optional[PhotoEndpoint] = None
        self._private_http_client: Optional[httpx.Client] = None
        if token:
            self.private_endpoint = build_private_endpoint(self.base_url, token)
            self._private_http_client = self.private_endpoint.build_client(timeout, transport)

        logger.debug(
            f"Initialized PhotoClient for {self.base_url} "
            f"(private access: {self.has_private_access})"
        )

    @property
    def has_private_access(self) -> bool:
        """Whether private photos can be requested."""
        return self._private_http_client is not None

    def get_private_photo(
        self,
        identifier: str,
        output_dir: str = "",
        params: Optional[Mapping[str, str]] = None,
    ) -> PhotoResult:
        """Retrieve a private photo by identifier or username.

        Args:
            identifier: A username or identifier for the user's photo.
            output_dir: Directory to save the file to, defaults to the system temp dir.
            params: Query parameters for the request, for options see
                    https://glide.thephpleague.com/1.0/api/quick-reference/

        Returns:
            PhotoResult: The absolute path of the saved photo, or a failure.
                         Always a failure when the client has no token.
        """
        if self.private_endpoint is None or self._private_http_client is None:
            logger.warning(f"Private photo requested for {identifier!r} but no token is configured")
            return PhotoResult.failure("private access requires a token")

        return self._get_photo(
            self.private_endpoint, self._private_http_client, identifier, output_dir, params
        )

    def get_public_photo(
        self,
        identifier: str,
        output_dir: str = "",
        params: Optional[Mapping[str, str]] = None,
    ) -> PhotoResult:
        """Retrieve a public photo by identifier or username.

        Args:
            identifier: A username or identifier for the user's photo.
            output_dir: Directory to save the file to, defaults to the system temp dir.
            params: Query parameters for the request, for options see
                    https://glide.thephpleague.com/1.0/api/quick-reference/

        Returns:
            PhotoResult: The absolute path of the saved photo, or a failure.
        """
        return self._get_photo(
            self.public_endpoint, self._public_http_client, identifier, output_dir, params
        )

    def _get_photo(
        self,
        endpoint: PhotoEndpoint,
        http_client: httpx.Client,
        identifier: str,
        output_dir: str = "",
        params: Optional[Mapping[str, str]] = None,
    ) -> PhotoResult:
        """Download one photo through the given endpoint."""
        try:
            request = PhotoRequest(identifier=identifier, output_dir=output_dir, params=params)
        except ValidationError as e:
            return self._failure(identifier, f"invalid request: {e.errors()[0]['msg']}")

        if http_client.is_closed:
            return self._failure(identifier, "client is closed")

        sink = LocalPhotoSink(request.output_dir, create_dirs=self.create_dirs)
        try:
            sink.ensure_output_dir()
        except StorageError as e:
            return self._failure(identifier, str(e))

        url = endpoint.url_for(request.identifier)
        visibility = "private" if endpoint.private else "public"
        logger.debug(f"Requesting {visibility} photo {url} -> {sink.destination(request.identifier)}")
        start_time = time.time()

        try:
            with http_client.stream("GET", url, params=request.params or None) as response:
                if response.status_code != 200:
                    return self._failure(identifier, f"HTTP {response.status_code}")

                with sink.open(request.identifier) as pending:
                    for chunk in response.iter_bytes():
                        pending.write(chunk)
                    path = pending.commit()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return self._failure(identifier, f"{type(e).__name__}: {e}")
        except (StorageError, OSError) as e:
            return self._failure(identifier, f"storage error: {e}")

        elapsed_time = time.time() - start_time
        logger.info(
            f"Saved photo for {identifier!r} to {path} "
            f"({pending.bytes_written} bytes in {elapsed_time:.2f}s)"
        )
        return PhotoResult.success(path)

    @staticmethod
    def _failure(identifier: str, reason: str) -> PhotoResult:
        logger.warning(f"Photo unavailable for {identifier!r}: {reason}")
        return PhotoResult.failure(reason)

    def close(self) -> None:
        """Release the underlying HTTP connections."""
        self._public_http_client.close()
        if self._private_http_client is not None:
            self._private_http_client.close()

    def __enter__(self) -> "PhotoClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_photo_client(settings: Settings) -> PhotoClient:
    """Factory function to create a photo client from settings.

    Args:
        settings: Application settings

    Returns:
        PhotoClient configured with the Passport URL, token and timeout.
    """
    if not settings.passport_base_url:
        raise ValueError("PASSPORT_BASE_URL must be set")

    logger.info(f"Creating PhotoClient for {settings.passport_base_url}")
    return PhotoClient(
        settings.passport_base_url,
        settings.passport_token,
        timeout=settings.passport_timeout,
        create_dirs=settings.create_download_dir,
    )
