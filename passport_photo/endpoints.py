"""Passport endpoint configuration.

An endpoint is the immutable description of one logical Passport route:
the root URI avatars are requested under and the headers sent with every
request. The client builds one ``httpx.Client`` per endpoint and never
mutates either afterwards.
"""
from typing import Dict, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field

from passport_photo import __version__

USER_AGENT = f"OpenResourceManager/PassportPhotoClient/{__version__}"

PUBLIC_AVATAR_PATH = "img/avatar/"
PRIVATE_AVATAR_PATH = "img/private/avatar/"


class PhotoEndpoint(BaseModel):
    """Root URI and request headers for one avatar route."""

    model_config = ConfigDict(frozen=True)

    base_uri: str = Field(
        ...,
        description="Absolute URI ending with '/', identifiers are appended to it."
    )
    headers: Dict[str, str] = Field(
        default_factory=dict,
        repr=False,
        description="Headers sent with every request to this endpoint."
    )
    private: bool = Field(
        default=False,
        description="Whether requests carry a bearer token."
    )

    def url_for(self, identifier: str) -> str:
        """Build the avatar URL for an identifier."""
        return self.base_uri + quote(identifier, safe="")

    def build_client(
        self,
        timeout: float,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> httpx.Client:
        """Create an HTTP client preconfigured for this endpoint."""
        return httpx.Client(
            headers=dict(self.headers),
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )


def normalize_base_url(base_url: str) -> str:
    """Strip trailing slashes from the Passport base URL.

    Raises:
        ValueError: If the URL is empty or not an absolute http(s) URL.
    """
    if not base_url or not base_url.strip():
        raise ValueError("Passport base URL cannot be empty")

    normalized = base_url.strip().rstrip("/")
    try:
        url = httpx.URL(normalized)
    except httpx.InvalidURL as e:
        raise ValueError(f"Invalid Passport base URL {normalized!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ValueError(f"Passport base URL must be an absolute http(s) URL: {normalized!r}")
    return normalized


def _default_headers() -> Dict[str, str]:
    return {
        "User-Agent": USER_AGENT,
        "Accept": "*/*",
    }


def build_public_endpoint(base_url: str) -> PhotoEndpoint:
    """Endpoint for unauthenticated avatar requests."""
    return PhotoEndpoint(
        base_uri="/".join([normalize_base_url(base_url), PUBLIC_AVATAR_PATH]),
        headers=_default_headers(),
    )


def build_private_endpoint(base_url: str, token: str) -> PhotoEndpoint:
    """Endpoint for avatar requests authorized with a bearer token.

    Raises:
        ValueError: If the token is empty.
    """
    if not token:
        raise ValueError("A token is required for the private endpoint")

    headers = _default_headers()
    headers["Authorization"] = f"Bearer {token}"
    return PhotoEndpoint(
        base_uri="/".join([normalize_base_url(base_url), PRIVATE_AVATAR_PATH]),
        headers=headers,
        private=True,
    )
