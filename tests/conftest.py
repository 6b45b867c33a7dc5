"""Shared fixtures for the test suite."""
from typing import Iterator, List, Optional

import httpx
import pytest

from config import get_settings

BASE_URL = "https://passport.example.edu"
TOKEN = "abc123"
PHOTO_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF fake photo \x00\x01\x02\xff\xd9"


class PassportStub:
    """Stands in for the Passport service behind an httpx.MockTransport."""

    def __init__(
        self,
        status_code: int = 200,
        content: bytes = PHOTO_BYTES,
        error: Optional[type[httpx.TransportError]] = None,
    ):
        self.status_code = status_code
        self.content = content
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("simulated transport failure", request=request)
        return httpx.Response(self.status_code, content=self.content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class BrokenStream(httpx.SyncByteStream):
    """Response body that fails after the first chunk."""

    def __init__(self, first_chunk: bytes):
        self.first_chunk = first_chunk

    def __iter__(self) -> Iterator[bytes]:
        yield self.first_chunk
        raise httpx.ReadError("connection reset mid-stream")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep host environment variables and cached settings out of tests."""
    for name in (
        "PASSPORT_BASE_URL",
        "PASSPORT_TOKEN",
        "PASSPORT_TIMEOUT",
        "DOWNLOAD_DIR",
        "CREATE_DOWNLOAD_DIR",
        "DEBUG",
        "LOG_LEVEL",
        "LOG_JSON",
        "LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def passport():
    """A Passport stub answering 200 with a fake photo."""
    return PassportStub()


@pytest.fixture
def output_dir(tmp_path):
    """Existing directory photos are saved to."""
    directory = tmp_path / "photos"
    directory.mkdir()
    return directory
