"""Photo request and result schemas."""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PhotoUnavailableError(Exception):
    """Raised when a failed result is unwrapped."""

    def __init__(self, reason: Optional[str] = None):
        self.reason = reason
        super().__init__(f"Photo unavailable: {reason}" if reason else "Photo unavailable")


class PhotoRequest(BaseModel):
    """A single photo retrieval.

    The identifier is both the remote resource key and the stem of the
    saved file name, so it must be usable as a bare file name.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(
        ...,
        min_length=1,
        description="Username or identifier of the user whose photo is requested.",
        examples=["jdoe"]
    )
    output_dir: str = Field(
        default="",
        description="Directory the photo is saved to. Empty means the system temp dir."
    )
    params: Dict[str, str] = Field(
        default_factory=dict,
        description="Query parameters forwarded verbatim to Passport"
                    " (Glide image transforms, e.g. w, h, fit).",
        examples=[{"w": "200", "h": "200", "fit": "crop"}]
    )

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Reject identifiers that would escape the output directory."""
        if v in (".", "..") or "/" in v or "\\" in v or "\x00" in v:
            raise ValueError("identifier must be a bare file name")
        return v

    @field_validator("output_dir", mode="before")
    @classmethod
    def normalize_output_dir(cls, v: Any) -> str:
        """Accept Path objects and None."""
        if v is None:
            return ""
        return str(v)

    @field_validator("params", mode="before")
    @classmethod
    def stringify_params(cls, v: Any) -> Dict[str, str]:
        """Coerce query parameter values to strings."""
        if v is None:
            return {}
        if not isinstance(v, Mapping):
            try:
                v = dict(v)
            except (TypeError, ValueError) as e:
                raise ValueError("params must be a mapping or an iterable of pairs") from e
        return {str(key): str(value) for key, value in v.items()}


class PhotoResult(BaseModel):
    """Outcome of a photo retrieval: a saved file or a failure.

    ``error`` is kept for logging and debugging only. Callers should treat
    every failure the same way, as "photo unavailable".
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    path: Optional[Path] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, path: Path) -> "PhotoResult":
        return cls(ok=True, path=path)

    @classmethod
    def failure(cls, reason: str) -> "PhotoResult":
        return cls(ok=False, error=reason)

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> Path:
        """Return the saved file path.

        Raises:
            PhotoUnavailableError: If the retrieval failed.
        """
        if not self.ok or self.path is None:
            raise PhotoUnavailableError(self.error)
        return self.path
