"""Repository location models: parsed identity and parse diagnostics."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

VALID_FORMATS = (
    ("SSH", "git@github.com:org/repo.git"),
    ("HTTPS", "https://github.com/org/repo.git"),
    ("HTTP", "http://github.com/org/repo.git"),
)


class LocationFormat(str, Enum):
    """Shape of a repository location string."""

    SSH = "SSH"
    HTTPS = "https"
    HTTP = "http"
    UNKNOWN = "local path or invalid format"


class RepositoryIdentity(BaseModel):
    """The (organization, repository) pair a location string resolves to."""

    model_config = ConfigDict(frozen=True)

    organization: str = Field(..., min_length=1, description="Owner, user or group")
    repository: str = Field(..., min_length=1, description="Repository name without .git")

    @field_validator("organization", "repository")
    @classmethod
    def _no_relative_components(cls, value: str) -> str:
        if any(part in (".", "..") for part in value.split("/")):
            raise ValueError(f"'{value}' would escape the source root")
        return value

    @property
    def relative_path(self) -> Path:
        """Path of the clone relative to the source root."""
        return Path(self.organization) / self.repository

    def __str__(self) -> str:
        return f"{self.organization}/{self.repository}"


class ParseDiagnostic(BaseModel):
    """Why a location string could not be parsed.

    Only ``reason`` and ``original_input`` are always present. The optional
    fields are filled in when the parser got far enough to know them.
    """

    model_config = ConfigDict(frozen=True)

    reason: str
    original_input: str
    detected_format: str | None = None
    offending_fragment: str | None = None
    expected_shape: str | None = None

    def render(self) -> str:
        """Render the multi-line human readable diagnostic."""
        lines = [
            "",
            f"❌ Failed to parse git URL: {self.original_input}",
            f"   └─ {self.reason}",
        ]
        if self.detected_format is not None:
            lines.append(f"   └─ Detected format: {self.detected_format}")
        if self.offending_fragment is not None:
            lines.append(f"   └─ Found: {self.offending_fragment}")
        if self.expected_shape is not None:
            lines.append(f"   └─ Expected: {self.expected_shape}")

        lines.append("")
        lines.append("Valid URL formats:")
        for label, example in VALID_FORMATS:
            lines.append(f"  {label + ':':<6} {example}")
        lines.append("")
        return "\n".join(lines)
