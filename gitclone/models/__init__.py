"""Data models for gitclone."""

from gitclone.models.config import CloneConfig
from gitclone.models.location import LocationFormat, ParseDiagnostic, RepositoryIdentity
from gitclone.models.progress import CloneResult, ProgressState

__all__ = [
    # Location models
    "LocationFormat",
    "ParseDiagnostic",
    "RepositoryIdentity",
    # Progress models
    "ProgressState",
    "CloneResult",
    # Configuration
    "CloneConfig",
]
