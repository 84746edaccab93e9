"""Exceptions raised by gitclone.

Every failure ends the invocation; nothing here is retried.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitclone.models.location import ParseDiagnostic
    from gitclone.models.progress import CloneResult


class GitCloneError(Exception):
    """Base class for all gitclone failures."""


class LocationParseError(GitCloneError):
    """The location string is not a recognized git URL."""

    def __init__(self, diagnostic: ParseDiagnostic) -> None:
        super().__init__(f"{diagnostic.reason}: {diagnostic.original_input}")
        self.diagnostic = diagnostic


class HomeDirectoryError(GitCloneError):
    """No root was given and the home directory is unknown."""


class ConfigError(GitCloneError):
    """The configuration file or environment holds invalid settings."""


class DirectoryCreationError(GitCloneError):
    """A directory on the way to the destination could not be created."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"Could not create directory {path}")
        self.path = Path(path)


class SpawnError(GitCloneError):
    """The git child process could not be started."""

    def __init__(self, executable: str, cause: OSError) -> None:
        super().__init__(f"Could not start {executable}: {cause.strerror or cause}")
        self.executable = executable
        self.cause = cause


class CloneFailedError(GitCloneError):
    """git ran but did not exit successfully."""

    def __init__(self, result: CloneResult) -> None:
        if result.killed_by_signal:
            detail = f"killed by signal {-result.returncode}"
        else:
            detail = f"exit status {result.returncode}"
        super().__init__(f"git clone failed ({detail})")
        self.result = result
