"""Destination path resolution and directory creation."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from gitclone.errors import DirectoryCreationError, HomeDirectoryError
from gitclone.models.location import RepositoryIdentity

logger = logging.getLogger(__name__)

DEFAULT_ROOT_SEGMENT = "src"
DIRECTORY_MODE = 0o755


def home_directory(env: Mapping[str, str] | None = None) -> Path:
    """The invoking user's home directory, from ``HOME`` (``USERPROFILE`` on Windows)."""
    env = os.environ if env is None else env
    variable = "USERPROFILE" if os.name == "nt" else "HOME"
    home = env.get(variable)
    if not home:
        raise HomeDirectoryError(
            f"Could not determine home directory (${variable} is not set); use --root"
        )
    return Path(home)


def default_root(env: Mapping[str, str] | None = None) -> Path:
    """Default source root: ``~/src``."""
    return home_directory(env) / DEFAULT_ROOT_SEGMENT


def resolve_destination(
    root: str | Path | None,
    identity: RepositoryIdentity,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Compute ``root/organization/repository``."""
    base = Path(root) if root is not None else default_root(env)
    return base / identity.relative_path


def ensure_directory_tree(path: str | Path) -> bool:
    """Create ``path`` and any missing ancestors, one component at a time.

    Existing directories are fine. Returns False (after logging) on any
    other failure, leaving already created directories in place.
    """
    parts = Path(path).parts
    current = Path()
    if Path(path).anchor:
        current, parts = Path(parts[0]), parts[1:]

    for part in parts:
        current = current / part
        try:
            os.mkdir(current, DIRECTORY_MODE)
            logger.debug(f"Created directory {current}")
        except FileExistsError:
            if not current.is_dir():
                logger.error(f"Cannot create directory {current}: a file is in the way")
                return False
        except OSError as e:
            logger.error(f"Cannot create directory {current}: {e}")
            return False
    return True


def prepare_destination(destination: Path) -> None:
    """Ensure the directory that will contain ``destination`` exists."""
    parent = destination.parent
    if not ensure_directory_tree(parent):
        raise DirectoryCreationError(parent)
