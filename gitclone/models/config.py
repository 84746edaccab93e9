"""Configuration model for gitclone."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from gitclone.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV = "GITCLONE_CONFIG"
ROOT_ENV = "GITCLONE_ROOT"
GIT_ENV = "GITCLONE_GIT"


class CloneConfig(BaseModel):
    """Settings for a clone run.

    Values are layered: defaults, then the YAML config file, then
    ``GITCLONE_*`` environment variables. The CLI ``--root`` option is
    applied on top by the caller.
    """

    root: Path | None = Field(default=None, description="Source root; None means $HOME/src")
    git_executable: str = Field(default="git", description="Executable spawned for the clone")
    bar_width: int = Field(default=40, ge=1, le=200, description="Progress bar width in cells")
    chunk_size: int = Field(default=4096, gt=0, description="Bytes per read from git's output")
    line_buffer_size: int = Field(
        default=4096, gt=0, description="Maximum bytes kept for one output line"
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def from_yaml(cls, path: Path) -> "CloneConfig":
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file {path} is not valid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return cls._validate(data, source=str(path))

    @classmethod
    def load(
        cls, path: Path | None = None, env: Mapping[str, str] | None = None
    ) -> "CloneConfig":
        """Load configuration from the default locations.

        An explicitly given ``path`` (or ``$GITCLONE_CONFIG``) must exist;
        the per-user default file is optional.
        """
        env = os.environ if env is None else env

        explicit = path or (Path(env[CONFIG_ENV]) if env.get(CONFIG_ENV) else None)
        data: dict[str, Any] = {}
        if explicit is not None:
            if not explicit.is_file():
                raise ConfigError(f"Config file not found: {explicit}")
            data = cls.from_yaml(explicit).model_dump(exclude_unset=True)
        else:
            default = default_config_path(env)
            if default is not None and default.is_file():
                logger.debug(f"Loading config from {default}")
                data = cls.from_yaml(default).model_dump(exclude_unset=True)

        if env.get(ROOT_ENV):
            data["root"] = env[ROOT_ENV]
        if env.get(GIT_ENV):
            data["git_executable"] = env[GIT_ENV]

        return cls._validate(data, source="environment")

    @classmethod
    def _validate(cls, data: dict[str, Any], source: str) -> "CloneConfig":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {source}: {e}") from e


def default_config_path(env: Mapping[str, str] | None = None) -> Path | None:
    """Per-user config file location, or None when no home is known."""
    env = os.environ if env is None else env
    if env.get("XDG_CONFIG_HOME"):
        return Path(env["XDG_CONFIG_HOME"]) / "gitclone" / "config.yaml"
    home = env.get("HOME") or env.get("USERPROFILE")
    if not home:
        return None
    return Path(home) / ".config" / "gitclone" / "config.yaml"
