"""Main GitCloner class - unified interface for cloning into a source tree."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from gitclone.errors import CloneFailedError
from gitclone.location import require_identity
from gitclone.models.config import CloneConfig
from gitclone.models.location import RepositoryIdentity
from gitclone.models.progress import CloneResult
from gitclone.paths import prepare_destination, resolve_destination
from gitclone.progress import ProgressRenderer
from gitclone.supervisor import CloneSupervisor

logger = logging.getLogger(__name__)


class GitCloner:
    """Clones repositories into ``<root>/<organization>/<repository>``."""

    def __init__(
        self,
        config: CloneConfig | None = None,
        renderer: ProgressRenderer | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.config = config or CloneConfig()
        self.renderer = renderer or ProgressRenderer()
        self.env = env

    def identify(self, location: str) -> RepositoryIdentity:
        """Parse a location, printing a diagnostic and raising if it is invalid."""
        return require_identity(location)

    def destination_for(self, identity: RepositoryIdentity, root: str | Path | None = None) -> Path:
        """Where ``identity`` is cloned; ``root`` overrides the configured root."""
        base = root if root is not None else self.config.root
        return resolve_destination(base, identity, env=self.env)

    def prepare(self, location: str, root: str | Path | None = None) -> Path:
        """Validate the location and create the organization directory.

        Nothing touches the filesystem until the location has parsed and the
        root has resolved.
        """
        identity = self.identify(location)
        destination = self.destination_for(identity, root)
        logger.debug(f"Resolved {location} to {destination}")
        prepare_destination(destination)
        return destination

    def supervisor(self) -> CloneSupervisor:
        return CloneSupervisor(
            git_executable=self.config.git_executable,
            renderer=self.renderer,
            chunk_size=self.config.chunk_size,
            line_buffer_size=self.config.line_buffer_size,
            bar_width=self.config.bar_width,
        )

    async def clone(self, location: str, destination: Path) -> CloneResult:
        """Run git for a prepared destination; raises CloneFailedError on failure."""
        result = await self.supervisor().run(location, destination)
        if not result.success:
            raise CloneFailedError(result)
        return result

    async def clone_repository(self, location: str, root: str | Path | None = None) -> CloneResult:
        """Parse, prepare and clone in one step."""
        destination = self.prepare(location, root)
        return await self.clone(location, destination)
