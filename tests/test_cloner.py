"""Tests for the GitCloner facade."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable
from unittest.mock import patch

import pytest

from gitclone.cloner import GitCloner
from gitclone.errors import (
    CloneFailedError,
    DirectoryCreationError,
    HomeDirectoryError,
    LocationParseError,
)
from gitclone.models.config import CloneConfig
from gitclone.progress import ProgressRenderer


def make_cloner(output: io.StringIO, **config) -> GitCloner:
    return GitCloner(CloneConfig(**config), renderer=ProgressRenderer(output), env={})


class TestPrepare:
    """Tests for validation and directory preparation."""

    def test_explicit_root(self, temp_dir: Path, output: io.StringIO) -> None:
        cloner = make_cloner(output)
        destination = cloner.prepare("git@github.com:org/repo.git", temp_dir / "x")

        assert destination == temp_dir / "x" / "org" / "repo"
        assert (temp_dir / "x" / "org").is_dir()

    def test_configured_root(self, temp_dir: Path, output: io.StringIO) -> None:
        cloner = make_cloner(output, root=temp_dir / "configured")
        destination = cloner.prepare("https://github.com/org/repo")
        assert destination == temp_dir / "configured" / "org" / "repo"

    def test_argument_overrides_config(self, temp_dir: Path, output: io.StringIO) -> None:
        cloner = make_cloner(output, root=temp_dir / "configured")
        destination = cloner.prepare("https://github.com/org/repo", temp_dir / "cli")
        assert destination == temp_dir / "cli" / "org" / "repo"

    def test_home_default(self, temp_dir: Path, output: io.StringIO) -> None:
        cloner = GitCloner(
            renderer=ProgressRenderer(output), env={"HOME": str(temp_dir), "USERPROFILE": str(temp_dir)}
        )
        destination = cloner.prepare("git@github.com:org/repo.git")
        assert destination == temp_dir / "src" / "org" / "repo"

    def test_no_home(self, output: io.StringIO) -> None:
        with pytest.raises(HomeDirectoryError):
            make_cloner(output).prepare("git@github.com:org/repo.git")

    def test_parse_error_before_filesystem(self, temp_dir: Path, output: io.StringIO) -> None:
        cloner = make_cloner(output)
        with patch("gitclone.cloner.prepare_destination") as prepare:
            with pytest.raises(LocationParseError):
                cloner.prepare("/local/path", temp_dir)
        prepare.assert_not_called()
        assert list(temp_dir.iterdir()) == []

    def test_directory_error(self, temp_dir: Path, output: io.StringIO) -> None:
        (temp_dir / "org").write_text("")
        with pytest.raises(DirectoryCreationError):
            make_cloner(output).prepare("git@github.com:org/repo.git", temp_dir)


@pytest.mark.subprocess
class TestCloneRepository:
    """Tests for the full pipeline with a stub git."""

    @pytest.mark.asyncio
    async def test_success(
        self, git_stub: Callable[..., Path], temp_dir: Path, output: io.StringIO
    ) -> None:
        cloner = make_cloner(output, git_executable=str(git_stub()), bar_width=10)
        result = await cloner.clone_repository("git@github.com:org/repo.git", temp_dir / "x")

        assert result.success is True
        assert result.destination == temp_dir / "x" / "org" / "repo"
        assert (temp_dir / "x" / "org" / "repo").is_dir()
        assert output.getvalue().endswith("100% (3/3)\n")

    @pytest.mark.asyncio
    async def test_failure_raises(
        self, git_stub: Callable[..., Path], temp_dir: Path, output: io.StringIO
    ) -> None:
        cloner = make_cloner(output, git_executable=str(git_stub(body="", exit_code=1)))

        with pytest.raises(CloneFailedError) as exc_info:
            await cloner.clone_repository("git@github.com:org/repo.git", temp_dir)

        assert exc_info.value.result.returncode == 1
        assert "clone failed" in str(exc_info.value)
        # No rollback of the organization directory
        assert (temp_dir / "org").is_dir()
