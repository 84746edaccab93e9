"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from gitclone.progress import ProgressRenderer

# Shell snippet reproducing what `git clone --progress` writes: phases
# redrawn with \r on stderr, finished phases ended with \n.
GIT_PROGRESS_OUTPUT = r"""printf 'Cloning into %s...\n' "$4"
printf 'remote: Counting objects:  50%% (5/10)\rremote: Counting objects: 100%% (10/10), done.\n' >&2
printf 'remote: Compressing objects: 100%% (8/8), done.\n' >&2
printf 'Receiving objects:  50%% (5/10)\rReceiving objects: 100%% (10/10), 1.20 KiB | 1.20 MiB/s, done.\r\n' >&2
printf 'Resolving deltas: 100%% (3/3), done.\n' >&2
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def git_stub(temp_dir: Path) -> Callable[..., Path]:
    """Factory for fake git executables.

    The stub records its arguments in ``<temp_dir>/bin/args.txt``, runs
    ``body`` and exits with ``exit_code``. By default it prints realistic
    clone progress and creates the destination directory.
    """
    bin_dir = temp_dir / "bin"
    bin_dir.mkdir()

    def make(
        body: str = GIT_PROGRESS_OUTPUT + 'mkdir -p "$4"\n',
        exit_code: int = 0,
    ) -> Path:
        script = bin_dir / "git"
        script.write_text(
            "#!/bin/sh\n"
            f'echo "$@" > "{bin_dir / "args.txt"}"\n'
            f"{body}\n"
            f"exit {exit_code}\n"
        )
        script.chmod(0o755)
        return script

    return make


@pytest.fixture
def output() -> io.StringIO:
    """Captures what the progress renderer draws."""
    return io.StringIO()


@pytest.fixture
def renderer(output: io.StringIO) -> ProgressRenderer:
    return ProgressRenderer(stream=output)


def pytest_configure(config):
    config.addinivalue_line("markers", "subprocess: tests that spawn a stub git via /bin/sh")
