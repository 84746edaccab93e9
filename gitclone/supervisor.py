"""Run ``git clone --progress`` and narrate its output as a live progress bar.

git writes progress on stderr, redrawing each line with ``\\r`` and ending
finished phases with ``\\n``. Both streams are merged into one pipe, read in
fixed-size chunks and reassembled into lines by :class:`LineAssemblyBuffer`.
Each completed line is fed through :func:`update_progress` and redrawn.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Callable

from gitclone.errors import SpawnError
from gitclone.models.progress import DEFAULT_BAR_WIDTH, CloneResult, ProgressState
from gitclone.progress import ProgressRenderer, update_progress

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096
LINE_BUFFER_SIZE = 4096

LINE_TERMINATORS = frozenset(b"\r\n")


class SupervisorState(str, Enum):
    """Lifecycle of a supervised clone."""

    NOT_STARTED = "not_started"
    SPAWNED = "spawned"
    STREAMING = "streaming"
    EXITED = "exited"


class LineAssemblyBuffer:
    """Reassembles ``\\r``/``\\n`` terminated lines from arbitrary chunks.

    At most ``capacity`` bytes are kept per line; the rest of an overlong
    line is dropped. Empty lines (such as the ``\\n`` of a ``\\r\\n`` pair)
    are never emitted.
    """

    def __init__(self, capacity: int = LINE_BUFFER_SIZE) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._buffer = bytearray()

    def __len__(self) -> int:
        return len(self._buffer)

    def feed(self, chunk: bytes) -> list[str]:
        """Consume a chunk and return the lines it completed, in order."""
        lines: list[str] = []
        for byte in chunk:
            if byte in LINE_TERMINATORS:
                if self._buffer:
                    lines.append(self._buffer.decode("utf-8", errors="replace"))
                self._buffer.clear()
            elif len(self._buffer) < self.capacity:
                self._buffer.append(byte)
        return lines

    def clear(self) -> None:
        self._buffer.clear()


class CloneSupervisor:
    """Spawns git, streams its progress into a renderer and reports the exit.

    One supervisor handles one clone at a time. Failure of the child is
    reported through :class:`CloneResult`; only a failure to start it raises.
    """

    def __init__(
        self,
        git_executable: str = "git",
        renderer: ProgressRenderer | None = None,
        chunk_size: int = CHUNK_SIZE,
        line_buffer_size: int = LINE_BUFFER_SIZE,
        bar_width: int = DEFAULT_BAR_WIDTH,
        on_line: Callable[[str], None] | None = None,
    ) -> None:
        self.git_executable = git_executable
        self.renderer = renderer or ProgressRenderer()
        self.chunk_size = chunk_size
        self.line_buffer_size = line_buffer_size
        self.bar_width = bar_width
        self.on_line = on_line
        self.state = SupervisorState.NOT_STARTED
        self.progress = ProgressState(bar_width=bar_width)
        self.process: asyncio.subprocess.Process | None = None

    def build_command(self, url: str, destination: Path) -> list[str]:
        return [self.git_executable, "clone", "--progress", url, str(destination)]

    async def run(self, url: str, destination: str | Path) -> CloneResult:
        """Clone ``url`` into ``destination``, rendering progress as it goes."""
        destination = Path(destination)
        self.state = SupervisorState.NOT_STARTED
        self.progress = ProgressState(bar_width=self.bar_width)

        try:
            process = await self._spawn(self.build_command(url, destination))
        except SpawnError:
            self.state = SupervisorState.EXITED
            raise
        self.process = process
        self.state = SupervisorState.SPAWNED

        try:
            await self._stream(process)
        except BaseException:
            await self._terminate(process)
            raise

        returncode = await process.wait()
        self.state = SupervisorState.EXITED
        self.renderer.finish(self.progress)

        result = CloneResult(url=url, destination=destination, returncode=returncode)
        if result.success:
            logger.debug(f"git clone of {url} finished")
        else:
            logger.debug(f"git clone of {url} failed with return code {returncode}")
        return result

    async def _spawn(self, cmd: list[str]) -> asyncio.subprocess.Process:
        logger.debug(f"Spawning: {' '.join(cmd)}")
        try:
            return await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            raise SpawnError(cmd[0], e) from e

    async def _stream(self, process: asyncio.subprocess.Process) -> None:
        """Read the merged output until EOF; must finish before waiting on exit."""
        self.state = SupervisorState.STREAMING
        lines = LineAssemblyBuffer(self.line_buffer_size)

        while True:
            try:
                chunk = await process.stdout.read(self.chunk_size)
            except OSError as e:
                logger.warning(f"Reading git output failed: {e}")
                break
            if not chunk:
                break
            for line in lines.feed(chunk):
                self._handle_line(line)

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """Kill a child whose output can no longer be consumed and reap it."""
        if process.returncode is None:
            logger.debug(f"Killing git process {process.pid}")
            try:
                process.kill()
            except ProcessLookupError:
                pass
        await process.wait()
        self.state = SupervisorState.EXITED

    def _handle_line(self, line: str) -> None:
        if self.on_line is not None:
            self.on_line(line)
        update_progress(line, self.progress)
        self.renderer.render(self.progress)


def run_clone(url: str, destination: str | Path, **kwargs) -> CloneResult:
    """Synchronous wrapper around :meth:`CloneSupervisor.run`."""
    supervisor = CloneSupervisor(**kwargs)
    return asyncio.run(supervisor.run(url, destination))
