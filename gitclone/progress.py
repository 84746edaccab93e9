"""Parse git's progress lines and draw a single-line progress bar."""

from __future__ import annotations

import sys
from typing import TextIO

from gitclone.models.progress import ProgressState

# Marker emitted by `git clone --progress` -> label shown in the bar.
PHASES = {
    "Counting objects:": "Counting",
    "Compressing objects:": "Compressing",
    "Receiving objects:": "Receiving",
    "Resolving deltas:": "Resolving",
}

LABEL_WIDTH = max(len(label) for label in PHASES.values())

FILLED_CELL = "█"
EMPTY_CELL = "░"
ASCII_FILLED_CELL = "#"
ASCII_EMPTY_CELL = "-"
CLEAR_LINE = "\r\x1b[K"


def parse_progress_line(line: str) -> tuple[str, int, int] | None:
    """Extract ``(label, current, total)`` from one line of git output.

    Returns None for lines without a known phase marker or whose
    parenthesized counter segment is missing or not numeric.
    """
    for marker, label in PHASES.items():
        start = line.find(marker)
        if start == -1:
            continue
        counters = _parse_counters(line, start + len(marker))
        if counters is None:
            return None
        return (label, *counters)
    return None


def update_progress(line: str, state: ProgressState) -> None:
    """Apply a progress line to ``state``; unrecognized lines change nothing."""
    parsed = parse_progress_line(line)
    if parsed is None:
        return
    state.phase_label, state.current, state.total = parsed


def _parse_counters(line: str, offset: int) -> tuple[int, int] | None:
    # e.g. "Receiving objects:  42% (420/1000), 1.20 MiB | 2.00 MiB/s"
    open_paren = line.find("(", offset)
    if open_paren == -1:
        return None
    close_paren = line.find(")", open_paren)
    if close_paren == -1:
        return None

    current_text, slash, total_text = line[open_paren + 1 : close_paren].partition("/")
    if not slash:
        return None

    current = _parse_count(current_text)
    if current is None:
        return None
    total = _parse_count(total_text.split(",", 1)[0])
    if total is None:
        return None
    return current, total


def _parse_count(text: str) -> int | None:
    text = text.strip()
    # ASCII digits only
    if not text or not text.isascii() or not text.isdigit():
        return None
    return int(text)


class ProgressRenderer:
    """Draws a :class:`ProgressState` as one line, overwritten in place."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def cells(self) -> tuple[str, str]:
        """Block cells, or ASCII ones when the stream encoding cannot represent them."""
        encoding = getattr(self.stream, "encoding", None)
        if encoding:
            try:
                (FILLED_CELL + EMPTY_CELL).encode(encoding)
            except (UnicodeEncodeError, LookupError):
                return ASCII_FILLED_CELL, ASCII_EMPTY_CELL
        return FILLED_CELL, EMPTY_CELL

    def format(self, state: ProgressState) -> str:
        """Build the escape sequence and bar text for ``state``."""
        percent = state.percent
        filled = state.filled
        filled_cell, empty_cell = self.cells()
        bar = filled_cell * filled + empty_cell * (state.bar_width - filled)
        return (
            f"{CLEAR_LINE}{state.phase_label:<{LABEL_WIDTH}} [{bar}] "
            f"{percent}% ({state.current}/{state.total})"
        )

    def render(self, state: ProgressState) -> None:
        """Redraw the bar without moving to a new line."""
        self.stream.write(self.format(state))
        self.stream.flush()

    def finish(self, state: ProgressState) -> None:
        """Draw the final state and end the line."""
        self.render(state)
        self.stream.write("\n")
        self.stream.flush()
