"""Progress and clone outcome models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_BAR_WIDTH = 40


@dataclass
class ProgressState:
    """Live progress of one clone, updated in place as git reports it.

    Counters are not guaranteed to be consistent: a new phase restarts them,
    and malformed output may report ``current > total``.
    """

    phase_label: str = ""
    current: int = 0
    total: int = 100
    bar_width: int = DEFAULT_BAR_WIDTH

    @property
    def percent(self) -> int:
        """Completion percentage clamped to 0..100."""
        if self.total <= 0:
            return 0
        return max(0, min(100, self.current * 100 // self.total))

    @property
    def filled(self) -> int:
        """Number of filled bar cells for the current percentage."""
        return self.bar_width * self.percent // 100


class CloneResult(BaseModel):
    """Outcome of a supervised ``git clone``."""

    url: str
    destination: Path
    returncode: int | None = Field(
        default=None, description="Exit status; negative when killed by a signal"
    )

    @property
    def success(self) -> bool:
        """True only for a normal exit with status 0."""
        return self.returncode == 0

    @property
    def killed_by_signal(self) -> bool:
        return self.returncode is not None and self.returncode < 0
