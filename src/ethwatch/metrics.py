"""
Core value types for ethwatch.

A CounterEntry ties one sysfs counter file to the metric name it is
reported under. Each sweep produces one EntryResult per entry, so a
failed read never has to travel as an exception past the entry that
caused it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ethwatch.errors import EthwatchError


@dataclass(frozen=True)
class CounterEntry:
    path: Path
    tag: str  # prefix + alias + "." + counter file name


@dataclass
class EntryResult:
    """Outcome of reading and reporting one counter in one sweep."""

    entry: CounterEntry
    value: Optional[int] = None
    error: Optional[EthwatchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def tag(self) -> str:
        return self.entry.tag


@dataclass
class SweepResult:
    """All entry results from one pass over every watched interface."""

    results: List[EntryResult] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def tags(self) -> List[str]:
        return [r.tag for r in self.results]

    def errors(self) -> List[EntryResult]:
        return [r for r in self.results if not r.ok]

    def summary(self) -> dict:
        """Return a plain dict for logging."""
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }
