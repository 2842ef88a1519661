"""
Reporter capability.

A reporter is anything that can take a (metric name, value) pair and
send it somewhere. The driver and watchers only rely on report(), so the
DogStatsD sink, the stdout sink, or any object with that one method stay
interchangeable. The bundled reporters also offer name() and close();
callers that own a concrete reporter use those, nothing else may assume them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Reporter(Protocol):
    """Sink for gauge samples."""

    def report(self, tag: str, value: str) -> None:
        """Send one sample. Raises ReportError if it was not accepted."""
        ...


def reporter_name(reporter: Reporter) -> str:
    """Human-readable name for a sink, falling back to its class name."""
    name = getattr(reporter, "name", None)
    if callable(name):
        return name()
    return type(reporter).__name__
