"""
Reporter that prints samples instead of sending them.
Used for local debugging on machines without a DogStatsD agent.
"""

from __future__ import annotations

from typing import IO, Optional

import click


class LogReporter:
    """Writes one "<tag> <value>" line per sample. Never fails."""

    def __init__(self, stream: Optional[IO[str]] = None):
        self._stream = stream

    def report(self, tag: str, value: str) -> None:
        click.echo(f"{tag} {value}", file=self._stream)

    def name(self) -> str:
        return "stdout"

    def close(self):
        pass
