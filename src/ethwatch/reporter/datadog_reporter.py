"""
Reporter for a local DogStatsD agent.

Every sample goes out as a gauge with a fixed set of constant tags.
The UDP socket is opened up front so a bad agent address fails the
process at startup instead of silently dropping every sample later.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from datadog.dogstatsd import DogStatsd

from ethwatch.errors import BackendUnavailable, ReportError, TransportError

log = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8125
DEFAULT_CONSTANT_TAGS = ("tag:required",)


class DatadogReporter:
    """Sends each sample as a DogStatsD gauge; dropped packets raise TransportError."""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        constant_tags: Iterable[str] = DEFAULT_CONSTANT_TAGS,
        namespace: Optional[str] = None,
    ):
        self._address = f"{host}:{port}"
        self._constant_tags = list(constant_tags)

        try:
            self._client = DogStatsd(
                host=host,
                port=port,
                namespace=namespace,
                constant_tags=self._constant_tags,
                disable_telemetry=False,
            )
            self._client.get_socket()
        except (OSError, ValueError) as e:
            raise BackendUnavailable(f"cannot reach DogStatsD at {self._address}: {e}") from e

        log.debug("DogStatsD client ready: %s tags=%s", self._address, self._constant_tags)

    def report(self, tag: str, value: str) -> None:
        try:
            sample = int(value)
        except ValueError as e:
            raise ReportError(f"{tag}: not an integer sample: {value!r}") from e

        # the client logs and swallows socket errors, only its drop counter moves
        dropped = self._client.packets_dropped_writer
        try:
            self._client.gauge(tag, sample)
        except OSError as e:
            raise TransportError(f"{tag}: send to {self._address} failed: {e}") from e
        if self._client.packets_dropped_writer > dropped:
            raise TransportError(f"{tag}: packet to {self._address} was dropped")

    def name(self) -> str:
        return f"DogStatsD ({self._address})"

    def close(self):
        try:
            self._client.close_socket()
        except OSError:
            pass
