"""Sweep loop: report every counter of every watcher, wait, repeat."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Sequence, Set

from ethwatch.collector.interface import InterfaceWatcher
from ethwatch.errors import EmptyConfiguration
from ethwatch.metrics import EntryResult, SweepResult
from ethwatch.reporter.base import Reporter, reporter_name

log = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.5


class ReportDriver:
    """Owns the watchers and the one shared reporter.

    Per-entry failures are logged and dropped; nothing is retried beyond
    trying the same file again on the next sweep.
    """

    def __init__(
        self,
        watchers: Sequence[InterfaceWatcher],
        reporter: Reporter,
        interval: float = DEFAULT_INTERVAL,
    ):
        if not watchers:
            raise EmptyConfiguration("no interfaces could be discovered")

        self._watchers: List[InterfaceWatcher] = list(watchers)
        self._reporter = reporter
        self._interval = interval
        # tags whose last attempt failed, so each outage is warned about once
        self._failing: Set[str] = set()

    @property
    def watchers(self) -> List[InterfaceWatcher]:
        return list(self._watchers)

    @property
    def interval(self) -> float:
        return self._interval

    def sweep(self) -> SweepResult:
        result = SweepResult()
        for watcher in self._watchers:
            result.results.extend(watcher.report(self._reporter))

        for entry_result in result.results:
            self._log_outcome(entry_result)

        log.debug(
            "Sweep done: %(attempted)d attempted, %(succeeded)d reported, %(failed)d skipped",
            result.summary(),
        )
        return result

    def run(self, stop: Optional[threading.Event] = None, max_sweeps: Optional[int] = None) -> int:
        """Sweep until `stop` is set or `max_sweeps` is reached.

        The interval is waited after each sweep finishes. A stop request
        lets the sweep in progress complete. Returns the number of sweeps.
        """
        if stop is None:
            stop = threading.Event()

        log.info(
            "Reporting %d interfaces to %s every %.2fs",
            len(self._watchers), reporter_name(self._reporter), self._interval,
        )

        sweeps = 0
        while not stop.is_set():
            self.sweep()
            sweeps += 1
            if max_sweeps is not None and sweeps >= max_sweeps:
                break
            if stop.wait(self._interval):
                break

        log.info("Stopped after %d sweeps", sweeps)
        return sweeps

    def _log_outcome(self, entry_result: EntryResult):
        tag = entry_result.tag
        if entry_result.ok:
            if tag in self._failing:
                self._failing.discard(tag)
                log.info("%s: reporting again", tag)
            return

        error = entry_result.error
        if tag in self._failing:
            log.debug("%s: still skipped (%s: %s)", tag, type(error).__name__, error)
        else:
            self._failing.add(tag)
            log.warning("%s: skipped (%s: %s)", tag, type(error).__name__, error)
