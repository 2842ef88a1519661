"""
Per-interface statistics watcher.

Resolves a configured identifier to /sys/class/net/<iface>/statistics,
lists the counter files there once, and on every sweep reads, parses and
reports each of them independently. A counter that fails only loses its
own sample for that sweep.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import List, Tuple, Union

from ethwatch.errors import (
    DiscoveryError,
    EthwatchError,
    InvalidInterfaceName,
    ParseError,
    ReadError,
    ReportError,
)
from ethwatch.metrics import CounterEntry, EntryResult
from ethwatch.reporter.base import Reporter

log = logging.getLogger(__name__)

SYSFS_NET_ROOT = Path("/sys/class/net")

# Kernel interface names are at most IFNAMSIZ - 1 bytes.
MAX_INTERFACE_NAME = 15
COUNTER_MAX = 2 ** 64 - 1

_QUOTES = ("\"", "'")
_BAD_NAME_RE = re.compile(r"[/\s\x00\"']")
_DIGITS_RE = re.compile(r"[0-9]+")


def resolve_interface_name(identifier: str) -> str:
    """Turn a configured identifier into a kernel interface name.

    Accepts either a bare name (eth0) or one wrapped in a single matching
    pair of quotes ("eth0" or 'eth0'). Anything that would not name a
    directory under /sys/class/net is rejected rather than trimmed.
    """
    name = identifier
    if len(name) >= 2 and name[0] in _QUOTES and name[-1] == name[0]:
        name = name[1:-1]

    if not name:
        raise InvalidInterfaceName(f"empty interface name in {identifier!r}")
    if len(name) > MAX_INTERFACE_NAME:
        raise InvalidInterfaceName(
            f"interface name {name!r} longer than {MAX_INTERFACE_NAME} characters"
        )
    if name in (".", "..") or _BAD_NAME_RE.search(name):
        raise InvalidInterfaceName(f"invalid interface name in {identifier!r}")
    return name


def read_counter(path: Path) -> str:
    """Return the counter file as text. Non-ASCII content is a ParseError."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ReadError(f"{path}: {e}") from e

    try:
        return data.decode("ascii")
    except UnicodeDecodeError as e:
        raise ParseError(f"{path}: not a counter value: {data!r}") from e


def parse_counter(text: str) -> int:
    """Parse sysfs counter contents: decimal digits plus one optional line ending."""
    if text.endswith("\r\n"):
        text = text[:-2]
    elif text.endswith("\n"):
        text = text[:-1]

    # int() alone would also take signs, spaces and underscores
    if not _DIGITS_RE.fullmatch(text):
        raise ParseError(f"not a counter value: {text!r}")

    value = int(text)
    if value > COUNTER_MAX:
        raise ParseError(f"counter value out of 64-bit range: {text}")
    return value


class InterfaceWatcher:
    """Counter files of one interface, fixed at construction time."""

    def __init__(
        self,
        name: str,
        alias: str,
        prefix: str,
        interface: str,
        entries: Tuple[CounterEntry, ...],
    ):
        self.name = name
        self.alias = alias
        self.prefix = prefix
        self.interface = interface
        self.entries = entries

    @classmethod
    def discover(
        cls,
        prefix: str,
        name: str,
        alias: str,
        sysfs_root: Union[str, Path] = SYSFS_NET_ROOT,
    ) -> "InterfaceWatcher":
        """List <sysfs_root>/<iface>/statistics once and build one entry per file.

        Files are not opened here; a counter that cannot be read shows up
        later as a per-sweep ReadError.
        """
        interface = resolve_interface_name(name)
        stats_dir = Path(sysfs_root) / interface / "statistics"

        try:
            names = sorted(os.listdir(stats_dir))
        except OSError as e:
            raise DiscoveryError(f"cannot list {stats_dir}: {e}") from e

        entries = tuple(
            CounterEntry(path=stats_dir / counter, tag=f"{prefix}{alias}.{counter}")
            for counter in names
        )
        log.debug("%s: %d counters under %s", alias, len(entries), stats_dir)
        return cls(name=name, alias=alias, prefix=prefix, interface=interface, entries=entries)

    def report(self, reporter: Reporter) -> List[EntryResult]:
        """Read, parse and report every counter. Always visits all entries."""
        return [self._report_entry(entry, reporter) for entry in self.entries]

    @staticmethod
    def _report_entry(entry: CounterEntry, reporter: Reporter) -> EntryResult:
        value = None
        try:
            value = parse_counter(read_counter(entry.path))
            reporter.report(entry.tag, str(value))
        except EthwatchError as e:
            return EntryResult(entry=entry, value=value, error=e)
        except Exception as e:
            # Unexpected reporter errors still stay inside this entry.
            return EntryResult(entry=entry, value=value, error=ReportError(f"{entry.tag}: {e!r}"))
        return EntryResult(entry=entry, value=value)

    def __repr__(self) -> str:
        return f"InterfaceWatcher(alias={self.alias!r}, interface={self.interface!r}, entries={len(self.entries)})"
