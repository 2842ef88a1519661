"""
Error taxonomy.

Per-counter errors (ReadError, ParseError, ReportError) are captured into
an EntryResult and never leave the sweep. DiscoveryError drops a single
interface at startup. The remaining three end the process.
"""

from __future__ import annotations


class EthwatchError(Exception):
    """Base class for everything ethwatch raises on purpose."""


class DiscoveryError(EthwatchError):
    """An interface's statistics directory could not be listed."""


class InvalidInterfaceName(DiscoveryError):
    """A configured identifier does not resolve to a usable interface name."""


class ReadError(EthwatchError):
    """A counter file could not be opened or read."""


class ParseError(EthwatchError):
    """A counter file did not hold a single unsigned 64-bit integer."""


class ReportError(EthwatchError):
    """The reporter rejected a sample."""


class TransportError(ReportError):
    """The sample could not be transmitted to the metrics agent."""


class ConfigurationError(EthwatchError):
    """The alias map file is unreadable or malformed."""


class EmptyConfiguration(EthwatchError):
    """No configured interface survived discovery."""


class BackendUnavailable(EthwatchError):
    """The metrics agent client could not be set up."""
