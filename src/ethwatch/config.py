"""
Alias map loading and watcher construction.

The alias map is a flat JSON object of alias -> interface identifier:

    {"wan": "eth0", "lan": "\"enp3s0\""}

Each pair gets one discovery attempt. Interfaces that fail are logged and
dropped; the caller decides whether what is left is enough to run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Union

from ethwatch.collector.interface import SYSFS_NET_ROOT, InterfaceWatcher
from ethwatch.errors import ConfigurationError, DiscoveryError

log = logging.getLogger(__name__)


def load_alias_map(path: Union[str, Path]) -> Dict[str, str]:
    """Read the alias map, keeping file order. Raises ConfigurationError."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e

    return validate_alias_map(data, source=str(path))


def validate_alias_map(data: object, source: str = "<config>") -> Dict[str, str]:
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: expected a JSON object, got {type(data).__name__}")

    aliases: Dict[str, str] = {}
    for alias, identifier in data.items():
        if not alias:
            raise ConfigurationError(f"{source}: empty alias")
        if not isinstance(identifier, str):
            raise ConfigurationError(
                f"{source}: value for {alias!r} must be a string, got {type(identifier).__name__}"
            )
        aliases[alias] = identifier
    return aliases


def build_watchers(
    aliases: Dict[str, str],
    prefix: str,
    sysfs_root: Union[str, Path] = SYSFS_NET_ROOT,
) -> List[InterfaceWatcher]:
    """One watcher per alias that could be discovered, in alias map order."""
    watchers = []
    for alias, identifier in aliases.items():
        try:
            watcher = InterfaceWatcher.discover(prefix, identifier, alias, sysfs_root=sysfs_root)
        except DiscoveryError as e:
            log.warning("Dropping %s (%r): %s", alias, identifier, e)
            continue
        log.info("Watching %s (%s, %d counters)", watcher.alias, watcher.interface, len(watcher.entries))
        watchers.append(watcher)
    return watchers
