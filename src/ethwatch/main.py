"""
ethwatch entry point.

Usage:
    ethwatch aliases.json host.                    Report to the local DogStatsD agent
    ethwatch aliases.json host. --output stdout    Print samples instead
    ethwatch aliases.json host. --discover         Show what would be watched
"""

from __future__ import annotations

import logging
import signal
import threading
from contextlib import contextmanager
from typing import List

import click

from ethwatch import __version__
from ethwatch.collector.interface import SYSFS_NET_ROOT, InterfaceWatcher
from ethwatch.config import build_watchers, load_alias_map
from ethwatch.driver import DEFAULT_INTERVAL, ReportDriver
from ethwatch.errors import BackendUnavailable, ConfigurationError, EmptyConfiguration
from ethwatch.reporter.datadog_reporter import (
    DEFAULT_CONSTANT_TAGS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DatadogReporter,
)
from ethwatch.reporter.log_reporter import LogReporter


log = logging.getLogger("ethwatch")


@contextmanager
def _stop_on_signals(stop: threading.Event):
    """Set `stop` on SIGINT/SIGTERM for the duration of the block."""

    def _handler(signum, frame):
        log.info("Received %s, finishing current sweep", signal.Signals(signum).name)
        stop.set()

    previous = {sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield stop
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def _print_discovery(watchers: List[InterfaceWatcher]):
    from rich.console import Console
    from rich.table import Table

    console = Console()
    table = Table(show_header=True, header_style="bold")
    table.add_column("Alias", style="cyan")
    table.add_column("Interface")
    table.add_column("Counters", justify="right")
    table.add_column("Example tag", style="dim")

    for watcher in watchers:
        example = watcher.entries[0].tag if watcher.entries else "-"
        table.add_row(watcher.alias, watcher.interface, str(len(watcher.entries)), example)
    console.print(table)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="ethwatch")
@click.argument("filename", type=click.Path(dir_okay=False))
@click.argument("prefix")
@click.option("--output", type=click.Choice(["datadog", "stdout"]), default="datadog",
              help="Where samples go: datadog (DogStatsD agent) or stdout")
@click.option("--interval", default=DEFAULT_INTERVAL, type=click.FloatRange(min=0),
              help="Seconds to wait between sweeps")
@click.option("--sysfs-root", default=str(SYSFS_NET_ROOT), envvar="ETHWATCH_SYSFS_ROOT",
              type=click.Path(file_okay=False), help="Directory holding one entry per interface")
@click.option("--statsd-host", default=DEFAULT_HOST, envvar="DD_AGENT_HOST",
              help="DogStatsD agent host")
@click.option("--statsd-port", default=DEFAULT_PORT, envvar="DD_DOGSTATSD_PORT", type=int,
              help="DogStatsD agent port")
@click.option("--constant-tag", "constant_tags", multiple=True, default=DEFAULT_CONSTANT_TAGS,
              help="Tag attached to every sample (repeatable)")
@click.option("--once", is_flag=True, default=False, help="Run a single sweep and exit")
@click.option("--discover", is_flag=True, default=False,
              help="Print the discovered interfaces and counters, then exit")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
def cli(filename: str, prefix: str, output: str, interval: float, sysfs_root: str,
        statsd_host: str, statsd_port: int, constant_tags: tuple, once: bool,
        discover: bool, verbose: bool):
    """Publish /sys/class/net/<iface>/statistics counters as gauges.

    FILENAME is a JSON file mapping clean alias names to the interfaces to
    watch. PREFIX is prepended to every metric name.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        aliases = load_alias_map(filename)
        watchers = build_watchers(aliases, prefix, sysfs_root=sysfs_root)
        if not watchers:
            raise EmptyConfiguration(f"none of the {len(aliases)} configured interfaces could be discovered")
    except (ConfigurationError, EmptyConfiguration) as e:
        log.error("%s", e)
        raise SystemExit(1)

    if discover:
        _print_discovery(watchers)
        return

    try:
        if output == "stdout":
            reporter = LogReporter()
        else:
            reporter = DatadogReporter(host=statsd_host, port=statsd_port, constant_tags=constant_tags)
    except BackendUnavailable as e:
        log.error("%s", e)
        raise SystemExit(1)

    driver = ReportDriver(watchers, reporter, interval=interval)
    try:
        with _stop_on_signals(threading.Event()) as stop:
            driver.run(stop=stop, max_sweeps=1 if once else None)
    finally:
        reporter.close()


if __name__ == "__main__":
    cli()
