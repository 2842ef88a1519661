"""Tests for the DogStatsD and stdout reporters (no agent needed)."""

import io
import socket
import time

import pytest

from ethwatch.errors import BackendUnavailable, ReportError, TransportError
from ethwatch.reporter import datadog_reporter
from ethwatch.reporter.base import Reporter
from ethwatch.reporter.datadog_reporter import DatadogReporter
from ethwatch.reporter.log_reporter import LogReporter


class _FakeStatsd:
    instances = []

    def __init__(self, host, port, namespace=None, constant_tags=None, disable_telemetry=True):
        self.host = host
        self.port = port
        self.namespace = namespace
        self.constant_tags = constant_tags
        self.gauges = []
        self.closed = False
        self.fail_send = False
        self.packets_dropped_writer = 0
        _FakeStatsd.instances.append(self)

    def get_socket(self):
        if self.host == "unreachable.invalid":
            raise socket.gaierror(-2, "Name or service not known")
        return object()

    def gauge(self, metric, value, tags=None, sample_rate=None):
        if self.fail_send:
            # the real client logs the socket error and only counts the drop
            self.packets_dropped_writer += 1
            return
        self.gauges.append((metric, value, tags))

    def close_socket(self):
        self.closed = True


@pytest.fixture
def fake_statsd(monkeypatch):
    _FakeStatsd.instances = []
    monkeypatch.setattr(datadog_reporter, "DogStatsd", _FakeStatsd)
    return _FakeStatsd


def test_log_reporter_writes_tag_and_value():
    out = io.StringIO()
    reporter = LogReporter(stream=out)
    reporter.report("host.eth.rx_bytes", "1024")
    reporter.report("host.eth.tx_bytes", "2048")
    assert out.getvalue() == "host.eth.rx_bytes 1024\nhost.eth.tx_bytes 2048\n"


def test_both_reporters_satisfy_protocol(fake_statsd):
    assert isinstance(LogReporter(), Reporter)
    assert isinstance(DatadogReporter(), Reporter)


def test_datadog_sends_gauge_with_constant_tags(fake_statsd):
    reporter = DatadogReporter(host="127.0.0.1", port=9125)
    reporter.report("host.eth.rx_bytes", "1024")

    client = fake_statsd.instances[0]
    assert (client.host, client.port) == ("127.0.0.1", 9125)
    assert client.constant_tags == ["tag:required"]
    assert client.gauges == [("host.eth.rx_bytes", 1024, None)]
    assert "127.0.0.1:9125" in reporter.name()


def test_datadog_custom_tags(fake_statsd):
    DatadogReporter(constant_tags=("env:lab", "role:edge"))
    assert fake_statsd.instances[0].constant_tags == ["env:lab", "role:edge"]


def test_datadog_unreachable_agent_is_fatal(fake_statsd):
    with pytest.raises(BackendUnavailable):
        DatadogReporter(host="unreachable.invalid")


def test_datadog_dropped_packet_is_transport_error(fake_statsd):
    reporter = DatadogReporter()
    client = fake_statsd.instances[0]
    client.fail_send = True

    with pytest.raises(TransportError):
        reporter.report("a.b", "1")

    client.fail_send = False
    reporter.report("a.b", "2")
    assert client.gauges == [("a.b", 2, None)]


def _closed_udp_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_datadog_refused_sends_raise_with_real_client():
    reporter = DatadogReporter(host="127.0.0.1", port=_closed_udp_port())
    raised = []
    try:
        # refusals surface on the send after the ICMP reply arrives
        for i in range(20):
            try:
                reporter.report("host.eth.rx_bytes", str(i))
            except TransportError as e:
                raised.append(e)
            time.sleep(0.01)
    finally:
        reporter.close()

    assert raised


def test_transport_error_is_a_report_error():
    assert issubclass(TransportError, ReportError)


def test_datadog_rejects_non_integer_sample(fake_statsd):
    reporter = DatadogReporter()
    with pytest.raises(ReportError):
        reporter.report("a.b", "1.5")
    assert fake_statsd.instances[0].gauges == []


def test_datadog_close_releases_socket(fake_statsd):
    reporter = DatadogReporter()
    reporter.close()
    assert fake_statsd.instances[0].closed is True


def test_datadog_reporter_is_documented():
    assert "DogStatsD" in DatadogReporter.__doc__
