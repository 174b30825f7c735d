from __future__ import annotations

import logging
import threading
from collections.abc import Callable

import pytest

from lib_log_syslog.adapters.syslog_device import DEFAULT_OPTIONS, SEVERITY_MAP, SyslogDevice
from lib_log_syslog.domain.codes import Facility, Option, Priority, log_upto
from lib_log_syslog.domain.entry import LogEntry
from lib_log_syslog.domain.severity import Severity
from tests.conftest import FakeTransport
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


# --- opening the connection ---


def test_identity_is_the_progname(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(transport=transport).write(entry)

    assert transport.ident == entry.progname


def test_missing_progname_opens_with_empty_identity(transport: FakeTransport, entry_factory: Callable[..., LogEntry]) -> None:
    SyslogDevice(transport=transport).write(entry_factory(progname=None))

    assert transport.ident == ""


def test_default_options_are_pid_and_cons(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(transport=transport).write(entry)

    assert transport.options == DEFAULT_OPTIONS == Option.PID | Option.CONS


def test_options_are_configurable(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(options=Option.CONS, transport=transport).write(entry)

    assert transport.options == Option.CONS


def test_facility_is_configurable(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(facility=Facility.FTP, transport=transport).write(entry)

    assert transport.facility == Facility.FTP


def test_facility_defaults_to_host_default(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(transport=transport).write(entry)

    assert transport.facility is None


def test_mask_passes_every_priority(transport: FakeTransport, entry_factory: Callable[..., LogEntry]) -> None:
    SyslogDevice(transport=transport).write(entry_factory(severity=Severity.TRACE))

    assert transport.mask == log_upto(Priority.DEBUG)
    assert transport.calls[:2] == ["open", "set_mask"]


def test_connection_stays_open_by_default(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(transport=transport).write(entry)

    assert transport.is_open


def test_close_connection_closes_after_write(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(close_connection=True, transport=transport).write(entry)

    assert not transport.is_open
    assert transport.calls == ["open", "set_mask", "log", "close"]


# --- connection reuse ---


def test_same_identity_reuses_connection(transport: FakeTransport, entry: LogEntry) -> None:
    device = SyslogDevice(transport=transport)

    device.write(entry)
    device.write(entry)

    assert transport.open_count == 1
    assert transport.close_count == 0
    assert transport.calls == ["open", "set_mask", "log", "log"]


def test_new_progname_reopens_connection(transport: FakeTransport, entry_factory: Callable[..., LogEntry]) -> None:
    device = SyslogDevice(transport=transport)

    device.write(entry_factory(progname="first"))
    device.write(entry_factory(progname="second"))

    assert transport.calls == ["open", "set_mask", "log", "close", "open", "set_mask", "log"]
    assert transport.ident == "second"


def test_none_progname_matches_empty_identity(transport: FakeTransport, entry_factory: Callable[..., LogEntry]) -> None:
    device = SyslogDevice(transport=transport)

    device.write(entry_factory(progname=""))
    device.write(entry_factory(progname=None))

    assert transport.open_count == 1


def test_none_progname_reopens_named_connection(transport: FakeTransport, entry_factory: Callable[..., LogEntry]) -> None:
    device = SyslogDevice(transport=transport)

    device.write(entry_factory(progname="named"))
    device.write(entry_factory(progname=None))

    assert transport.open_count == 2
    assert transport.ident == ""


def test_facility_mismatch_reopens(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(facility=Facility.LOCAL0, transport=transport).write(entry)
    SyslogDevice(facility=Facility.LOCAL1, transport=transport).write(entry)

    assert transport.open_count == 2
    assert transport.facility == Facility.LOCAL1


def test_options_mismatch_reopens(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(options=Option.PID, transport=transport).write(entry)
    SyslogDevice(options=Option.PID | Option.NDELAY, transport=transport).write(entry)

    assert transport.open_count == 2
    assert transport.options == Option.PID | Option.NDELAY


def test_connection_opened_elsewhere_is_reused_when_identity_matches(transport: FakeTransport, entry: LogEntry) -> None:
    transport.open(entry.progname or "", DEFAULT_OPTIONS, None)
    transport.calls.clear()

    SyslogDevice(transport=transport).write(entry)

    assert transport.calls == ["log"]


def test_connection_closed_elsewhere_is_reopened(transport: FakeTransport, entry: LogEntry) -> None:
    device = SyslogDevice(transport=transport)
    device.write(entry)
    transport.close()

    device.write(entry)

    assert transport.open_count == 2
    assert transport.is_open


# --- emitted output ---


def test_entries_are_logged_without_attributes(transport: FakeTransport, entry_factory: Callable[..., LogEntry]) -> None:
    SyslogDevice(transport=transport).write(entry_factory(attributes={}))

    assert transport.output == [(Priority.WARNING, "message 1")]


def test_entries_are_logged_with_attributes(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(transport=transport).write(entry)

    assert transport.output == [(Priority.WARNING, "message 1 [foo:bar]")]


def test_string_template(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(template="{{foo}} - {{message}}", transport=transport).write(entry)

    assert transport.output == [(Priority.WARNING, "bar - message 1")]


def test_callable_template(transport: FakeTransport, entry: LogEntry) -> None:
    SyslogDevice(template=lambda e: e.message.upper(), transport=transport).write(entry)

    assert transport.output == [(Priority.WARNING, "MESSAGE 1")]


def test_percent_signs_are_escaped(transport: FakeTransport, entry_factory: Callable[..., LogEntry]) -> None:
    SyslogDevice(transport=transport).write(entry_factory(message="message 100%"))

    assert transport.output == [(Priority.WARNING, "message 100%% [foo:bar]")]


def test_template_output_is_converted_to_text(transport: FakeTransport, entry_factory: Callable[..., LogEntry]) -> None:
    message = {"foo": "bar"}
    SyslogDevice(template=lambda e: e.message, transport=transport).write(entry_factory(message=message, attributes={}))

    assert transport.output == [(Priority.WARNING, str(message))]


def test_render_matches_emitted_text(transport: FakeTransport, entry: LogEntry) -> None:
    device = SyslogDevice(transport=transport)
    device.write(entry)

    assert transport.output[0][1] == device.render(entry)


@pytest.mark.parametrize(
    "severity, priority",
    [
        (Severity.TRACE, Priority.DEBUG),
        (Severity.DEBUG, Priority.DEBUG),
        (Severity.INFO, Priority.INFO),
        (Severity.WARN, Priority.WARNING),
        (Severity.ERROR, Priority.ERR),
        (Severity.FATAL, Priority.CRIT),
        (Severity.UNKNOWN, Priority.ALERT),
    ],
)
def test_severities_map_to_priorities(
    transport: FakeTransport,
    entry_factory: Callable[..., LogEntry],
    severity: Severity,
    priority: Priority,
) -> None:
    SyslogDevice(transport=transport).write(entry_factory(severity=severity, message=severity.name.lower(), attributes={}))

    assert transport.output == [(priority, severity.name.lower())]


def test_severity_map_is_total_and_read_only() -> None:
    assert set(SEVERITY_MAP) == set(Severity)
    with pytest.raises(TypeError):
        SEVERITY_MAP[Severity.INFO] = Priority.EMERG  # type: ignore[index]


# --- failures ---


def test_render_error_emits_nothing(transport: FakeTransport, entry: LogEntry) -> None:
    def broken(_entry: LogEntry) -> str:
        raise ValueError("bad template")

    device = SyslogDevice(template=broken, transport=transport)

    with pytest.raises(ValueError, match="bad template"):
        device.write(entry)
    assert transport.calls == []


def test_open_error_propagates(transport: FakeTransport, entry: LogEntry) -> None:
    transport.fail_open = OSError("syslog unavailable")

    with pytest.raises(OSError, match="syslog unavailable"):
        SyslogDevice(transport=transport).write(entry)
    assert not transport.is_open
    assert transport.output == []


def test_mask_error_does_not_leave_connection_open(transport: FakeTransport, entry: LogEntry) -> None:
    transport.fail_mask = OSError("mask rejected")

    with pytest.raises(OSError, match="mask rejected"):
        SyslogDevice(transport=transport).write(entry)
    assert not transport.is_open
    assert transport.calls == ["open", "set_mask", "close"]


def test_write_can_be_retried_after_open_error(transport: FakeTransport, entry: LogEntry) -> None:
    device = SyslogDevice(transport=transport)
    transport.fail_open = OSError("syslog unavailable")
    with pytest.raises(OSError):
        device.write(entry)

    transport.fail_open = None
    device.write(entry)

    assert transport.output == [(Priority.WARNING, "message 1 [foo:bar]")]


def test_emit_error_propagates_and_keeps_connection(transport: FakeTransport, entry: LogEntry) -> None:
    transport.fail_log = OSError("emit failed")

    with pytest.raises(OSError, match="emit failed"):
        SyslogDevice(transport=transport).write(entry)
    assert transport.is_open


def test_emit_error_still_closes_with_close_connection(transport: FakeTransport, entry: LogEntry) -> None:
    transport.fail_log = OSError("emit failed")

    with pytest.raises(OSError, match="emit failed"):
        SyslogDevice(close_connection=True, transport=transport).write(entry)
    assert transport.calls == ["open", "set_mask", "log", "close"]
    assert not transport.is_open


def test_emit_error_wins_over_close_error(
    transport: FakeTransport,
    entry: LogEntry,
    caplog: pytest.LogCaptureFixture,
) -> None:
    transport.fail_log = OSError("emit failed")
    transport.fail_close = OSError("close failed")

    with caplog.at_level(logging.ERROR, logger="lib_log_syslog.adapters.syslog_device"):
        with pytest.raises(OSError, match="emit failed"):
            SyslogDevice(close_connection=True, transport=transport).write(entry)

    assert "closing the syslog connection failed" in caplog.text
    assert "close failed" in caplog.text


def test_close_error_surfaces_when_emit_succeeded(transport: FakeTransport, entry: LogEntry) -> None:
    transport.fail_close = OSError("close failed")

    with pytest.raises(OSError, match="close failed"):
        SyslogDevice(close_connection=True, transport=transport).write(entry)
    assert transport.output == [(Priority.WARNING, "message 1 [foo:bar]")]


# --- lifecycle ---


def test_close_closes_open_connection(transport: FakeTransport, entry: LogEntry) -> None:
    device = SyslogDevice(transport=transport)
    device.write(entry)

    device.close()

    assert not transport.is_open
    assert transport.close_count == 1


def test_close_is_idempotent(transport: FakeTransport, entry: LogEntry) -> None:
    device = SyslogDevice(transport=transport)
    device.write(entry)

    device.close()
    device.close()

    assert transport.close_count == 1


def test_close_without_connection_is_a_no_op(transport: FakeTransport) -> None:
    SyslogDevice(transport=transport).close()

    assert transport.calls == []


def test_flush_does_not_touch_transport(transport: FakeTransport, entry: LogEntry) -> None:
    device = SyslogDevice(transport=transport)
    device.write(entry)
    transport.calls.clear()

    device.flush()

    assert transport.calls == []


def test_reopen_forces_new_connection(transport: FakeTransport, entry: LogEntry) -> None:
    device = SyslogDevice(transport=transport)
    device.write(entry)

    device.reopen()
    device.write(entry)

    assert transport.open_count == 2


def test_device_exposes_configuration(transport: FakeTransport) -> None:
    device = SyslogDevice(options=Option.PERROR, facility=Facility.LOCAL3, close_connection=True, transport=transport)

    assert device.options == Option.PERROR
    assert device.facility == Facility.LOCAL3
    assert device.close_connection is True
    assert device.transport is transport


# --- concurrency ---


class _InterleaveDetector(FakeTransport):
    """Fake transport that records whether two writers were inside it at once."""

    def __init__(self) -> None:
        super().__init__()
        self._inside = 0
        self._guard = threading.Lock()
        self.overlapped = False

    def log(self, priority: int, message: str) -> None:
        with self._guard:
            self._inside += 1
            if self._inside > 1:
                self.overlapped = True
        try:
            threading.Event().wait(0.001)
            super().log(priority, message)
        finally:
            with self._guard:
                self._inside -= 1


def test_writes_from_many_threads_are_serialised(entry_factory: Callable[..., LogEntry]) -> None:
    transport = _InterleaveDetector()
    devices = [SyslogDevice(transport=transport), SyslogDevice(transport=transport, close_connection=True)]

    def worker(index: int) -> None:
        device = devices[index % 2]
        for item in range(20):
            device.write(entry_factory(progname=f"worker-{index % 3}", message=f"{index}-{item}", attributes={}))

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert not transport.overlapped
    assert len(transport.output) == 120
