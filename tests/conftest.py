from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from lib_log_syslog.domain.entry import LogEntry
from lib_log_syslog.domain.severity import Severity


class FakeTransport:
    """In-memory stand-in for the process-wide syslog connection."""

    def __init__(self) -> None:
        self.is_open = False
        self.ident: str | None = None
        self.options: int | None = None
        self.facility: int | None = None
        self.mask: int | None = None
        self.output: list[tuple[int, str]] = []
        self.calls: list[str] = []
        self.open_count = 0
        self.close_count = 0
        self.fail_open: Exception | None = None
        self.fail_mask: Exception | None = None
        self.fail_log: Exception | None = None
        self.fail_close: Exception | None = None

    def open(self, ident: str, options: int, facility: int | None) -> None:
        self.calls.append("open")
        if self.fail_open is not None:
            raise self.fail_open
        self.open_count += 1
        self.is_open = True
        self.ident = ident
        self.options = options
        self.facility = facility

    def set_mask(self, mask: int) -> int:
        self.calls.append("set_mask")
        if self.fail_mask is not None:
            raise self.fail_mask
        previous = self.mask if self.mask is not None else 0xFF
        self.mask = mask
        return previous

    def log(self, priority: int, message: str) -> None:
        self.calls.append("log")
        if self.fail_log is not None:
            raise self.fail_log
        self.output.append((priority, message))

    def close(self) -> None:
        self.calls.append("close")
        self.close_count += 1
        if self.fail_close is not None:
            raise self.fail_close
        self.is_open = False
        self.ident = None
        self.options = None
        self.facility = None


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def entry_factory() -> Callable[..., LogEntry]:
    def _factory(**overrides: Any) -> LogEntry:
        payload: dict[str, Any] = {
            "time": datetime(2011, 2, 1, 18, 32, 31, tzinfo=timezone.utc),
            "severity": Severity.WARN,
            "message": "message 1",
            "progname": "lib_log_syslog_tests",
            "pid": 12345,
            "attributes": {"foo": "bar"},
        }
        payload.update(overrides)
        return LogEntry(**payload)

    return _factory


@pytest.fixture
def entry(entry_factory: Callable[..., LogEntry]) -> LogEntry:
    return entry_factory()
