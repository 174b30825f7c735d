"""Port describing the device contract logging frameworks call into."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_syslog.domain.entry import LogEntry


@runtime_checkable
class DevicePort(Protocol):
    """Destination receiving already-filtered log entries."""

    def write(self, entry: LogEntry) -> None:
        """Emit ``entry``."""

    def flush(self) -> None:
        """Flush buffered state, if any."""

    def close(self) -> None:
        """Flush and release held resources."""

    def reopen(self) -> None:
        """Release resources so the next write acquires them afresh."""


__all__ = ["DevicePort"]
