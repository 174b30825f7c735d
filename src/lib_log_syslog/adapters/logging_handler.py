"""Bridge from the stdlib :mod:`logging` package to a device.

Purpose
-------
Let applications that log through :mod:`logging` reach syslog via
:class:`~lib_log_syslog.adapters.syslog_device.SyslogDevice` without giving up
its connection handling and templating.

Contents
--------
* :class:`SyslogDeviceHandler` - :class:`logging.Handler` writing to a device.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from lib_log_syslog.application.ports.device import DevicePort
from lib_log_syslog.domain.entry import LogEntry
from lib_log_syslog.domain.severity import Severity

_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime", "taskName"}
# ``LogRecord`` attributes that are not caller-supplied ``extra`` values.


class SyslogDeviceHandler(logging.Handler):
    """Convert :class:`logging.LogRecord` objects to entries and write them.

    Parameters
    ----------
    device:
        Destination device, usually a :class:`SyslogDevice`.
    progname:
        Program identity for every entry; ``None`` uses the record's
        top-level logger name.
    level:
        Handler threshold, as for :class:`logging.Handler`.

    Examples
    --------
    >>> class _Recorder:
    ...     def __init__(self): self.entries = []
    ...     def write(self, entry): self.entries.append(entry)
    ...     def flush(self): pass
    ...     def close(self): pass
    ...     def reopen(self): pass
    >>> device = _Recorder()
    >>> handler = SyslogDeviceHandler(device)
    >>> record = logging.makeLogRecord({'name': 'app.db', 'levelno': logging.ERROR, 'msg': 'down %s', 'args': ('db1',)})
    >>> handler.emit(record)
    >>> entry = device.entries[0]
    >>> entry.severity.name, entry.message, entry.progname
    ('ERROR', 'down db1', 'app')
    """

    def __init__(self, device: DevicePort, *, progname: str | None = None, level: int = logging.NOTSET) -> None:
        super().__init__(level=level)
        self._device = device
        self._progname = progname

    @property
    def device(self) -> DevicePort:
        return self._device

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = self.to_entry(record)
            self._device.write(entry)
        except Exception:
            self.handleError(record)

    def to_entry(self, record: logging.LogRecord) -> LogEntry:
        """Return the :class:`LogEntry` representing ``record``."""
        message = record.getMessage()
        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            message = f"{message}\n{record.exc_text}"
        return LogEntry(
            time=datetime.fromtimestamp(record.created, tz=timezone.utc),
            severity=Severity.from_python_level(record.levelno),
            message=message,
            progname=self._progname or record.name.split(".", 1)[0],
            pid=record.process or 0,
            attributes=_extra_attributes(record),
        )

    def flush(self) -> None:
        self.acquire()
        try:
            self._device.flush()
        finally:
            self.release()

    def close(self) -> None:
        try:
            self._device.close()
        finally:
            super().close()


def _extra_attributes(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in vars(record).items() if key not in _RECORD_FIELDS and not key.startswith("_")}


__all__ = ["SyslogDeviceHandler"]
