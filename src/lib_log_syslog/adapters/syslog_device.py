"""Device writing rendered log entries to the system logger.

Purpose
-------
Forward already-filtered entries to syslog: render each entry to one escaped
line, map its severity to a syslog priority and emit it on the process-wide
connection, reusing or reopening that connection as the entry's program
identity requires.

Contents
--------
* :data:`SEVERITY_MAP` - fixed severity-to-priority mapping.
* :data:`DEFAULT_OPTIONS` - ``LOG_PID | LOG_CONS``.
* :class:`SyslogDevice` - :class:`DevicePort` implementation registered as ``"syslog"``.

System Role
-----------
There is only one syslog connection per process. All :class:`SyslogDevice`
instances share a single lock so that no two writers interleave their
check-identity/open/emit sequences. The lock does not cover code outside this
class that talks to syslog directly; see
:mod:`lib_log_syslog.adapters.transport` for the consequences. When syslog is
used elsewhere in the application, construct the device with
``close_connection=True``.
"""

from __future__ import annotations

import logging
from threading import Lock
from types import MappingProxyType
from typing import Any, Mapping

from lib_log_syslog.application.ports.device import DevicePort
from lib_log_syslog.application.ports.transport import SyslogTransportPort
from lib_log_syslog.application.use_cases.render_message import TemplateSpec, create_message_renderer
from lib_log_syslog.domain.codes import Option, Priority, log_upto
from lib_log_syslog.domain.entry import LogEntry
from lib_log_syslog.domain.severity import Severity

from .registry import DeviceRegistry
from .transport import system_transport

LOGGER = logging.getLogger(__name__)

SEVERITY_MAP: Mapping[Severity, Priority] = MappingProxyType(
    {
        Severity.TRACE: Priority.DEBUG,
        Severity.DEBUG: Priority.DEBUG,
        Severity.INFO: Priority.INFO,
        Severity.WARN: Priority.WARNING,
        Severity.ERROR: Priority.ERR,
        Severity.FATAL: Priority.CRIT,
        Severity.UNKNOWN: Priority.ALERT,
    }
)
#: Syslog priority for every entry severity.

DEFAULT_OPTIONS = Option.PID | Option.CONS

_PASS_ALL_MASK = log_upto(Priority.DEBUG)
# The framework filters by severity before calling the device.


class SyslogDevice(DevicePort):
    """Write log entries to syslog.

    Parameters
    ----------
    template:
        Template string, :class:`~lib_log_syslog.domain.template.Template`, or
        callable taking the entry. Defaults to ``":message :attributes"``.
    attribute_format:
        Format of each ``:attributes`` fragment, default ``"[%s:%s]"``.
    time_format:
        ``strftime`` format for ``:time``; ISO-8601 with milliseconds by default.
    options:
        ``openlog`` option bitmask, default ``LOG_PID | LOG_CONS``.
    facility:
        ``openlog`` facility; ``None`` uses the host default (``LOG_USER``).
    close_connection:
        Close the syslog connection at the end of every :meth:`write`.
    transport:
        Connection to use; defaults to :func:`system_transport`.
    """

    _lock = Lock()

    def __init__(
        self,
        *,
        template: TemplateSpec | None = None,
        attribute_format: str | None = None,
        time_format: str | None = None,
        options: int | None = None,
        facility: int | None = None,
        close_connection: bool = False,
        transport: SyslogTransportPort | None = None,
    ) -> None:
        self._render = create_message_renderer(template, attribute_format=attribute_format, time_format=time_format)
        self._options = DEFAULT_OPTIONS if options is None else options
        self._facility = facility
        self._close_connection = bool(close_connection)
        self._transport = transport if transport is not None else system_transport()

    @property
    def options(self) -> int:
        return self._options

    @property
    def facility(self) -> int | None:
        return self._facility

    @property
    def close_connection(self) -> bool:
        return self._close_connection

    @property
    def transport(self) -> SyslogTransportPort:
        return self._transport

    def render(self, entry: LogEntry) -> str:
        """Return the escaped line :meth:`write` would emit for ``entry``."""
        return self._render(entry)

    def write(self, entry: LogEntry) -> None:
        """Render ``entry`` and emit it on the syslog connection.

        Rendering happens before the lock is taken; a rendering failure
        propagates and nothing is emitted. With ``close_connection`` the
        connection is closed even when emitting fails; if that close fails as
        well, the close failure is logged and the emit error propagates.
        """
        message = self._render(entry)
        priority = SEVERITY_MAP[entry.severity]
        with SyslogDevice._lock:
            transport = self._open_transport(entry.progname)
            try:
                transport.log(priority, message)
            except Exception:
                if self._close_connection:
                    self._close_after_failed_emit(transport)
                raise
            if self._close_connection:
                transport.close()

    def flush(self) -> None:
        """Nothing is buffered; rendering and emitting are synchronous."""

    def close(self) -> None:
        """Flush and close the syslog connection if it is open."""
        self.flush()
        with SyslogDevice._lock:
            if self._transport.is_open:
                self._transport.close()

    def reopen(self) -> None:
        """Close the connection; the next :meth:`write` opens a fresh one."""
        self.close()

    def _open_transport(self, progname: Any) -> SyslogTransportPort:
        """Return an open transport carrying this write's identity.

        An open connection is reused only when ident, facility and options all
        match; otherwise it is closed and opened again with this device's
        options and facility.
        """
        ident = "" if progname is None else str(progname)
        transport = self._transport
        if transport.is_open:
            if transport.ident == ident and transport.facility == self._facility and transport.options == self._options:
                return transport
            transport.close()
        transport.open(ident, self._options, self._facility)
        try:
            transport.set_mask(_PASS_ALL_MASK)
        except Exception:
            transport.close()
            raise
        return transport

    @staticmethod
    def _close_after_failed_emit(transport: SyslogTransportPort) -> None:
        try:
            transport.close()
        except Exception:
            LOGGER.error("closing the syslog connection failed after an emit error", exc_info=True)


DeviceRegistry.add("syslog", SyslogDevice)


__all__ = ["DEFAULT_OPTIONS", "SEVERITY_MAP", "SyslogDevice"]
