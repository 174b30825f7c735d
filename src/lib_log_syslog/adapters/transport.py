"""Syslog transport backed by the standard library :mod:`syslog` module.

Purpose
-------
Implement :class:`SyslogTransportPort` on top of ``openlog``/``syslog``/
``closelog``. The C library keeps exactly one connection per process, so this
adapter is a process-wide singleton reached through :func:`system_transport`.

Contents
--------
* :class:`StdlibSyslogTransport` - concrete port implementation.
* :func:`system_transport` - accessor for the process singleton.

System Role
-----------
Production wiring for :class:`~lib_log_syslog.adapters.syslog_device.SyslogDevice`.

Alignment Notes
---------------
The :mod:`syslog` module does not report whether a connection is open or which
identity it was opened with, so the adapter records what it last passed to
``openlog``. Code elsewhere in the process that calls ``syslog.openlog`` or
``syslog.closelog`` directly bypasses that record. The device tolerates this:
a stale record at worst causes one reuse with a foreign identity, or one
redundant reopen. Callers sharing syslog with other code should configure the
device with ``close_connection=True``.
"""

from __future__ import annotations

import logging
from threading import Lock
from types import ModuleType

from lib_log_syslog.application.ports.transport import SyslogTransportPort
from lib_log_syslog.domain.codes import Facility

LOGGER = logging.getLogger(__name__)


def _load_syslog() -> ModuleType:  # pragma: no cover - depends on platform
    """Import :mod:`syslog`, raising if the platform does not provide it."""
    try:
        import syslog
    except ImportError as exc:
        raise RuntimeError("the syslog module is not available on this platform") from exc
    return syslog


class StdlibSyslogTransport(SyslogTransportPort):
    """Process-wide syslog connection using :mod:`syslog`.

    Examples
    --------
    >>> class _Fake:
    ...     def openlog(self, ident, logoption, facility): pass
    ...     def setlogmask(self, mask): return 255
    ...     def syslog(self, priority, message): pass
    ...     def closelog(self): pass
    >>> transport = StdlibSyslogTransport(module=_Fake())
    >>> transport.open('app', 1, None)
    >>> transport.is_open, transport.ident, transport.facility
    (True, 'app', None)
    >>> transport.close()
    >>> transport.is_open
    False
    """

    def __init__(self, *, module: ModuleType | object | None = None) -> None:
        self._module = module
        self._open = False
        self._ident: str | None = None
        self._options: int | None = None
        self._facility: int | None = None
        self._mask: int | None = None
        self._guard = Lock()

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def ident(self) -> str | None:
        return self._ident

    @property
    def options(self) -> int | None:
        return self._options

    @property
    def facility(self) -> int | None:
        return self._facility

    @property
    def mask(self) -> int | None:
        """Return the mask last installed through :meth:`set_mask`."""
        return self._mask

    def open(self, ident: str, options: int, facility: int | None) -> None:
        """Call ``openlog``; ``facility=None`` falls back to ``LOG_USER``."""
        module = self._syslog()
        effective = int(Facility.USER if facility is None else facility)
        with self._guard:
            module.openlog(ident, int(options), effective)
            self._open = True
            self._ident = ident
            self._options = options
            self._facility = facility
        LOGGER.debug("opened syslog connection ident=%r options=%#x facility=%d", ident, int(options), effective)

    def set_mask(self, mask: int) -> int:
        previous = self._syslog().setlogmask(mask)
        self._mask = mask
        return previous

    def log(self, priority: int, message: str) -> None:
        """Emit ``message`` with its ``%%`` escapes undone.

        CPython's ``syslog.syslog`` passes the text through a ``"%s"`` format,
        so literal percent signs must reach it single.
        """
        self._syslog().syslog(int(priority), message.replace("%%", "%"))

    def close(self) -> None:
        """Call ``closelog`` and forget the recorded identity."""
        module = self._syslog()
        with self._guard:
            try:
                module.closelog()
            finally:
                self._open = False
                self._ident = None
                self._options = None
                self._facility = None
        LOGGER.debug("closed syslog connection")

    def _syslog(self) -> ModuleType:
        if self._module is None:
            self._module = _load_syslog()
        return self._module  # type: ignore[return-value]


_SYSTEM_TRANSPORT: StdlibSyslogTransport | None = None
_SYSTEM_TRANSPORT_LOCK = Lock()


def system_transport() -> StdlibSyslogTransport:
    """Return the process-wide :class:`StdlibSyslogTransport`."""

    global _SYSTEM_TRANSPORT
    with _SYSTEM_TRANSPORT_LOCK:
        if _SYSTEM_TRANSPORT is None:
            _SYSTEM_TRANSPORT = StdlibSyslogTransport()
        return _SYSTEM_TRANSPORT


__all__ = ["StdlibSyslogTransport", "system_transport"]
