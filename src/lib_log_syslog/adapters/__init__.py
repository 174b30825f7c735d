"""Adapter implementations for the syslog device's ports.

Importing this package registers :class:`SyslogDevice` as ``"syslog"`` in the
:class:`DeviceRegistry`.
"""

from __future__ import annotations

from .logging_handler import SyslogDeviceHandler
from .registry import DeviceRegistry, UnknownDeviceError
from .syslog_device import DEFAULT_OPTIONS, SEVERITY_MAP, SyslogDevice
from .transport import StdlibSyslogTransport, system_transport

__all__ = [
    "DEFAULT_OPTIONS",
    "DeviceRegistry",
    "SEVERITY_MAP",
    "StdlibSyslogTransport",
    "SyslogDevice",
    "SyslogDeviceHandler",
    "UnknownDeviceError",
    "system_transport",
]
