"""Syslog device for structured log entries.

Importing the package registers :class:`SyslogDevice` in the
:class:`DeviceRegistry` under ``"syslog"``.
"""

from __future__ import annotations

from .adapters import (
    DEFAULT_OPTIONS,
    SEVERITY_MAP,
    DeviceRegistry,
    StdlibSyslogTransport,
    SyslogDevice,
    SyslogDeviceHandler,
    UnknownDeviceError,
    system_transport,
)
from .domain import Facility, LogEntry, Option, Priority, Severity, Template
from .lib_log_syslog import build_entry, create_device, summary_info

__all__ = [
    "DEFAULT_OPTIONS",
    "DeviceRegistry",
    "Facility",
    "LogEntry",
    "Option",
    "Priority",
    "SEVERITY_MAP",
    "Severity",
    "StdlibSyslogTransport",
    "SyslogDevice",
    "SyslogDeviceHandler",
    "Template",
    "UnknownDeviceError",
    "build_entry",
    "create_device",
    "summary_info",
    "system_transport",
]
