"""Façade wiring configuration, entries and the syslog device together.

Purpose
-------
Give host applications and the CLI one place to build a configured
:class:`SyslogDevice` and to construct entries without filling in process
metadata by hand.

Contents
--------
* :func:`create_device` - settings resolution plus device construction.
* :func:`build_entry` - :class:`LogEntry` factory stamping time and pid.
* :func:`summary_info` - metadata banner for the CLI.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .adapters.syslog_device import SyslogDevice
from .application.ports.transport import SyslogTransportPort
from .application.use_cases.render_message import TemplateSpec
from .config import load_settings
from .domain.entry import LogEntry
from .domain.severity import Severity


def create_device(
    *,
    template: TemplateSpec | None = None,
    attribute_format: str | None = None,
    time_format: str | None = None,
    options: int | str | None = None,
    facility: int | str | None = None,
    close_connection: bool | None = None,
    transport: SyslogTransportPort | None = None,
) -> SyslogDevice:
    """Return a :class:`SyslogDevice` configured from arguments and environment.

    Keyword arguments left as ``None`` fall back to the ``LOG_SYSLOG_*``
    environment variables and then to the device defaults. Callable templates
    are passed through untouched.

    Examples
    --------
    >>> from lib_log_syslog.adapters.transport import StdlibSyslogTransport
    >>> device = create_device(facility='local0', transport=StdlibSyslogTransport(module=object()))
    >>> int(device.facility)
    128
    """
    string_template = template if isinstance(template, str) or template is None else None
    settings = load_settings(
        template=string_template,
        attribute_format=attribute_format,
        time_format=time_format,
        options=options,
        facility=facility,
        close_connection=close_connection,
    )
    kwargs = settings.to_device_kwargs()
    if string_template is None and template is not None:
        kwargs["template"] = template
    return SyslogDevice(transport=transport, **kwargs)


def build_entry(
    message: Any,
    *,
    severity: Severity | str = Severity.INFO,
    progname: str | None = None,
    attributes: Mapping[str, Any] | None = None,
    time: datetime | None = None,
) -> LogEntry:
    """Return a :class:`LogEntry` for the current process.

    Examples
    --------
    >>> entry = build_entry('hello', severity='warn', attributes={'foo': 'bar'})
    >>> entry.severity.name, entry.attributes
    ('WARN', {'foo': 'bar'})
    """
    level = severity if isinstance(severity, Severity) else Severity.from_name(severity)
    return LogEntry(
        time=time or datetime.now(timezone.utc),
        severity=level,
        message=message,
        progname=progname,
        pid=os.getpid(),
        attributes=dict(attributes or {}),
    )


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Examples
    --------
    >>> banner = summary_info()
    >>> "version" in banner
    True
    """
    from . import __init__conf__

    lines: list[str] = []

    def _capture(text: str) -> None:
        lines.append(text)

    __init__conf__.print_info(writer=_capture)
    return "".join(lines)


__all__ = ["build_entry", "create_device", "summary_info"]
