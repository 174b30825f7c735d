"""Port describing the process-wide syslog connection.

Purpose
-------
Model the operating system's syslog channel as an injectable collaborator so
the device can be exercised against an in-memory fake while production wires
the :mod:`syslog`-backed singleton.

Contents
--------
* :class:`SyslogTransportPort` - runtime-checkable protocol for open/close/log,
  mask control and identity inspection.

System Role
-----------
At most one syslog connection exists per process. Its identity is the
``(ident, options, facility)`` triple; the device compares that triple to
decide whether an open connection can be reused.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SyslogTransportPort(Protocol):
    """Connection to the system logger."""

    @property
    def is_open(self) -> bool:
        """Return ``True`` while a connection is open."""

    @property
    def ident(self) -> str | None:
        """Return the program identity of the open connection."""

    @property
    def options(self) -> int | None:
        """Return the option bitmask of the open connection."""

    @property
    def facility(self) -> int | None:
        """Return the facility of the open connection."""

    def open(self, ident: str, options: int, facility: int | None) -> None:
        """Open the connection; ``facility=None`` selects the host default."""

    def set_mask(self, mask: int) -> int:
        """Install a priority mask and return the previous one."""

    def log(self, priority: int, message: str) -> None:
        """Emit ``message`` at ``priority``.

        ``message`` arrives %-escaped (every literal ``%`` doubled). Adapters
        whose backend formats the text pass it on as is; adapters whose
        backend logs it verbatim undo the escape first.
        """

    def close(self) -> None:
        """Close the connection."""


__all__ = ["SyslogTransportPort"]
