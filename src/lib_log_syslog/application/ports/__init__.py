"""Protocols separating the device policy from concrete infrastructure."""

from __future__ import annotations

from .device import DevicePort
from .transport import SyslogTransportPort

__all__ = ["DevicePort", "SyslogTransportPort"]
