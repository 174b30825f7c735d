"""Name-based registry of device classes.

Framework configuration selects devices by a stable key (``"syslog"``);
device modules register themselves at import time.
"""

from __future__ import annotations

from threading import RLock
from typing import Any

from lib_log_syslog.application.ports.device import DevicePort


class UnknownDeviceError(KeyError):
    """Raised when no device class is registered under a name."""


class DeviceRegistry:
    """Class-level mapping of lookup keys to device classes.

    Examples
    --------
    >>> class _Null:
    ...     def __init__(self, **options): self.options = options
    >>> DeviceRegistry.add('null-doc', _Null)
    >>> DeviceRegistry.new_device('null-doc', flag=True).options
    {'flag': True}
    >>> DeviceRegistry.remove('null-doc')
    """

    _devices: dict[str, type] = {}
    _lock = RLock()

    @classmethod
    def add(cls, name: str, device_class: type) -> None:
        """Register ``device_class`` under ``name`` (case-insensitive)."""
        key = _normalise(name)
        with cls._lock:
            cls._devices[key] = device_class

    @classmethod
    def remove(cls, name: str) -> None:
        with cls._lock:
            cls._devices.pop(_normalise(name), None)

    @classmethod
    def device_class(cls, name: str) -> type:
        """Return the class registered under ``name``."""
        with cls._lock:
            try:
                return cls._devices[_normalise(name)]
            except KeyError:
                raise UnknownDeviceError(f"No device registered as {name!r}") from None

    @classmethod
    def new_device(cls, name: str, **options: Any) -> DevicePort:
        """Instantiate the device registered under ``name`` with ``options``."""
        return cls.device_class(name)(**options)

    @classmethod
    def registered(cls) -> dict[str, type]:
        """Return a snapshot of the registered devices."""
        with cls._lock:
            return dict(cls._devices)


def _normalise(name: str) -> str:
    key = str(name).strip().lower()
    if not key:
        raise ValueError("device name must not be empty")
    return key


__all__ = ["DeviceRegistry", "UnknownDeviceError"]
