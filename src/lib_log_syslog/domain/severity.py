"""Severity scale used by log entries handed to devices.

Purpose
-------
Model the framework-side severity enumeration the syslog device consumes,
independent of the numeric priorities syslog itself understands.

Contents
--------
* :class:`Severity` ordered enum with conversion helpers.
* ``_ALIASES`` constant accepting the stdlib spellings of level names.

System Role
-----------
Entries carry a :class:`Severity`; the device translates it to a syslog
priority through its fixed severity map (see :mod:`lib_log_syslog.adapters.syslog_device`).
"""

from __future__ import annotations

import logging
from enum import IntEnum


class Severity(IntEnum):
    """Ordered severities ``TRACE < DEBUG < INFO < WARN < ERROR < FATAL < UNKNOWN``."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5
    UNKNOWN = 6

    @property
    def label(self) -> str:
        """Return the upper-case name used in rendered templates."""

        return self.name

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        """Return the severity matching ``name`` case-insensitively.

        Examples
        --------
        >>> Severity.from_name("warning") is Severity.WARN
        True
        >>> Severity.from_name(" Fatal ") is Severity.FATAL
        True
        """
        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown severity: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "Severity":
        """Translate a stdlib :mod:`logging` level into a :class:`Severity`.

        Levels between the stdlib constants round down to the nearest one;
        anything below ``DEBUG`` is ``TRACE`` and anything above ``CRITICAL``
        is ``UNKNOWN``.

        Examples
        --------
        >>> Severity.from_python_level(logging.WARNING) is Severity.WARN
        True
        >>> Severity.from_python_level(5) is Severity.TRACE
        True
        """
        if level < logging.DEBUG:
            return cls.TRACE
        if level < logging.INFO:
            return cls.DEBUG
        if level < logging.WARNING:
            return cls.INFO
        if level < logging.ERROR:
            return cls.WARN
        if level < logging.CRITICAL:
            return cls.ERROR
        if level == logging.CRITICAL:
            return cls.FATAL
        return cls.UNKNOWN


_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
    "ANY": "UNKNOWN",
}


__all__ = ["Severity"]
