"""Numeric syslog codes from ``<syslog.h>``.

The values are fixed by POSIX and mirrored here so the domain layer (and the
tests) never need the platform-only :mod:`syslog` module.
"""

from __future__ import annotations

from enum import IntEnum, IntFlag


class Priority(IntEnum):
    """Syslog message priorities, most severe first."""

    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


class Facility(IntEnum):
    """Syslog facility codes (already shifted, as passed to ``openlog``)."""

    KERN = 0 << 3
    USER = 1 << 3
    MAIL = 2 << 3
    DAEMON = 3 << 3
    AUTH = 4 << 3
    SYSLOG = 5 << 3
    LPR = 6 << 3
    NEWS = 7 << 3
    UUCP = 8 << 3
    CRON = 9 << 3
    AUTHPRIV = 10 << 3
    FTP = 11 << 3
    LOCAL0 = 16 << 3
    LOCAL1 = 17 << 3
    LOCAL2 = 18 << 3
    LOCAL3 = 19 << 3
    LOCAL4 = 20 << 3
    LOCAL5 = 21 << 3
    LOCAL6 = 22 << 3
    LOCAL7 = 23 << 3

    @classmethod
    def from_name(cls, name: str) -> "Facility":
        """Parse ``local0``, ``LOG_DAEMON`` or a decimal code.

        Examples
        --------
        >>> Facility.from_name("LOG_LOCAL3") is Facility.LOCAL3
        True
        >>> Facility.from_name("24") is Facility.DAEMON
        True
        """
        text = name.strip()
        if text.isdigit():
            try:
                return cls(int(text))
            except ValueError as exc:
                raise ValueError(f"Unknown syslog facility: {name!r}") from exc
        normalized = _strip_prefix(text)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown syslog facility: {name!r}") from exc


class Option(IntFlag):
    """Bits accepted by ``openlog`` as its option argument."""

    PID = 0x01
    CONS = 0x02
    ODELAY = 0x04
    NDELAY = 0x08
    NOWAIT = 0x10
    PERROR = 0x20

    @classmethod
    def parse(cls, text: str) -> "Option":
        """Parse ``"pid|cons"``, ``"PID,NDELAY"`` or a decimal bitmask.

        Examples
        --------
        >>> Option.parse("pid|cons") == Option.PID | Option.CONS
        True
        >>> Option.parse("LOG_PERROR, LOG_PID") == Option.PERROR | Option.PID
        True
        >>> Option.parse("0") == Option(0)
        True
        """
        stripped = text.strip()
        if stripped.isdigit():
            value = int(stripped)
            if value & ~_ALL_OPTIONS:
                raise ValueError(f"Unknown syslog option bits in {text!r}")
            return cls(value)
        result = cls(0)
        for part in stripped.replace(",", "|").split("|"):
            token = part.strip()
            if not token:
                continue
            try:
                result |= cls[_strip_prefix(token)]
            except KeyError as exc:
                raise ValueError(f"Unknown syslog option: {token!r}") from exc
        return result


_ALL_OPTIONS = 0x3F


def _strip_prefix(token: str) -> str:
    upper = token.upper()
    return upper[4:] if upper.startswith("LOG_") else upper


def log_mask(priority: int) -> int:
    """Return the mask bit for a single priority (``LOG_MASK``)."""

    return 1 << priority


def log_upto(priority: int) -> int:
    """Return the mask selecting every priority up to ``priority`` (``LOG_UPTO``).

    Examples
    --------
    >>> log_upto(Priority.DEBUG)
    255
    >>> log_upto(Priority.ERR)
    15
    """
    return (1 << (priority + 1)) - 1


__all__ = ["Facility", "Option", "Priority", "log_mask", "log_upto"]
