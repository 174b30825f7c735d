"""Structured log entry handed to devices.

Purpose
-------
Provide the immutable value devices consume. The entry is owned by the caller
for the duration of a ``write`` call; copying the attributes on construction
keeps devices from holding on to caller-owned mappings.

Contents
--------
* :data:`UNIT_OF_WORK_ID` - reserved attribute carrying a correlation id.
* :class:`LogEntry` dataclass with attribute lookup helpers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .severity import Severity

UNIT_OF_WORK_ID = "unit_of_work_id"
#: Attribute name reserved for the correlation identifier of a unit of work.


@dataclass(slots=True, frozen=True)
class LogEntry:
    """One structured log record.

    Attributes
    ----------
    time:
        Moment the entry was created.
    severity:
        :class:`Severity` of the entry.
    message:
        Arbitrary value; devices convert it with :func:`str`.
    progname:
        Program identity, ``None`` when the caller did not set one.
    pid:
        Process id of the emitting process.
    attributes:
        Insertion-ordered mapping of attribute names to values.
    """

    time: datetime
    severity: Severity
    message: Any
    progname: str | None = None
    pid: int = 0
    attributes: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "severity", Severity(self.severity))
        object.__setattr__(self, "attributes", dict(self.attributes or {}))

    def attribute(self, name: str) -> Any:
        """Return the attribute ``name`` or ``None`` when absent.

        Dotted names first match a literal key, then walk nested mappings.

        Examples
        --------
        >>> entry = LogEntry(datetime(2011, 2, 1), Severity.INFO, 'm', attributes={'http': {'status': 200}})
        >>> entry.attribute('http.status')
        200
        >>> entry.attribute('http.method') is None
        True
        """
        if name in self.attributes:
            return self.attributes[name]
        current: Any = self.attributes
        for part in name.split("."):
            if not isinstance(current, Mapping) or part not in current:
                return None
            current = current[part]
        return current

    @property
    def unit_of_work_id(self) -> Any:
        """Return the correlation identifier carried in the reserved attribute."""

        return self.attributes.get(UNIT_OF_WORK_ID)

    def replace(self, **changes: Any) -> "LogEntry":
        """Return a copied entry with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["LogEntry", "UNIT_OF_WORK_ID"]
