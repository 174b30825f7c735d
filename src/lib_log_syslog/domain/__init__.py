"""Domain entities and value objects consumed by the syslog device."""

from __future__ import annotations

from .codes import Facility, Option, Priority, log_mask, log_upto
from .entry import UNIT_OF_WORK_ID, LogEntry
from .severity import Severity
from .template import DEFAULT_ATTRIBUTE_FORMAT, DEFAULT_TEMPLATE, Template

__all__ = [
    "DEFAULT_ATTRIBUTE_FORMAT",
    "DEFAULT_TEMPLATE",
    "Facility",
    "LogEntry",
    "Option",
    "Priority",
    "Severity",
    "Template",
    "UNIT_OF_WORK_ID",
    "log_mask",
    "log_upto",
]
