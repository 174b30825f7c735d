"""Compiled text templates for rendering log entries.

Purpose
-------
Turn a fixed-format string such as ``":message :attributes"`` into a reusable
rendering rule that is parsed exactly once.

Contents
--------
* :data:`DEFAULT_TEMPLATE` / :data:`DEFAULT_ATTRIBUTE_FORMAT` constants.
* :class:`Template` - compiled template callable on :class:`LogEntry`.

System Role
-----------
The message renderer (:mod:`lib_log_syslog.application.use_cases.render_message`)
calls a :class:`Template` or a caller-supplied function through the same
``template(entry)`` contract. Escaping for the syslog transport is *not* done
here; templates produce plain text.

Syntax
------
``:name`` and ``{{name}}`` are equivalent placeholders. ``message``,
``severity``, ``progname``, ``pid``, ``time`` and ``attributes`` are reserved;
every other name is looked up as an entry attribute (dotted names walk nested
mappings). ``:attributes`` expands to the attributes the template does not
reference explicitly.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any

from .entry import UNIT_OF_WORK_ID, LogEntry

DEFAULT_TEMPLATE = ":message :attributes"
DEFAULT_ATTRIBUTE_FORMAT = "[%s:%s]"

_NAME = r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*"
_PLACEHOLDER_RE = re.compile(r"\{\{\s*(" + _NAME + r")\s*\}\}|:(" + _NAME + r")")
_RESERVED = frozenset({"message", "severity", "progname", "pid", "time", "attributes"})


class Template:
    """Rendering rule compiled from a template string.

    Examples
    --------
    >>> from datetime import datetime
    >>> from lib_log_syslog.domain.severity import Severity
    >>> entry = LogEntry(datetime(2011, 2, 1), Severity.WARN, 'message 1', attributes={'foo': 'bar'})
    >>> Template(':message :attributes')(entry)
    'message 1 [foo:bar]'
    >>> Template('{{foo}} - {{message}}')(entry)
    'bar - message 1'
    """

    def __init__(
        self,
        template: str,
        *,
        attribute_format: str = DEFAULT_ATTRIBUTE_FORMAT,
        time_format: str | None = None,
    ) -> None:
        try:
            attribute_format % ("name", "value")
        except (TypeError, ValueError) as exc:
            raise ValueError(f"attribute_format must contain exactly two %s placeholders: {attribute_format!r}") from exc
        self._source = template
        self._attribute_format = attribute_format
        self._time_format = time_format
        self._segments = _compile(template)
        self._explicit = frozenset(value for is_name, value in self._segments if is_name and value not in _RESERVED)

    @property
    def source(self) -> str:
        """Return the template string this rule was compiled from."""

        return self._source

    def __call__(self, entry: LogEntry) -> str:
        parts: list[str] = []
        previous_literal = False
        for is_name, value in self._segments:
            if not is_name:
                parts.append(value)
                previous_literal = True
                continue
            rendered = self._lookup(entry, value)
            if value == "attributes" and not rendered and previous_literal:
                # drop the separator written for the empty attribute block
                parts[-1] = parts[-1].rstrip(" \t")
            parts.append(rendered)
            previous_literal = False
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Template({self._source!r})"

    def _lookup(self, entry: LogEntry, name: str) -> str:
        if name == "message":
            return str(entry.message)
        if name == "attributes":
            return self._render_attributes(entry)
        if name == "severity":
            return entry.severity.label
        if name == "progname":
            return entry.progname or ""
        if name == "pid":
            return str(entry.pid)
        if name == "time":
            if self._time_format is None:
                return entry.time.isoformat(timespec="milliseconds")
            return entry.time.strftime(self._time_format)
        value = entry.attribute(name)
        return "" if value is None else str(value)

    def _render_attributes(self, entry: LogEntry) -> str:
        fragments = [
            self._attribute_format % (name, value)
            for name, value in _flatten(entry.attributes)
            if name != UNIT_OF_WORK_ID and name not in self._explicit and value is not None
        ]
        return " ".join(fragments)


def _compile(template: str) -> list[tuple[bool, str]]:
    """Split ``template`` into ``(is_placeholder, text)`` segments."""

    segments: list[tuple[bool, str]] = []
    position = 0
    for match in _PLACEHOLDER_RE.finditer(template):
        if match.start() > position:
            segments.append((False, template[position : match.start()]))
        segments.append((True, match.group(1) or match.group(2)))
        position = match.end()
    if position < len(template):
        segments.append((False, template[position:]))
    return segments


def _flatten(attributes: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any]]:
    for name, value in attributes.items():
        key = f"{prefix}{name}"
        if isinstance(value, Mapping) and value:
            yield from _flatten(value, f"{key}.")
        else:
            yield key, value


__all__ = ["DEFAULT_ATTRIBUTE_FORMAT", "DEFAULT_TEMPLATE", "Template"]
