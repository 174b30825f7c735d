"""Render log entries into single syslog lines.

Purpose
-------
Assemble the complete message text for an entry and only then escape it for
the syslog transport. The C ``syslog`` call treats ``%`` as a format
directive, so every literal percent sign is doubled; transports that format
on the caller's behalf undo the escape. Escaping the message and the attribute
block separately would escape content twice or not at all when it crosses a
substitution boundary; the pipeline is therefore strictly
``assemble -> strip terminator -> escape``.

Contents
--------
* :data:`TemplateSpec` - accepted template forms.
* :func:`escape_percent` - the escaping stage.
* :func:`create_message_renderer` - factory returning the rendering callable.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Union

from lib_log_syslog.domain.entry import LogEntry
from lib_log_syslog.domain.template import DEFAULT_ATTRIBUTE_FORMAT, DEFAULT_TEMPLATE, Template

MessageRenderer = Callable[[LogEntry], str]
TemplateSpec = Union[str, Template, Callable[[LogEntry], Any]]

_PERCENT = "%"
_ESCAPED_PERCENT = "%%"


def escape_percent(text: str) -> str:
    """Double every ``%`` so the transport logs it literally.

    Examples
    --------
    >>> escape_percent('message 100%')
    'message 100%%'
    """
    return text.replace(_PERCENT, _ESCAPED_PERCENT)


def _strip_line_terminator(text: str) -> str:
    for terminator in ("\r\n", "\n", "\r"):
        if text.endswith(terminator):
            return text[: -len(terminator)]
    return text


def create_message_renderer(
    template: TemplateSpec | None = None,
    *,
    attribute_format: str | None = None,
    time_format: str | None = None,
) -> MessageRenderer:
    """Return a callable turning a :class:`LogEntry` into escaped text.

    Parameters
    ----------
    template:
        Template string (compiled once here), a pre-built :class:`Template`,
        or any callable accepting the entry. ``None`` selects
        :data:`~lib_log_syslog.domain.template.DEFAULT_TEMPLATE`.
    attribute_format:
        ``%``-style format with two ``%s`` slots used by ``:attributes`` in
        string templates.
    time_format:
        ``strftime`` format for ``:time`` in string templates.

    Examples
    --------
    >>> from datetime import datetime
    >>> from lib_log_syslog.domain.severity import Severity
    >>> entry = LogEntry(datetime(2011, 2, 1), Severity.WARN, 'message 100%', attributes={'foo': 'bar'})
    >>> create_message_renderer()(entry)
    'message 100%% [foo:bar]'
    >>> create_message_renderer(lambda e: e.message.upper())(entry)
    'MESSAGE 100%%'
    """
    if template is None:
        template = DEFAULT_TEMPLATE
    if isinstance(template, str):
        rule: Callable[[LogEntry], Any] = Template(
            template,
            attribute_format=attribute_format or DEFAULT_ATTRIBUTE_FORMAT,
            time_format=time_format,
        )
    elif callable(template):
        rule = template
    else:
        raise TypeError(f"template must be a string or a callable, not {type(template).__name__}")

    def render(entry: LogEntry) -> str:
        """Render ``entry`` to a single escaped line."""
        text = str(rule(entry))
        return escape_percent(_strip_line_terminator(text))

    return render


__all__ = ["MessageRenderer", "TemplateSpec", "create_message_renderer", "escape_percent"]
