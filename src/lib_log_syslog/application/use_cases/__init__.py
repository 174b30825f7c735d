"""Use cases orchestrating rendering for the syslog device."""

from __future__ import annotations

from .render_message import MessageRenderer, TemplateSpec, create_message_renderer, escape_percent

__all__ = ["MessageRenderer", "TemplateSpec", "create_message_renderer", "escape_percent"]
