"""Environment-driven configuration for the syslog device.

Purpose
-------
Resolve device settings from keyword arguments, ``LOG_SYSLOG_*`` environment
variables and, on request, the nearest ``.env`` file.

Contents
--------
* :data:`DOTENV_ENV_VAR` and the ``ENV_*`` variable names.
* :func:`should_use_dotenv` / :func:`enable_dotenv` - ``.env`` loading.
* :class:`SyslogSettings` and :func:`load_settings` - resolved configuration.

Precedence
----------
Explicit keyword arguments win over environment variables, and variables
already present in the environment win over ``.env`` entries.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Any, TypeVar

from dotenv import find_dotenv, load_dotenv

from lib_log_syslog.domain.codes import Facility, Option

T = TypeVar("T")

DOTENV_ENV_VAR = "LOG_SYSLOG_USE_DOTENV"
ENV_TEMPLATE = "LOG_SYSLOG_TEMPLATE"
ENV_ATTRIBUTE_FORMAT = "LOG_SYSLOG_ATTRIBUTE_FORMAT"
ENV_TIME_FORMAT = "LOG_SYSLOG_TIME_FORMAT"
ENV_FACILITY = "LOG_SYSLOG_FACILITY"
ENV_OPTIONS = "LOG_SYSLOG_OPTIONS"
ENV_CLOSE_CONNECTION = "LOG_SYSLOG_CLOSE_CONNECTION"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}

_DOTENV_LOCK = Lock()
_DOTENV_LOADED: Path | None = None


def parse_bool(value: str) -> bool:
    """Interpret ``1/true/yes/on`` and ``0/false/no/off`` strings.

    Examples
    --------
    >>> parse_bool(' Yes ')
    True
    >>> parse_bool('off')
    False
    """
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` should be loaded; an explicit flag wins.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value='1')
    False
    >>> should_use_dotenv(env_value='true')
    True
    >>> should_use_dotenv()
    False
    """
    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding existing variables.

    The search starts at ``search_from`` (default: the working directory) and
    walks up the parents. The first successful load is remembered and later
    calls return its path without reading the file again.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, or ``None`` when none was found.
    """
    global _DOTENV_LOADED
    with _DOTENV_LOCK:
        if _DOTENV_LOADED is not None:
            return _DOTENV_LOADED
        candidate = _find_dotenv(search_from)
        if candidate is None:
            return None
        load_dotenv(candidate, override=False)
        _DOTENV_LOADED = candidate
        return candidate


def _find_dotenv(search_from: Path | None) -> Path | None:
    if search_from is None:
        found = find_dotenv(usecwd=True)
        return Path(found).resolve() if found else None
    start = search_from.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    with _DOTENV_LOCK:
        _DOTENV_LOADED = None


@dataclass(slots=True, frozen=True)
class SyslogSettings:
    """Resolved keyword arguments for :class:`~lib_log_syslog.adapters.syslog_device.SyslogDevice`.

    ``None`` means "use the device default".
    """

    template: str | None = None
    attribute_format: str | None = None
    time_format: str | None = None
    options: int | None = None
    facility: int | None = None
    close_connection: bool = False

    def to_device_kwargs(self) -> dict[str, Any]:
        """Return keyword arguments accepted by ``SyslogDevice``."""

        return {
            "template": self.template,
            "attribute_format": self.attribute_format,
            "time_format": self.time_format,
            "options": self.options,
            "facility": self.facility,
            "close_connection": self.close_connection,
        }


def load_settings(
    *,
    template: str | None = None,
    attribute_format: str | None = None,
    time_format: str | None = None,
    options: int | str | None = None,
    facility: int | str | None = None,
    close_connection: bool | None = None,
) -> SyslogSettings:
    """Merge keyword arguments with ``LOG_SYSLOG_*`` environment variables.

    Raises
    ------
    ValueError
        If an environment variable or argument cannot be parsed; the message
        names the offending variable.

    Examples
    --------
    >>> os.environ['LOG_SYSLOG_FACILITY'] = 'local4'
    >>> load_settings().facility is Facility.LOCAL4
    True
    >>> load_settings(facility='daemon').facility is Facility.DAEMON
    True
    >>> _ = os.environ.pop('LOG_SYSLOG_FACILITY')
    """
    resolved_template = template if template is not None else os.getenv(ENV_TEMPLATE) or None
    resolved_attribute_format = attribute_format if attribute_format is not None else os.getenv(ENV_ATTRIBUTE_FORMAT) or None
    if resolved_attribute_format is not None:
        _validate_attribute_format(resolved_attribute_format)
    resolved_time_format = time_format if time_format is not None else os.getenv(ENV_TIME_FORMAT) or None

    return SyslogSettings(
        template=resolved_template,
        attribute_format=resolved_attribute_format,
        time_format=resolved_time_format,
        options=_resolve(options, ENV_OPTIONS, _coerce_options),
        facility=_resolve(facility, ENV_FACILITY, _coerce_facility),
        close_connection=bool(_resolve(close_connection, ENV_CLOSE_CONNECTION, _coerce_bool)),
    )


def _resolve(value: Any, env_name: str, coerce: Callable[[Any], T]) -> T | None:
    source = env_name
    if value is None:
        value = os.getenv(env_name)
        if value is None or not str(value).strip():
            return None
    else:
        source = env_name.removeprefix("LOG_SYSLOG_").lower()
    try:
        return coerce(value)
    except ValueError as exc:
        raise ValueError(f"{source}: {exc}") from exc


def _coerce_options(value: int | str) -> int:
    if isinstance(value, int):
        return value
    return Option.parse(value)


def _coerce_facility(value: int | str) -> int:
    if isinstance(value, int):
        return value
    return Facility.from_name(value)


def _coerce_bool(value: bool | str) -> bool:
    if isinstance(value, bool):
        return value
    return parse_bool(value)


def _validate_attribute_format(value: str) -> None:
    try:
        value % ("name", "value")
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{ENV_ATTRIBUTE_FORMAT} must contain exactly two %s placeholders: {value!r}") from exc


__all__ = [
    "DOTENV_ENV_VAR",
    "ENV_ATTRIBUTE_FORMAT",
    "ENV_CLOSE_CONNECTION",
    "ENV_FACILITY",
    "ENV_OPTIONS",
    "ENV_TEMPLATE",
    "ENV_TIME_FORMAT",
    "SyslogSettings",
    "enable_dotenv",
    "load_settings",
    "parse_bool",
    "should_use_dotenv",
]
