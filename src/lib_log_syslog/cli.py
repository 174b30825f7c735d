"""Command line interface for inspecting and exercising the syslog device.

Purpose
-------
Provide ``lib_log_syslog info`` for the metadata banner and
``lib_log_syslog send`` to push a single entry through a configured
:class:`SyslogDevice`, which is handy when checking rsyslog/journald routing.

Contents
--------
* :func:`cli` - rich-click group with dotenv and traceback toggles.
* :func:`main` - entry point delegating to :func:`lib_cli_exit_tools.run_cli`.
"""

from __future__ import annotations

import os
from typing import Sequence

import lib_cli_exit_tools
import rich_click as click
from click.core import ParameterSource

from . import __init__conf__
from . import config as config_module
from .domain.severity import Severity
from .lib_log_syslog import build_entry, create_device, summary_info

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_SEVERITY_CHOICES = [level.name.lower() for level in Severity]


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help=f"Load environment variables from a nearby .env (also via {config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, use_dotenv: bool) -> None:
    """Root command storing global flags and loading ``.env`` when asked."""

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not ParameterSource.DEFAULT:
        explicit = use_dotenv
    if config_module.should_use_dotenv(explicit=explicit, env_value=os.getenv(config_module.DOTENV_ENV_VAR)):
        config_module.enable_dotenv()

    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print resolved metadata so users can inspect installation details."""

    click.echo(summary_info(), nl=False)


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option(
    "--severity",
    type=click.Choice(_SEVERITY_CHOICES, case_sensitive=False),
    default="info",
    show_default=True,
    help="Entry severity.",
)
@click.option("--progname", default=None, help="Program identity passed to openlog.")
@click.option(
    "--attr",
    "attributes",
    multiple=True,
    metavar="KEY=VALUE",
    help="Attribute added to the entry; repeatable.",
)
@click.option("--template", default=None, help="Template string, e.g. ':severity :message :attributes'.")
@click.option("--facility", default=None, help="Facility name or code, e.g. local0.")
@click.option("--options", "syslog_options", default=None, help="openlog options, e.g. 'pid|perror'.")
@click.option("--close-connection", is_flag=True, default=False, help="Close the syslog connection after writing.")
def cli_send(
    message: str,
    severity: str,
    progname: str | None,
    attributes: tuple[str, ...],
    template: str | None,
    facility: str | None,
    syslog_options: str | None,
    close_connection: bool,
) -> None:
    """Write MESSAGE to syslog through the configured device."""

    parsed = _parse_attributes(attributes)
    try:
        device = create_device(
            template=template,
            facility=facility,
            options=syslog_options,
            close_connection=True if close_connection else None,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    entry = build_entry(message, severity=severity, progname=progname or __init__conf__.shell_command, attributes=parsed)
    try:
        device.write(entry)
    finally:
        device.close()
    click.echo(f"sent {entry.severity.name} entry: {entry.message}")


def _parse_attributes(pairs: tuple[str, ...]) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for pair in pairs:
        key, separator, value = pair.partition("=")
        if not separator or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint="--attr")
        parsed[key.strip()] = value
    return parsed


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI through :mod:`lib_cli_exit_tools` and return its exit code.

    Traceback preferences changed by ``--traceback`` are restored afterwards
    so embedding callers keep their own settings.
    """

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        return lib_cli_exit_tools.run_cli(
            cli,
            argv=list(argv) if argv is not None else None,
            prog_name=__init__conf__.shell_command,
        )
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


__all__ = ["cli", "main"]
