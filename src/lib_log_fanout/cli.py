"""Click command line surface for ad-hoc fan-out checks.

Contents
--------
* ``info`` - metadata banner (also shown when no subcommand is given).
* ``kinds`` - registered destination kinds and whether they are usable here.
* ``send`` - deliver one message to the requested destinations.
* :func:`main` - entry point routed through ``lib_cli_exit_tools.run_cli``.
"""

from __future__ import annotations

from typing import Sequence

import click
import lib_cli_exit_tools

from . import __init__conf__
from . import config as config_module
from .adapters.destinations import create_default_registry
from .domain.errors import ConfigurationError, DeliveryError
from .domain.levels import Severity
from .domain.message import SYSTEM_SOURCE, LogMessage
from .runtime._composition import activate_spec, build_router
from .runtime._settings import RuntimeConfig, build_runtime_settings

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_LEVEL_CHOICES = [level.severity for level in Severity]


@click.group(
    help="Fan log messages out to syslog, files, consoles, and remote collectors.",
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
    default=None,
    help="Show full Python tracebacks on errors.",
)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load environment defaults from the nearest .env (overrides {config_module.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool | None, use_dotenv: bool | None) -> None:
    if traceback is not None:
        lib_cli_exit_tools.config.traceback = traceback
        lib_cli_exit_tools.config.traceback_force_color = traceback
    if config_module.should_use_dotenv(explicit=use_dotenv):
        config_module.enable_dotenv()
    if ctx.invoked_subcommand is None:
        click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print package metadata."""

    click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("kinds", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_kinds() -> None:
    """List destination kinds with priority and target needs; unusable ones are marked."""

    for descriptor in create_default_registry():
        marker = "" if descriptor.is_suitable() else "  (unavailable)"
        takes = "yes" if descriptor.takes_target else "no"
        click.echo(f"{descriptor.kind:<18} priority={descriptor.priority}  target={takes}{marker}")


@cli.command("send", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("message")
@click.option(
    "--to",
    "destinations",
    multiple=True,
    default=("console",),
    show_default=True,
    help="Destination as KIND, KIND=TARGET, or a bare target; repeatable.",
)
@click.option(
    "--level",
    type=click.Choice(_LEVEL_CHOICES, case_sensitive=False),
    default=Severity.NOTICE.severity,
    show_default=True,
)
@click.option("--source", default=SYSTEM_SOURCE, show_default=True)
@click.pass_context
def cli_send(ctx: click.Context, message: str, destinations: tuple[str, ...], level: str, source: str) -> None:
    """Deliver MESSAGE; exits with status 1 when no destination accepted it."""

    resolved = build_runtime_settings(RuntimeConfig(destinations=destinations))
    router = build_router(resolved.settings)
    try:
        for spec in resolved.destinations:
            try:
                activate_spec(router, spec)
            except ConfigurationError as exc:
                raise click.BadParameter(str(exc), param_hint="--to") from exc
            except (DeliveryError, OSError) as exc:
                raise click.ClickException(f"cannot activate {spec}: {exc}") from exc
        report = router.dispatch(LogMessage(level=level, text=message, source=source))
    finally:
        router.shutdown()
    if not report.delivered:
        ctx.exit(1)


def main(argv: Sequence[str] | None = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI and restore global traceback preferences afterwards."""

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
