"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
module and signing config summaries, map rows and layout summaries.
"""

from __future__ import annotations

import json
from typing import Mapping, NoReturn

import typer

from .config import DkimModuleConfig, DkimSigningConfig
from .errors import CommandStageError, DkimConfigError
from .layout import DkimLayout
from .sign_headers import SignHeader


_SIGN_MODE_BY_MARKER = {
    "(o)": "oversigned",
    "(x)": "optional-oversigned",
    "": "signed",
}


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, (CommandStageError, DkimConfigError)):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_json(payload: Mapping[str, object]) -> None:
    """Print a payload as stable, indented JSON."""

    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))


def _format_optional_boolean(value: bool | None) -> str:
    if value is None:
        return "(unset)"
    return "true" if value else "false"


def echo_sign_headers(entries: tuple[SignHeader, ...]) -> None:
    """Print one row per sign-header entry with its oversigning mode."""

    for entry in entries:
        typer.echo(f"{entry.name}\t{_SIGN_MODE_BY_MARKER[entry.marker]}")


def echo_module_config(config: DkimModuleConfig) -> None:
    """Print the module config summary."""

    typer.echo(f"enabled: {_format_optional_boolean(config.enabled)}")
    typer.echo(f"sign_headers: {len(config.sign_header_list)} entries")
    echo_sign_headers(config.sign_header_list)


def echo_signing_config(config: DkimSigningConfig) -> None:
    """Print signing options followed by domain rules sorted by label."""

    for key, value in config.as_dict().items():
        if key == "domain":
            continue
        if value is None or isinstance(value, bool):
            typer.echo(f"{key}: {_format_optional_boolean(value)}")
        elif value:
            typer.echo(f"{key}: {value}")
    for label in sorted(config.domain):
        rule = config.domain[label]
        typer.echo(f"domain {label}: selector={rule.selector or '-'} path={rule.path or '-'}")


def echo_map(entries: Mapping[str, str]) -> None:
    """Print map entries as `key value` rows sorted by key."""

    for key in sorted(entries):
        typer.echo(f"{key} {entries[key]}")


def echo_layout_summary(layout: DkimLayout) -> None:
    """Print which DKIM files were found and how many entries each holds."""

    typer.echo(f"Config dir: {layout.config_dir}")
    if layout.module is None:
        typer.echo("dkim.conf: (not found)")
    else:
        typer.echo(
            f"dkim.conf: enabled={_format_optional_boolean(layout.module.enabled)} "
            f"sign_headers={len(layout.module.sign_header_list)}"
        )
    if layout.signing is None:
        typer.echo("dkim_signing.conf: (not found)")
    else:
        typer.echo(
            f"dkim_signing.conf: enabled={_format_optional_boolean(layout.signing.enabled)} "
            f"domains={len(layout.signing.domain)}"
        )
    typer.echo(f"Selectors map entries: {len(layout.selectors)}")
    typer.echo(f"Paths map entries: {len(layout.paths)}")
    typer.echo(f"Signed domains map entries: {len(layout.signed_domains)}")
