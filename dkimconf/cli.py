"""Command-line interface for dkimconf.

Responsibilities:
- Expose commands that parse DKIM configuration and map files.
- Resolve tool settings and map file/parse failures to stage diagnostics.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Callable, TypeVar

import typer

from .cli_rendering import (
    echo_json,
    echo_layout_summary,
    echo_map,
    echo_module_config,
    echo_sign_headers,
    echo_signing_config,
    exit_with_command_error,
)
from .config import ConfigLoader
from .errors import CommandStageError
from .layout import DkimLayout, load_layout
from .maps import load_map_file
from .settings import InspectSettings, SettingsLoader, SettingsSources
from .sign_headers import parse_sign_headers
from .telemetry.logger import ParseLogger

_T = TypeVar("_T")

app = typer.Typer(
    name="dkimconf",
    no_args_is_help=True,
    help="Inspect rspamd DKIM configuration and map files.",
)


def _read_input_file(path: Path, reader: Callable[[Path], _T]) -> _T:
    """Run a path-based reader and map missing or non-UTF-8 files to stage errors."""

    try:
        return reader(path)
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="input",
            detail=f"File not found: `{path}`.",
            hint="Pass an existing configuration or map file path.",
        ) from exc
    except UnicodeDecodeError as exc:
        raise CommandStageError(
            stage="input",
            detail=f"File `{path}` is not valid UTF-8: {exc.reason} at byte {exc.start}.",
            hint="Save configuration and map files as UTF-8 text.",
        ) from exc


def _resolve_settings(
    settings_file: Path | None,
    config_dir: Path | None,
    log_level: str | None,
) -> InspectSettings:
    """Resolve effective settings from CLI options, a YAML settings file and env."""

    file_values = {}
    if settings_file is not None:
        try:
            file_values = SettingsLoader.from_yaml(settings_file)
        except FileNotFoundError as exc:
            raise CommandStageError(
                stage="settings",
                detail=f"Settings file not found: `{settings_file}`.",
                hint="Provide an existing path via `--settings <path.yaml>`.",
            ) from exc
        except ValueError as exc:
            raise CommandStageError(
                stage="settings",
                detail=f"Invalid settings file `{settings_file}`: {exc}",
                hint="Fix settings keys/values and rerun.",
            ) from exc
        except Exception as exc:
            raise CommandStageError(
                stage="settings",
                detail=f"Failed to load settings file `{settings_file}`: {exc}",
                hint="Verify YAML syntax and file permissions.",
            ) from exc

    cli_values: dict[str, str] = {}
    if config_dir is not None:
        cli_values["config_dir"] = str(config_dir)
    if log_level is not None:
        cli_values["log_level"] = log_level

    try:
        return SettingsLoader.resolve(
            SettingsSources(cli=cli_values, file=file_values, env=os.environ)
        )
    except ValueError as exc:
        raise CommandStageError(
            stage="settings",
            detail=str(exc),
            hint="Check `--log-level`, the settings file and `DKIMCONF_*` variables.",
        ) from exc


def _load_config_dir(settings: InspectSettings) -> DkimLayout:
    """Load the configured directory and map file-level failures to stage errors."""

    try:
        return load_layout(
            settings.config_dir,
            strict_maps=settings.strict_maps,
            logger=ParseLogger(level=settings.log_level),
        )
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="input",
            detail=f"Referenced map file not found: `{exc.filename}`.",
            hint="Fix `selector_map`/`path_map` or set `strict_maps: false`.",
        ) from exc
    except UnicodeDecodeError as exc:
        raise CommandStageError(
            stage="input",
            detail=(
                f"A file in `{settings.config_dir}` is not valid UTF-8: "
                f"{exc.reason} at byte {exc.start}."
            ),
            hint="Save configuration and map files as UTF-8 text.",
        ) from exc


@app.command("module")
def module_command(
    path: Annotated[Path, typer.Argument(help="Path to `dkim.conf`.")],
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the parsed record as JSON.")
    ] = False,
) -> None:
    """Parse a DKIM module config and print `enabled` and the sign-header list."""

    try:
        config = _read_input_file(path, ConfigLoader.module_from_path)
    except Exception as exc:
        exit_with_command_error("module", exc)

    if as_json:
        echo_json(config.as_dict())
    else:
        echo_module_config(config)


@app.command("signing")
def signing_command(
    path: Annotated[Path, typer.Argument(help="Path to `dkim_signing.conf`.")],
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the parsed record as JSON.")
    ] = False,
) -> None:
    """Parse a DKIM signing config and print its options and domain rules."""

    try:
        config = _read_input_file(path, ConfigLoader.signing_from_path)
    except Exception as exc:
        exit_with_command_error("signing", exc)

    if as_json:
        echo_json(config.as_dict())
    else:
        echo_signing_config(config)


@app.command("sign-headers")
def sign_headers_command(
    value: Annotated[str, typer.Argument(help="Raw `sign_headers` value, e.g. `(o)from:date`.")],
) -> None:
    """Print the entries of a `sign_headers` value with their oversigning mode."""

    echo_sign_headers(parse_sign_headers(value))


@app.command("map")
def map_command(
    path: Annotated[Path, typer.Argument(help="Path to a two-column map file.")],
) -> None:
    """Parse a selectors, paths or signed-domains map and print its entries."""

    try:
        entries = _read_input_file(path, load_map_file)
    except Exception as exc:
        exit_with_command_error("map", exc)

    echo_map(entries)


@app.command("check")
def check_command(
    config_dir: Annotated[
        Path | None,
        typer.Option(
            "--config-dir",
            help="rspamd `local.d` directory (overrides settings file and env).",
        ),
    ] = None,
    settings_file: Annotated[
        Path | None,
        typer.Option("--settings", help="Path to YAML settings file."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Parse event log level, e.g. `INFO`."),
    ] = None,
) -> None:
    """Load every DKIM file of a config directory and print a summary."""

    try:
        settings = _resolve_settings(settings_file, config_dir, log_level)
        if not settings.config_dir.is_dir():
            raise CommandStageError(
                stage="input",
                detail=f"Config directory not found: `{settings.config_dir}`.",
                hint="Pass `--config-dir` or set `DKIMCONF_CONFIG_DIR`.",
            )
        layout = _load_config_dir(settings)
    except Exception as exc:
        exit_with_command_error("check", exc)

    echo_layout_summary(layout)


def main() -> None:
    """Run the dkimconf CLI."""

    app()
