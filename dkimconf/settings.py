"""Runtime settings for the dkimconf command-line tool.

Responsibilities:
- Define tool settings as a typed dataclass.
- Resolve each setting with deterministic precedence:
  CLI > YAML settings file > environment > default.

Key types:
- `InspectSettings`: resolved settings for one CLI invocation.
- `SettingsSources`: raw value sources for precedence resolution.
- `SettingsLoader`: YAML/env loading and resolution helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_permissive_boolean


DEFAULT_CONFIG_DIR = Path("/etc/rspamd/local.d")
_DEFAULT_LOG_LEVEL = "WARNING"
_SUPPORTED_LOG_LEVELS = frozenset(
    {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
)

_ENV_KEYS = {
    "config_dir": "DKIMCONF_CONFIG_DIR",
    "log_level": "DKIMCONF_LOG_LEVEL",
    "strict_maps": "DKIMCONF_STRICT_MAPS",
}


@dataclass(frozen=True, slots=True)
class SettingsSources:
    """Source mappings used for deterministic settings precedence.

    Attributes:
        cli: Values explicitly provided by CLI options.
        file: Values loaded from a YAML settings file.
        env: Environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    file: Mapping[str, Any] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class InspectSettings:
    """Resolved settings for one invocation.

    Attributes:
        config_dir: rspamd `local.d` directory holding the DKIM files.
        log_level: `loguru` level name for parse events.
        strict_maps: Whether a referenced but missing map file is an error.
    """

    config_dir: Path = DEFAULT_CONFIG_DIR
    log_level: str = _DEFAULT_LOG_LEVEL
    strict_maps: bool = True


class SettingsLoader:
    """Factory methods for creating `InspectSettings` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(_ENV_KEYS)

    @staticmethod
    def from_yaml(path: Path) -> Mapping[str, Any]:
        """Read a YAML settings file and return its validated top-level mapping."""

        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        if payload is None:
            return {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML settings `{path}` must contain a top-level mapping/object.")

        unknown = sorted(set(payload).difference(SettingsLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"YAML settings `{path}` includes unsupported key(s): {key_list}.")
        return payload

    @staticmethod
    def resolve(sources: SettingsSources | None = None) -> InspectSettings:
        """Resolve settings from sources in deterministic precedence order."""

        resolved_sources = sources if sources is not None else SettingsSources(env=os.environ)

        config_dir = SettingsLoader._resolve_value(resolved_sources, "config_dir")
        log_level = SettingsLoader._resolve_value(resolved_sources, "log_level")
        strict_maps = SettingsLoader._resolve_boolean(resolved_sources, "strict_maps")

        normalized_level = (log_level or _DEFAULT_LOG_LEVEL).upper()
        if normalized_level not in _SUPPORTED_LOG_LEVELS:
            supported = ", ".join(sorted(_SUPPORTED_LOG_LEVELS))
            raise ValueError(
                f"Unsupported `log_level` value `{log_level}`; supported: {supported}."
            )

        return InspectSettings(
            config_dir=Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR,
            log_level=normalized_level,
            strict_maps=True if strict_maps is None else strict_maps,
        )

    @staticmethod
    def _resolve_value(sources: SettingsSources, key: str) -> str | None:
        """Return the first non-blank value for `key` across CLI, file and env."""

        for mapping, lookup_key in (
            (sources.cli, key),
            (sources.file, key),
            (sources.env, _ENV_KEYS[key]),
        ):
            if lookup_key not in mapping:
                continue
            value = normalize_optional_string(mapping[lookup_key])
            if value is not None:
                return value
        return None

    @staticmethod
    def _resolve_boolean(sources: SettingsSources, key: str) -> bool | None:
        """Resolve a permissive boolean setting, rejecting unrecognized tokens."""

        raw_value = SettingsLoader._resolve_value(sources, key)
        if raw_value is None:
            return None

        parsed = parse_permissive_boolean(raw_value)
        if parsed is None:
            raise ValueError(
                f"`{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`, `on`/`off`)."
            )
        return parsed
