"""Unit tests for tool settings loading and precedence resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from dkimconf.settings import (
    DEFAULT_CONFIG_DIR,
    InspectSettings,
    SettingsLoader,
    SettingsSources,
)


def test_settings_resolve_uses_defaults_without_sources() -> None:
    """Empty sources should resolve to the built-in defaults."""

    settings = SettingsLoader.resolve(SettingsSources())

    assert settings == InspectSettings()
    assert settings.config_dir == DEFAULT_CONFIG_DIR
    assert settings.log_level == "WARNING"
    assert settings.strict_maps is True


def test_settings_resolve_prefers_cli_then_file_then_env() -> None:
    """Each setting should come from the highest-precedence non-blank source."""

    sources = SettingsSources(
        cli={"config_dir": "/from/cli", "log_level": "  "},
        file={"log_level": "info", "strict_maps": False},
        env={
            "DKIMCONF_CONFIG_DIR": "/from/env",
            "DKIMCONF_LOG_LEVEL": "ERROR",
            "DKIMCONF_STRICT_MAPS": "yes",
        },
    )

    settings = SettingsLoader.resolve(sources)

    assert settings.config_dir == Path("/from/cli")
    assert settings.log_level == "INFO"
    assert settings.strict_maps is False


def test_settings_resolve_reads_env_values() -> None:
    """Environment variables should apply when CLI and file are silent."""

    settings = SettingsLoader.resolve(
        SettingsSources(
            env={
                "DKIMCONF_CONFIG_DIR": "/srv/rspamd/local.d",
                "DKIMCONF_LOG_LEVEL": "debug",
                "DKIMCONF_STRICT_MAPS": "off",
            }
        )
    )

    assert settings == InspectSettings(
        config_dir=Path("/srv/rspamd/local.d"), log_level="DEBUG", strict_maps=False
    )


def test_settings_resolve_rejects_unknown_log_level() -> None:
    """Unsupported log levels should fail with the supported list."""

    with pytest.raises(ValueError, match=r"Unsupported `log_level` value `loud`"):
        SettingsLoader.resolve(SettingsSources(cli={"log_level": "loud"}))


def test_settings_resolve_rejects_invalid_boolean() -> None:
    """Non-boolean `strict_maps` values should be rejected."""

    with pytest.raises(ValueError, match=r"`strict_maps` must be a boolean value"):
        SettingsLoader.resolve(SettingsSources(env={"DKIMCONF_STRICT_MAPS": "sometimes"}))


def test_settings_from_yaml_loads_mapping(tmp_path: Path) -> None:
    """YAML settings should load into a mapping usable as the file source."""

    settings_path = tmp_path / "dkimconf.yaml"
    settings_path.write_text(
        "config_dir: /etc/rspamd/override.d\nlog_level: info\nstrict_maps: no\n",
        encoding="utf-8",
    )

    payload = SettingsLoader.from_yaml(settings_path)
    settings = SettingsLoader.resolve(SettingsSources(file=payload))

    assert settings.config_dir == Path("/etc/rspamd/override.d")
    assert settings.log_level == "INFO"
    assert settings.strict_maps is False


def test_settings_from_yaml_accepts_empty_file(tmp_path: Path) -> None:
    """An empty YAML document should behave like no settings."""

    settings_path = tmp_path / "empty.yaml"
    settings_path.write_text("", encoding="utf-8")

    assert SettingsLoader.from_yaml(settings_path) == {}


def test_settings_from_yaml_rejects_unknown_keys_and_non_mappings(tmp_path: Path) -> None:
    """YAML settings should fail clearly on unknown keys or a non-mapping root."""

    unknown_path = tmp_path / "unknown.yaml"
    unknown_path.write_text("config_dir: /x\ncolour: blue\n", encoding="utf-8")
    with pytest.raises(ValueError, match=r"unsupported key\(s\): colour"):
        SettingsLoader.from_yaml(unknown_path)

    list_path = tmp_path / "list.yaml"
    list_path.write_text("- config_dir\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must contain a top-level mapping"):
        SettingsLoader.from_yaml(list_path)
