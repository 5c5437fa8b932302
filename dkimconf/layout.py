"""Loader for an rspamd `local.d` directory's DKIM files.

Responsibilities:
- Read `dkim.conf`, `dkim_signing.conf` and the DKIM map files in one call.
- Follow `selector_map`/`path_map` references from the signing config.
- Log one start/complete (or skipped/failure) event per file.

Key types:
- `DkimLayout`: everything read from one directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping, TypeVar

from .config import ConfigLoader, DkimModuleConfig, DkimSigningConfig
from .maps import load_map_file
from .telemetry.logger import ParseLogger

MODULE_CONFIG_NAME = "dkim.conf"
SIGNING_CONFIG_NAME = "dkim_signing.conf"
MAPS_DIR_NAME = "maps.d"
SELECTORS_MAP_NAME = "dkim_selectors.map"
PATHS_MAP_NAME = "dkim_paths.map"
SIGNED_DOMAINS_MAP_NAME = "signed_domains.map"

_T = TypeVar("_T")


def _empty_map() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class DkimLayout:
    """DKIM configuration read from one directory.

    Attributes:
        config_dir: Directory the files were read from.
        module: `dkim.conf` contents, `None` when the file is absent.
        signing: `dkim_signing.conf` contents, `None` when the file is absent.
        selectors: Domain to selector map.
        paths: Domain to key path map.
        signed_domains: Signing domain to key path map.
    """

    config_dir: Path
    module: DkimModuleConfig | None = None
    signing: DkimSigningConfig | None = None
    selectors: Mapping[str, str] = field(default_factory=_empty_map)
    paths: Mapping[str, str] = field(default_factory=_empty_map)
    signed_domains: Mapping[str, str] = field(default_factory=_empty_map)

    def selector_for(self, domain: str) -> str:
        """Return the selector for `domain`: domain rule, then map, then global."""

        if self.signing is not None:
            rule = self.signing.domain.get(domain)
            if rule is not None and rule.selector:
                return rule.selector
        if domain in self.selectors:
            return self.selectors[domain]
        if self.signing is not None:
            return self.signing.selector
        return ""

    def key_path_for(self, domain: str) -> str:
        """Return the key path template for `domain`: domain rule, then map, then global.

        Templates such as `$domain.$selector.key` are returned unexpanded.
        """

        if self.signing is not None:
            rule = self.signing.domain.get(domain)
            if rule is not None and rule.path:
                return rule.path
        if domain in self.paths:
            return self.paths[domain]
        if self.signing is not None:
            return self.signing.path
        return ""


def _resolve_reference(config_dir: Path, reference: str) -> Path:
    """Resolve a map path written in the signing config against `config_dir`."""

    path = Path(reference)
    if path.is_absolute():
        return path
    return config_dir / path


class _LayoutReader:
    """Read individual files of one layout with uniform logging."""

    def __init__(self, config_dir: Path, strict_maps: bool, logger: ParseLogger | None) -> None:
        self._config_dir = config_dir
        self._strict_maps = strict_maps
        self._logger = logger

    def read_optional(
        self, path: Path, reader: Callable[[Path], _T], **summary: Callable[[_T], object]
    ) -> _T | None:
        """Read `path` if it exists, otherwise log a skip and return `None`."""

        if not path.exists():
            self._log_skipped(path, "missing")
            return None
        return self.read(path, reader, **summary)

    def read_map(self, reference: str, default_name: str) -> Mapping[str, str]:
        """Read a map referenced by the signing config, or its default location."""

        if reference:
            path = _resolve_reference(self._config_dir, reference)
            if path.exists() or self._strict_maps:
                return self.read(path, load_map_file, entries=len)
            self._log_skipped(path, "missing")
            return _empty_map()

        default_path = self._config_dir / MAPS_DIR_NAME / default_name
        loaded = self.read_optional(default_path, load_map_file, entries=len)
        return loaded if loaded is not None else _empty_map()

    def read(self, path: Path, reader: Callable[[Path], _T], **summary: Callable[[_T], object]) -> _T:
        """Read `path` with `reader`, logging start and complete or failure."""

        stage = path.name
        if self._logger is not None:
            self._logger.log_stage_start(stage)
        try:
            value = reader(path)
        except Exception as exc:
            if self._logger is not None:
                self._logger.log_stage_failure(stage, type(exc).__name__)
            raise
        if self._logger is not None:
            self._logger.log_stage_complete(
                stage, **{key: describe(value) for key, describe in summary.items()}
            )
        return value

    def _log_skipped(self, path: Path, reason: str) -> None:
        if self._logger is not None:
            self._logger.log_stage_skipped(path.name, reason)


def load_layout(
    config_dir: Path | str,
    *,
    strict_maps: bool = True,
    logger: ParseLogger | None = None,
) -> DkimLayout:
    """Read the DKIM configuration files found in `config_dir`.

    `dkim.conf`, `dkim_signing.conf` and the default map locations under
    `maps.d/` are optional. Maps named by `selector_map`/`path_map` are
    required when `strict_maps` is true.

    Raises:
        FileNotFoundError: If a referenced map is missing in strict mode.
        DkimConfigError: On invalid content in any file, with `source` set.
    """

    config_dir = Path(config_dir)
    reader = _LayoutReader(config_dir, strict_maps, logger)

    module = reader.read_optional(
        config_dir / MODULE_CONFIG_NAME,
        ConfigLoader.module_from_path,
        sign_headers=lambda conf: len(conf.sign_header_list),
    )
    signing = reader.read_optional(
        config_dir / SIGNING_CONFIG_NAME,
        ConfigLoader.signing_from_path,
        domains=lambda conf: len(conf.domain),
    )

    selector_reference = signing.selector_map if signing is not None else ""
    path_reference = signing.path_map if signing is not None else ""

    return DkimLayout(
        config_dir=config_dir,
        module=module,
        signing=signing,
        selectors=reader.read_map(selector_reference, SELECTORS_MAP_NAME),
        paths=reader.read_map(path_reference, PATHS_MAP_NAME),
        signed_domains=reader.read_map("", SIGNED_DOMAINS_MAP_NAME),
    )
