"""Typed DKIM configuration records and their projections.

Responsibilities:
- Define the module (`dkim.conf`) and signing (`dkim_signing.conf`) records.
- Project the generic parse result onto those records with strict boolean coercion.
- Provide path-based loader entry points that attach the source file to errors.

Key types:
- `DkimModuleConfig`: `enabled` flag and parsed `sign_headers` list.
- `DkimSigningConfig`: signing options plus per-domain rules.
- `DomainRule`: selector and key path for one domain block.
- `ConfigLoader`: static construction helpers reading files by path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .errors import DkimConfigError
from .grammar import ParsedConfig, parse_config
from .io.streams import ReadableStream, open_config_file
from .parsing import lookup_optional_boolean
from .sign_headers import SignHeader, parse_sign_headers

_SIGNING_STRING_KEYS = (
    "use_domain",
    "use_domain_sign_local",
    "use_domain_sign_networks",
    "path",
    "selector",
    "path_map",
    "selector_map",
)
_SIGNING_BOOLEAN_KEYS = (
    "enabled",
    "allow_username_mismatch",
    "sign_authenticated",
    "sign_local",
    "sign_inbound",
    "allow_hdrfrom_mismatch",
    "use_esld",
    "try_fallback",
)


@dataclass(frozen=True, slots=True)
class DomainRule:
    """Signing rule for one domain block.

    Attributes:
        selector: DKIM selector, empty when the block does not set one.
        path: Private key path, empty when the block does not set one.
    """

    selector: str = ""
    path: str = ""


@dataclass(frozen=True, slots=True)
class DkimModuleConfig:
    """Settings of the DKIM module (`dkim.conf`).

    Attributes:
        enabled: `None` when `enabled` is not set, otherwise its value.
        sign_headers: Raw `sign_headers` value, empty when not set.
        sign_header_list: Entries parsed from `sign_headers`.
    """

    enabled: bool | None = None
    sign_headers: str = ""
    sign_header_list: tuple[SignHeader, ...] = ()

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable view of the record."""

        return {
            "enabled": self.enabled,
            "sign_headers": self.sign_headers,
            "sign_header_list": [
                {
                    "name": entry.name,
                    "oversigned": entry.oversigned,
                    "optional_oversigned": entry.optional_oversigned,
                }
                for entry in self.sign_header_list
            ],
        }


@dataclass(frozen=True, slots=True)
class DkimSigningConfig:
    """Settings of the DKIM signing module (`dkim_signing.conf`).

    Optional booleans are `None` when their key does not appear in the file;
    string options are empty when absent.
    """

    enabled: bool | None = None
    allow_username_mismatch: bool | None = None
    sign_authenticated: bool | None = None
    sign_local: bool | None = None
    sign_inbound: bool | None = None
    allow_hdrfrom_mismatch: bool | None = None
    use_esld: bool | None = None
    try_fallback: bool | None = None
    use_domain: str = ""
    use_domain_sign_local: str = ""
    use_domain_sign_networks: str = ""
    path: str = ""
    selector: str = ""
    path_map: str = ""
    selector_map: str = ""
    domain: Mapping[str, DomainRule] = field(default_factory=lambda: MappingProxyType({}))

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable view of the record."""

        payload: dict[str, object] = {
            key: getattr(self, key) for key in _SIGNING_BOOLEAN_KEYS + _SIGNING_STRING_KEYS
        }
        payload["domain"] = {
            label: {"selector": rule.selector, "path": rule.path}
            for label, rule in self.domain.items()
        }
        return payload


def project_module_config(parsed: ParsedConfig) -> DkimModuleConfig:
    """Build a `DkimModuleConfig` from a generic parse result.

    Raises:
        CoercionError: If `enabled` is neither `true` nor `false`.
    """

    sign_headers = parsed.assignments.get("sign_headers", "")
    return DkimModuleConfig(
        enabled=lookup_optional_boolean(parsed.assignments, "enabled"),
        sign_headers=sign_headers,
        sign_header_list=parse_sign_headers(sign_headers) if sign_headers else (),
    )


def project_signing_config(parsed: ParsedConfig) -> DkimSigningConfig:
    """Build a `DkimSigningConfig` from a generic parse result.

    Keys other than the known options are ignored, both at the top level and
    inside domain blocks.

    Raises:
        CoercionError: On the first boolean option with an invalid value.
    """

    assignments = parsed.assignments
    strings = {key: assignments.get(key, "") for key in _SIGNING_STRING_KEYS}
    booleans = {key: lookup_optional_boolean(assignments, key) for key in _SIGNING_BOOLEAN_KEYS}
    domain = {
        label: DomainRule(selector=block.get("selector", ""), path=block.get("path", ""))
        for label, block in parsed.domains.items()
    }
    return DkimSigningConfig(**booleans, **strings, domain=MappingProxyType(domain))


def parse_module_config(stream: ReadableStream) -> DkimModuleConfig:
    """Parse `dkim.conf` content from a readable stream."""

    return project_module_config(parse_config(stream))


def parse_signing_config(stream: ReadableStream) -> DkimSigningConfig:
    """Parse `dkim_signing.conf` content from a readable stream."""

    return project_signing_config(parse_config(stream))


class ConfigLoader:
    """Factory methods reading DKIM configuration records from files."""

    @staticmethod
    def module_from_path(path: Path) -> DkimModuleConfig:
        """Read and parse a `dkim.conf` file.

        Raises:
            FileNotFoundError: If `path` does not exist.
            DkimConfigError: On invalid content, with `source` set to `path`.
        """

        with open_config_file(path) as handle:
            try:
                return parse_module_config(handle)
            except DkimConfigError as exc:
                raise exc.with_source(path)

    @staticmethod
    def signing_from_path(path: Path) -> DkimSigningConfig:
        """Read and parse a `dkim_signing.conf` file.

        Raises:
            FileNotFoundError: If `path` does not exist.
            DkimConfigError: On invalid content, with `source` set to `path`.
        """

        with open_config_file(path) as handle:
            try:
                return parse_signing_config(handle)
            except DkimConfigError as exc:
                raise exc.with_source(path)
