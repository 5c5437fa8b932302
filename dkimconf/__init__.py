"""Top-level package for dkimconf.

This package parses rspamd DKIM configuration (`dkim.conf`,
`dkim_signing.conf`) and the DKIM map files into typed, read-only records.
"""

from .config import (
    DkimModuleConfig,
    DkimSigningConfig,
    DomainRule,
    parse_module_config,
    parse_signing_config,
)
from .errors import (
    CoercionError,
    ConfigSyntaxError,
    DkimConfigError,
    LexicalError,
    MapFormatError,
)
from .grammar import ParsedConfig, parse_config
from .layout import DkimLayout, load_layout
from .maps import parse_paths_map, parse_selectors_map, parse_signed_domains_map
from .sign_headers import SignHeader, parse_sign_headers

__all__ = [
    "CoercionError",
    "ConfigSyntaxError",
    "DkimConfigError",
    "DkimLayout",
    "DkimModuleConfig",
    "DkimSigningConfig",
    "DomainRule",
    "LexicalError",
    "MapFormatError",
    "ParsedConfig",
    "SignHeader",
    "__version__",
    "load_layout",
    "parse_config",
    "parse_module_config",
    "parse_paths_map",
    "parse_selectors_map",
    "parse_sign_headers",
    "parse_signed_domains_map",
    "parse_signing_config",
]

__version__ = "0.1.0"
