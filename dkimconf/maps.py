"""Parser for two-column rspamd map files.

Responsibilities:
- Read `<key> <value>` lines, skipping blank lines and `#` comment lines.
- Reject data lines that do not split into exactly two fields.

The three DKIM maps share this syntax and differ only in meaning:

- `dkim_selectors.map`: domain to selector.
- `dkim_paths.map`: domain to private key path.
- `signed_domains.map`: signing domain (or `@domain` pattern) to key path.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .errors import DkimConfigError, MapFormatError
from .io.streams import ReadableStream, iter_text_lines, open_config_file


def parse_map_file(stream: ReadableStream) -> Mapping[str, str]:
    """Parse a map file into a read-only key to value mapping.

    Later lines with a duplicate key overwrite earlier ones.

    Raises:
        MapFormatError: On the first data line without exactly two fields.
    """

    entries: dict[str, str] = {}
    for line_number, raw_line in enumerate(iter_text_lines(stream), start=1):
        stripped = raw_line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        fields = stripped.split()
        if len(fields) != 2:
            raise MapFormatError(line_number=line_number, line=raw_line.rstrip("\r\n"))
        key, value = fields
        entries[key] = value
    return MappingProxyType(entries)


def parse_selectors_map(stream: ReadableStream) -> Mapping[str, str]:
    """Parse `dkim_selectors.map`: domain to selector."""

    return parse_map_file(stream)


def parse_paths_map(stream: ReadableStream) -> Mapping[str, str]:
    """Parse `dkim_paths.map`: domain to private key path."""

    return parse_map_file(stream)


def parse_signed_domains_map(stream: ReadableStream) -> Mapping[str, str]:
    """Parse `signed_domains.map`: signing domain to private key path."""

    return parse_map_file(stream)


def load_map_file(path: Path) -> Mapping[str, str]:
    """Read and parse a map file by path.

    Raises:
        FileNotFoundError: If `path` does not exist.
        MapFormatError: On invalid content, with `source` set to `path`.
    """

    with open_config_file(path) as handle:
        try:
            return parse_map_file(handle)
        except DkimConfigError as exc:
            raise exc.with_source(path)
