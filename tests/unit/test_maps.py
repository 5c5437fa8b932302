"""Unit tests for the two-column map-file parser."""

from __future__ import annotations

import io
import re
from pathlib import Path

import pytest

from dkimconf.errors import MapFormatError
from dkimconf.maps import (
    load_map_file,
    parse_map_file,
    parse_paths_map,
    parse_selectors_map,
    parse_signed_domains_map,
)


def test_parse_map_file_splits_on_whitespace_runs() -> None:
    """Keys and values separated by spaces or tabs should map one to one."""

    entries = parse_map_file(io.StringIO("foo.com   bar\nbaz.org\tqux\n  indented value  \n"))

    assert dict(entries) == {"foo.com": "bar", "baz.org": "qux", "indented": "value"}


def test_parse_map_file_skips_comments_and_blank_lines() -> None:
    """Comment lines, indented comments and blank lines should be ignored."""

    text = "# header\n\n   \n    # indented comment\nfoo.com bar\n"

    assert dict(parse_map_file(io.StringIO(text))) == {"foo.com": "bar"}


def test_parse_map_file_later_duplicates_overwrite() -> None:
    """A repeated key should keep the value from its last line."""

    entries = parse_map_file(io.StringIO("a.com s1\na.com s2\n"))

    assert dict(entries) == {"a.com": "s2"}


@pytest.mark.parametrize(
    ("text", "line_number"),
    [
        ("lonely\n", 1),
        ("ok.com s1\n# comment\nmissing-value\n", 3),
        ("a.com s1 # trailing note\n", 1),
        ("a.com s1 extra\n", 1),
    ],
)
def test_parse_map_file_rejects_lines_without_exactly_two_fields(
    text: str, line_number: int
) -> None:
    """Malformed data lines should raise with the offending line number."""

    with pytest.raises(MapFormatError) as exc_info:
        parse_map_file(io.StringIO(text))

    assert exc_info.value.line_number == line_number
    assert str(exc_info.value).startswith(f"{line_number}: expected `<key> <value>`")


def test_parse_map_file_accepts_binary_streams_and_crlf() -> None:
    """Byte streams and Windows line endings should parse like text."""

    entries = parse_map_file(io.BytesIO(b"# c\r\nfoo.com bar\r\n"))

    assert dict(entries) == {"foo.com": "bar"}


@pytest.mark.parametrize(
    "text",
    [
        "a.com\x0cs1\n",
        "a.com\x0bs1\nb.com s2\n",
        "café.com s1 \n",
        "a.com s1\x1c\nb.com s2\n",
    ],
)
def test_parse_map_file_splits_binary_lines_like_text(text: str) -> None:
    """Bytes input should break lines only on newlines, exactly as text input does."""

    from_text = parse_map_file(io.StringIO(text))
    from_bytes = parse_map_file(io.BytesIO(text.encode("utf-8")))

    assert dict(from_bytes) == dict(from_text)


def test_parse_map_file_result_is_read_only() -> None:
    """Returned maps should reject mutation."""

    entries = parse_map_file(io.StringIO("a b\n"))

    with pytest.raises(TypeError):
        entries["a"] = "c"  # type: ignore[index]


def test_named_map_parsers_share_syntax() -> None:
    """Selector, path and signed-domain maps should parse identically."""

    text = "example.com /var/lib/rspamd/dkim/example.com.key\n"

    assert (
        dict(parse_selectors_map(io.StringIO(text)))
        == dict(parse_paths_map(io.StringIO(text)))
        == dict(parse_signed_domains_map(io.StringIO(text)))
    )


def test_load_map_file_reads_fixture_maps(local_d_dir: Path) -> None:
    """Fixture maps should load with their expected entries."""

    selectors = load_map_file(local_d_dir / "maps.d" / "dkim_selectors.map")
    paths = load_map_file(local_d_dir / "maps.d" / "dkim_paths.map")
    signed = load_map_file(local_d_dir / "maps.d" / "signed_domains.map")

    assert selectors["test.mailer.com"] == "mail"
    assert selectors["mailer.test.com"] == "s1"
    assert paths["s1.sender-01.com"] == "/var/lib/rspamd/dkim/s1.sender-01.com.key"
    assert signed["@go.test.com"] == "/var/lib/rspamd/dkim/c1.dkim.domain.com.key"


def test_load_map_file_attaches_source_path(tmp_path: Path) -> None:
    """Format errors from a file should name the file."""

    broken = tmp_path / "dkim_selectors.map"
    broken.write_text("good.com s1\nbad.com\n", encoding="utf-8")

    with pytest.raises(MapFormatError, match="^" + re.escape(f"{broken}:2: expected")):
        load_map_file(broken)
