"""Shared helpers for resolving test fixture paths."""

from __future__ import annotations

from pathlib import Path

_FILES_DIR = Path(__file__).resolve().parent / "files"


def local_d_fixture_dir() -> Path:
    """Return the fixture rspamd `local.d` directory with every DKIM file present."""

    return _FILES_DIR / "local.d"


def disabled_fixture_dir() -> Path:
    """Return the fixture directory holding only a disabled `dkim.conf`."""

    return _FILES_DIR / "disabled"
