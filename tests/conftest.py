"""Shared pytest fixtures for the full dkimconf test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.fixture_paths import disabled_fixture_dir, local_d_fixture_dir


@pytest.fixture
def local_d_dir() -> Path:
    """Provide the fixture `local.d` directory with module, signing and map files."""

    return local_d_fixture_dir()


@pytest.fixture
def disabled_dir() -> Path:
    """Provide the fixture directory holding a disabled, newline-terminated `dkim.conf`."""

    return disabled_fixture_dir()
