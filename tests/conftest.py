"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from bundleguard.profile.loader import default_profile
from bundleguard.profile.models import Profile


@pytest.fixture
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def dist_dir(fixtures_dir: Path) -> Path:
    return fixtures_dir / "dist"


@pytest.fixture
def bad_dist_dir(fixtures_dir: Path) -> Path:
    return fixtures_dir / "dist_bad"


@pytest.fixture
def custom_profile_path(fixtures_dir: Path) -> Path:
    return fixtures_dir / "custom_profile.yaml"


@pytest.fixture
def umd_profile() -> Profile:
    return default_profile()


@pytest.fixture
def foo_profile() -> Profile:
    return Profile(name="foo", export_name="Foo")
