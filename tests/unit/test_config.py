"""Tests for run configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from bundleguard.config import BundleGuardConfig, parse_severities
from bundleguard.scanner.models import Severity


def test_defaults(monkeypatch):
    for var in (
        "BUNDLEGUARD_DIST_DIR",
        "BUNDLEGUARD_MAX_WORKERS",
        "BUNDLEGUARD_PARALLEL",
        "BUNDLEGUARD_OUTPUT_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    config = BundleGuardConfig.load()
    assert config.dist_dir == Path("dist")
    assert config.max_workers == 4
    assert config.parallel is True
    assert config.severities == frozenset(Severity)
    assert config.strict is False
    assert config.output_format == "text"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BUNDLEGUARD_DIST_DIR", "build/out")
    monkeypatch.setenv("BUNDLEGUARD_MAX_WORKERS", "2")
    monkeypatch.setenv("BUNDLEGUARD_PARALLEL", "off")
    monkeypatch.setenv("BUNDLEGUARD_OUTPUT_FORMAT", "JSON")
    config = BundleGuardConfig.load()
    assert config.dist_dir == Path("build/out")
    assert config.max_workers == 2
    assert config.parallel is False
    assert config.output_format == "json"


def test_parse_severities():
    assert parse_severities("high, Medium") == {Severity.HIGH, Severity.MEDIUM}


@pytest.mark.parametrize("value", ["", " , ", "high,critical"])
def test_parse_severities_rejects(value):
    with pytest.raises(ValueError):
        parse_severities(value)


@pytest.mark.parametrize("value", ["many", "0", "-2", "1.5"])
def test_invalid_max_workers(monkeypatch, value):
    monkeypatch.setenv("BUNDLEGUARD_MAX_WORKERS", value)
    with pytest.raises(ValueError, match="BUNDLEGUARD_MAX_WORKERS must be a positive integer"):
        BundleGuardConfig.load()


def test_invalid_output_format(monkeypatch):
    monkeypatch.setenv("BUNDLEGUARD_OUTPUT_FORMAT", "xml")
    with pytest.raises(ValueError, match="BUNDLEGUARD_OUTPUT_FORMAT"):
        BundleGuardConfig.load()
