"""Run configuration — defaults overridable from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from bundleguard.scanner.engine import DEFAULT_MAX_WORKERS
from bundleguard.scanner.models import Severity

_FALSE_VALUES = {"0", "false", "no", "off"}

OUTPUT_FORMATS = ("text", "json")


def parse_severities(value: str) -> frozenset[Severity]:
    """Parse a comma-separated severity list such as ``high,medium``."""
    names = [part.strip().lower() for part in value.split(",") if part.strip()]
    if not names:
        raise ValueError("Severity list is empty")
    try:
        return frozenset(Severity(name) for name in names)
    except ValueError:
        valid = ", ".join(s.value for s in Severity)
        raise ValueError(f"Unknown severity in '{value}' (expected: {valid})") from None


@dataclass
class BundleGuardConfig:
    """Settings for one check run."""

    dist_dir: Path = field(default_factory=lambda: Path("dist"))
    max_workers: int = DEFAULT_MAX_WORKERS
    parallel: bool = True
    severities: frozenset[Severity] = field(default_factory=lambda: frozenset(Severity))
    strict: bool = False
    output_format: str = "text"

    @classmethod
    def load(cls) -> BundleGuardConfig:
        """Load config from environment variables over the defaults."""
        config = cls()

        env_dist = os.environ.get("BUNDLEGUARD_DIST_DIR")
        if env_dist:
            config.dist_dir = Path(env_dist)

        env_workers = os.environ.get("BUNDLEGUARD_MAX_WORKERS")
        if env_workers:
            config.max_workers = _positive_int("BUNDLEGUARD_MAX_WORKERS", env_workers)

        env_parallel = os.environ.get("BUNDLEGUARD_PARALLEL")
        if env_parallel:
            config.parallel = env_parallel.strip().lower() not in _FALSE_VALUES

        env_format = os.environ.get("BUNDLEGUARD_OUTPUT_FORMAT")
        if env_format:
            fmt = env_format.strip().lower()
            if fmt not in OUTPUT_FORMATS:
                raise ValueError(
                    f"BUNDLEGUARD_OUTPUT_FORMAT must be one of {', '.join(OUTPUT_FORMATS)}, "
                    f"got '{env_format}'"
                )
            config.output_format = fmt

        return config


def _positive_int(name: str, value: str) -> int:
    message = f"{name} must be a positive integer, got '{value}'"
    try:
        number = int(value)
    except ValueError:
        raise ValueError(message) from None
    if number < 1:
        raise ValueError(message)
    return number
