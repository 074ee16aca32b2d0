"""Rule registry — resolves, executes, and aggregates bundle rules across files."""

from __future__ import annotations

import dataclasses
import fnmatch
import logging
import re
import threading
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from bundleguard.scanner.models import (
    FileFault,
    OutcomeStatus,
    Report,
    RuleOutcome,
    Severity,
    SourceFile,
    Violation,
)
from bundleguard.scanner.rules.base import Rule
from bundleguard.scanner.stripper import strip

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4

# Bundler chunk files carry a numeric prefix, e.g. "245.app.umd.js"
_CHUNK_FILE = re.compile(r"^\d+\.")


class DiscoveryError(Exception):
    """No bundles could be discovered; the run cannot start."""


class DuplicateRuleError(ValueError):
    """A rule with the same name is already registered."""


class RuleRegistry:
    """Holds rules by name and runs the applicable ones against each file."""

    def __init__(self, include_severities: Iterable[Severity] | None = None) -> None:
        self._rules: dict[str, Rule] = {}
        self._include = (
            frozenset(include_severities) if include_severities is not None else None
        )

    @property
    def rules(self) -> list[Rule]:
        """Registered rules, in registration order."""
        return list(self._rules.values())

    def register(self, rule: Rule) -> bool:
        """Register a rule. Returns False when its severity is filtered out."""
        if rule.name in self._rules:
            raise DuplicateRuleError(f"Rule with name '{rule.name}' already registered")

        if self._include is not None and rule.severity not in self._include:
            logger.debug("Skipping rule %s (severity: %s)", rule.name, rule.severity.value)
            return False

        self._rules[rule.name] = rule
        logger.debug("Registered rule: %s (%s)", rule.name, rule.severity.value)
        return True

    def applicable_rules(self, path: str) -> list[Rule]:
        """Rules whose applies_to globs match the file's base name."""
        name = Path(path).name
        return [
            rule
            for rule in self._rules.values()
            if any(_glob_match(name, pattern) for pattern in rule.applies_to)
        ]

    def run_file(self, source: SourceFile) -> list[RuleOutcome]:
        """Strip one file once and evaluate every applicable rule on it."""
        name = Path(source.path).name
        rules = self.applicable_rules(source.path)
        if not rules:
            logger.info("No applicable rules for %s", name)
            return []

        logger.info("Running %d rules for %s", len(rules), name)
        cleaned = strip(source.raw_content)
        return [self._evaluate(rule, cleaned, source) for rule in rules]

    def run_all(
        self,
        files: Sequence[SourceFile],
        parallel: bool = True,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> Report:
        """Run every file through its applicable rules and aggregate a Report."""
        start = time.time()
        workers = max(1, max_workers)
        concurrent = parallel and len(files) > 1

        report = Report(parallel=concurrent, workers=workers if concurrent else 1)
        lock = threading.Lock()

        def process(source: SourceFile) -> None:
            outcomes = self.run_file(source)
            with lock:
                report.files_scanned += 1
                for outcome in outcomes:
                    report.record(outcome)

        if concurrent:
            logger.info("Processing %d files in parallel (%d workers)", len(files), workers)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(process, source) for source in files]
                for future in futures:
                    future.result()
        else:
            logger.info("Processing %d files sequentially", len(files))
            for source in files:
                process(source)

        report.elapsed_time = time.time() - start
        return report

    def run_paths(
        self,
        paths: Iterable[str | Path],
        parallel: bool = True,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> Report:
        """Read each path, then run the readable ones. Unreadable files become faults."""
        start = time.time()
        sources: list[SourceFile] = []
        faults: list[FileFault] = []

        for path in paths:
            try:
                sources.append(read_source(path))
            except OSError as e:
                logger.error("Failed to read bundle %s: %s", path, e)
                faults.append(FileFault(str(path), f"Failed to read bundle file: {e}"))

        report = self.run_all(sources, parallel=parallel, max_workers=max_workers)
        report.faults.extend(faults)
        report.elapsed_time = time.time() - start
        return report

    def _evaluate(self, rule: Rule, cleaned: str, source: SourceFile) -> RuleOutcome:
        start = time.perf_counter()
        faulted = False

        try:
            violations = [
                _clamp_severity(rule, v)
                for v in rule.evaluate(cleaned, source.raw_content, source.path)
            ]
        except Exception as e:
            logger.error("Rule %s raised on %s: %s", rule.name, source.path, e)
            logger.debug("Rule %s traceback", rule.name, exc_info=True)
            faulted = True
            violations = [
                Violation(
                    rule_name=rule.name,
                    severity=Severity.HIGH,
                    message=f"Rule raised {type(e).__name__}: {e}",
                    file_path=source.path,
                )
            ]

        if any(v.is_blocking for v in violations):
            status = OutcomeStatus.FAILED
        elif violations:
            status = OutcomeStatus.WARNING
        else:
            status = OutcomeStatus.PASSED

        return RuleOutcome(
            file_path=source.path,
            rule_name=rule.name,
            status=status,
            duration=time.perf_counter() - start,
            violations=violations,
            faulted=faulted,
        )


def read_source(path: str | Path) -> SourceFile:
    """Read a bundle from disk as UTF-8 text."""
    path = Path(path)
    content = path.read_text(encoding="utf-8", errors="ignore")
    logger.debug("Read bundle %s (%d chars)", path.name, len(content))
    return SourceFile(path=str(path), raw_content=content)


def discover_bundles(
    dist_dir: str | Path,
    marker: str = ".umd.",
    extension: str = ".js",
) -> list[Path]:
    """Find bundle files in ``dist_dir`` by name, skipping numbered chunk files."""
    directory = Path(dist_dir)
    if not directory.is_dir():
        raise DiscoveryError(f"Distribution directory not found: {directory}")

    bundles: list[Path] = []
    chunks: list[str] = []
    for path in sorted(directory.iterdir()):
        name = path.name
        if not path.is_file() or marker not in name or not name.endswith(extension):
            continue
        if _CHUNK_FILE.match(name):
            chunks.append(name)
            continue
        bundles.append(path)

    if chunks:
        logger.info("Excluded chunk files: %s", ", ".join(chunks))

    if not bundles:
        raise DiscoveryError(
            f"No bundle files matching '*{marker}*{extension}' found in {directory}"
        )

    logger.info("Found %d bundle files: %s", len(bundles), ", ".join(p.name for p in bundles))
    return bundles


def _glob_match(name: str, pattern: str) -> bool:
    return pattern == "*" or fnmatch.fnmatchcase(name, pattern)


def _clamp_severity(rule: Rule, violation: Violation) -> Violation:
    """Rules may downgrade a finding at evaluation time, never upgrade it."""
    if violation.severity.rank >= rule.severity.rank:
        return violation
    logger.warning(
        "Rule %s reported %s above its declared %s; clamping",
        rule.name,
        violation.severity.value,
        rule.severity.value,
    )
    return dataclasses.replace(violation, severity=rule.severity)
