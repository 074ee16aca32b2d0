"""Tests for the rule registry and bundle discovery."""

from __future__ import annotations

import logging

import pytest

from bundleguard.report import exit_code, sorted_violations
from bundleguard.scanner.engine import (
    DiscoveryError,
    DuplicateRuleError,
    RuleRegistry,
    discover_bundles,
    read_source,
)
from bundleguard.scanner.models import OutcomeStatus, Severity, SourceFile, Violation
from bundleguard.scanner.rules import (
    BuildTargetRule,
    DynamicEvalRule,
    GlobalExportRule,
    default_rules,
)


class ExplodingRule:
    name = "exploding"
    description = "Always raises"
    severity = Severity.HIGH
    applies_to = ("*",)

    def evaluate(self, cleaned, raw, path):
        raise RuntimeError("boom")


class LoudLowRule:
    name = "loud-low"
    description = "Declares low, reports high"
    severity = Severity.LOW
    applies_to = ("*",)

    def evaluate(self, cleaned, raw, path):
        return [Violation(self.name, Severity.HIGH, "too loud", path)]


def _registry(*rules, severities=None) -> RuleRegistry:
    registry = RuleRegistry(include_severities=severities)
    for rule in rules:
        registry.register(rule)
    return registry


class TestRegistration:
    def test_duplicate_name_rejected(self, umd_profile):
        registry = _registry(GlobalExportRule(umd_profile))
        with pytest.raises(DuplicateRuleError, match="already registered"):
            registry.register(GlobalExportRule(umd_profile))

    def test_severity_filter(self, umd_profile):
        registry = RuleRegistry(include_severities={Severity.HIGH})
        assert registry.register(GlobalExportRule(umd_profile)) is True
        assert registry.register(BuildTargetRule(umd_profile)) is False
        assert [r.name for r in registry.rules] == ["global-export-presence"]

    def test_no_filter_registers_everything(self, umd_profile):
        registry = _registry(*default_rules(umd_profile))
        assert len(registry.rules) == 5

    def test_applicable_rules_by_base_name(self, umd_profile):
        registry = _registry(*default_rules(umd_profile))
        server = [r.name for r in registry.applicable_rules("dist/sdk.server.umd.js")]
        assert server == [
            "global-export-presence",
            "eval-security",
            "build-target-validation",
            "websocket-scheme-validation",
        ]
        esm = [r.name for r in registry.applicable_rules("dist/sdk.esm.js")]
        assert esm == ["eval-security", "build-target-validation"]

    def test_no_applicable_rules(self, umd_profile, caplog):
        caplog.set_level(logging.INFO, logger="bundleguard")
        registry = _registry(GlobalExportRule(umd_profile))
        assert registry.run_file(SourceFile("sdk.esm.js", "x")) == []
        assert "No applicable rules" in caplog.text


class TestExecution:
    def test_failing_and_clean_file(self, foo_profile):
        registry = _registry(DynamicEvalRule(foo_profile))
        report = registry.run_all(
            [
                SourceFile("bad.js", "x = eval(y);"),
                SourceFile("good.js", "x = y + 1;"),
            ]
        )
        assert report.failed_count == 1
        assert report.passed_count == 1
        assert report.warning_count == 0
        assert report.files_scanned == 2
        assert exit_code(report) == 1

    def test_raising_rule_is_isolated(self, umd_profile):
        registry = _registry(ExplodingRule(), BuildTargetRule(umd_profile))
        report = registry.run_all([SourceFile("a.js", 'x = "browser-umd";')])

        outcomes = {o.rule_name: o for o in report.outcomes}
        assert outcomes["exploding"].status == OutcomeStatus.FAILED
        assert outcomes["exploding"].faulted is True
        assert outcomes["build-target-validation"].status == OutcomeStatus.PASSED
        assert report.failed_count == 1
        assert report.passed_count == 1
        assert report.violations[0].message == "Rule raised RuntimeError: boom"

    def test_raising_rule_does_not_stop_other_files(self, umd_profile):
        registry = _registry(ExplodingRule(), BuildTargetRule(umd_profile))
        report = registry.run_all(
            [
                SourceFile("a.js", 'x = "browser-umd";'),
                SourceFile("b.js", 'y = "server-umd";'),
            ],
            parallel=True,
            max_workers=2,
        )

        assert report.parallel is True
        assert report.files_scanned == 2
        assert report.failed_count == 2
        assert report.passed_count == 2

        faults = [v for v in report.violations if v.rule_name == "exploding"]
        assert sorted(v.file_path for v in faults) == ["a.js", "b.js"]

        second = next(
            o
            for o in report.outcomes
            if o.file_path == "b.js" and o.rule_name == "build-target-validation"
        )
        assert second.status == OutcomeStatus.PASSED

    def test_upgraded_severity_is_clamped(self):
        registry = _registry(LoudLowRule())
        report = registry.run_all([SourceFile("a.js", "x")])
        assert report.violations[0].severity == Severity.LOW
        assert report.outcomes[0].status == OutcomeStatus.WARNING
        assert report.warning_count == 1
        assert report.failed_count == 0

    def test_single_file_runs_sequentially(self, umd_profile):
        registry = _registry(BuildTargetRule(umd_profile))
        report = registry.run_all([SourceFile("a.js", "x")], parallel=True, max_workers=8)
        assert report.parallel is False
        assert report.workers == 1

    def test_parallel_matches_sequential(self, umd_profile, bad_dist_dir, dist_dir):
        paths = discover_bundles(dist_dir) + discover_bundles(bad_dist_dir)
        registry = _registry(*default_rules(umd_profile))

        parallel = registry.run_paths(paths, parallel=True, max_workers=3)
        sequential = registry.run_paths(paths, parallel=False)

        assert parallel.parallel is True
        assert parallel.workers == 3
        assert sequential.parallel is False
        for attr in ("passed_count", "failed_count", "warning_count", "files_scanned"):
            assert getattr(parallel, attr) == getattr(sequential, attr)
        assert sorted_violations(parallel) == sorted_violations(sequential)

    def test_unreadable_file_becomes_fault(self, umd_profile, dist_dir, tmp_path):
        registry = _registry(*default_rules(umd_profile))
        report = registry.run_paths(
            [dist_dir / "sdk.server.umd.js", tmp_path / "missing.umd.js"]
        )
        assert report.files_scanned == 1
        assert len(report.faults) == 1
        assert report.faults[0].message.startswith("Failed to read bundle file")
        assert report.failed_count == 0
        assert exit_code(report) == 1


class TestEndToEnd:
    def test_clean_distribution(self, umd_profile, dist_dir):
        registry = _registry(*default_rules(umd_profile))
        report = registry.run_paths(discover_bundles(dist_dir))
        assert report.files_scanned == 2
        assert report.passed_count == 9
        assert report.failed_count == 0
        assert report.warning_count == 0
        assert report.violations == []

    def test_broken_distribution(self, umd_profile, bad_dist_dir):
        registry = _registry(*default_rules(umd_profile))
        report = registry.run_paths(discover_bundles(bad_dist_dir))
        assert report.failed_count == 3
        assert report.warning_count == 1
        assert report.passed_count == 1

        failing = {v.rule_name for v in report.violations if v.is_blocking}
        assert failing == {
            "global-export-presence",
            "eval-security",
            "websocket-scheme-validation",
        }
        eval_hit = next(v for v in report.violations if v.rule_name == "eval-security")
        assert eval_hit.line_number == 5


class TestDiscovery:
    def test_finds_bundles_sorted(self, dist_dir):
        names = [p.name for p in discover_bundles(dist_dir)]
        assert names == ["sdk.browser.umd.js", "sdk.server.umd.js"]

    def test_chunk_files_excluded(self, dist_dir):
        names = [p.name for p in discover_bundles(dist_dir)]
        assert "245.sdk.browser.umd.js" not in names

    def test_custom_marker(self, dist_dir):
        names = [p.name for p in discover_bundles(dist_dir, marker=".esm.")]
        assert names == ["sdk.esm.js"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DiscoveryError, match="not found"):
            discover_bundles(tmp_path / "nope")

    def test_no_bundles(self, tmp_path):
        (tmp_path / "readme.txt").write_text("x")
        with pytest.raises(DiscoveryError, match="No bundle files"):
            discover_bundles(tmp_path)

    def test_read_source(self, dist_dir):
        source = read_source(dist_dir / "sdk.server.umd.js")
        assert source.path.endswith("sdk.server.umd.js")
        assert "root.OptaveJavaScriptSDK" in source.raw_content
