"""Disallowed dependencies — browser builds must not bundle excluded modules."""

from __future__ import annotations

import re

from bundleguard.profile.models import Profile
from bundleguard.scanner.models import Severity, Violation
from bundleguard.scanner.patterns import Pattern, compile_all, scan_with_whitelist

_METHODS = r"(?:compile|validate|addSchema|addFormat|removeSchema|getSchema|validateSchema)"


def dependency_patterns(dependency: str) -> tuple[Pattern, ...]:
    """Reference patterns for one excluded dependency name."""
    dep = re.escape(dependency)
    cls = re.escape(dependency[:1].upper() + dependency[1:])
    return (
        Pattern(
            name="require",
            regex=re.compile(rf"\brequire\s*\(\s*[\"']{dep}[\"']\s*\)"),
            severity=Severity.HIGH,
            description=f"CommonJS require of {dependency} module",
        ),
        Pattern(
            name="import_from",
            regex=re.compile(rf"\bimport\b.*\bfrom\s*[\"']{dep}[\"']"),
            severity=Severity.HIGH,
            description=f"ES6 import from {dependency} module",
        ),
        Pattern(
            name="dynamic_import",
            regex=re.compile(rf"\bimport\s*\(\s*[\"']{dep}[\"']\s*\)"),
            severity=Severity.HIGH,
            description=f"Dynamic import of {dependency} module",
        ),
        Pattern(
            name="constructor",
            regex=re.compile(rf"\bnew\s+{cls}\b\s*\("),
            severity=Severity.HIGH,
            description=f"{cls} constructor instantiation",
        ),
        Pattern(
            name="instance_method",
            regex=re.compile(rf"\b{dep}\.{_METHODS}\b"),
            severity=Severity.HIGH,
            description=f"{dependency} instance method call",
        ),
        Pattern(
            name="static_method",
            regex=re.compile(rf"\b{cls}\.{_METHODS}\b"),
            severity=Severity.HIGH,
            description=f"{cls} static method call",
        ),
        Pattern(
            name="default_export",
            regex=re.compile(rf"\b(?:{dep}|{cls})\.default\b"),
            severity=Severity.MEDIUM,
            description=f"{dependency} default export access",
        ),
        Pattern(
            name="string_literal",
            regex=re.compile(rf"\b[\"']{dep}[\"']\b(?!\s*[:\-,])"),
            severity=Severity.MEDIUM,
            description=f"Standalone {dependency} string literal",
        ),
    )


def safe_patterns(dependency: str) -> tuple[re.Pattern[str], ...]:
    """Phrases under which a mention of ``dependency`` is documentation, not use."""
    dep = re.escape(dependency)
    sources = (
        rf"{dep}[-_\s]compatible",
        rf"without[\s_-]*{dep}",
        rf"no[\s_-]*{dep}",
        rf"disable[\s_-]*{dep}",
        rf"exclude[\s_-]*{dep}",
        rf"fallback[\s_-]*{dep}",
        rf"stub[\s_-]*{dep}",
        rf"mock[\s_-]*{dep}",
        rf"provides.*validation.*without.*{dep}",
        rf"alternative.*to.*{dep}",
        rf"instead.*of.*{dep}",
        rf"rather.*than.*{dep}",
        rf"replaces.*{dep}",
        rf"externals.*{dep}",
        rf"webpack.*external.*{dep}",
        rf"bundle.*without.*{dep}",
        rf"exclude.*from.*bundle.*{dep}",
        rf"error.*{dep}.*not.*found",
        rf"warning.*{dep}.*missing",
        rf"cannot.*load.*{dep}",
        rf"{dep}.*not.*available",
        rf"{dep}.*unavailable",
        rf"like.*{dep}",
        rf"similar.*to.*{dep}",
        rf"compared.*to.*{dep}",
        rf"versus.*{dep}",
        rf"vs\.?.*{dep}",
        rf"\"[^\"]*description[^\"]*{dep}[^\"]*\"",
        rf"\"[^\"]*note[^\"]*{dep}[^\"]*\"",
        rf"\"[^\"]*comment[^\"]*{dep}[^\"]*\"",
        rf"\"[^\"]*warning[^\"]*{dep}[^\"]*\"",
        rf"eslint.*{dep}",
        rf"prettier.*{dep}",
        rf"babel.*{dep}",
        rf"typescript.*{dep}",
        rf"jest.*{dep}",
        rf"vitest.*{dep}",
    )
    return compile_all(sources, re.IGNORECASE)


class DependencyExclusionRule:
    """Flags references to excluded dependencies in restricted bundles."""

    name = "dependency-exclusion"
    severity = Severity.HIGH

    def __init__(self, profile: Profile) -> None:
        self.dependencies = profile.excluded_dependencies
        self.description = (
            f"Restricted build exclusion of {', '.join(self.dependencies) or 'nothing'}"
        )
        self.applies_to = profile.dependency_applies_to
        self._checks = [
            (dependency_patterns(dep), safe_patterns(dep)) for dep in self.dependencies
        ]

    def evaluate(self, cleaned: str, raw: str, path: str) -> list[Violation]:
        violations: list[Violation] = []
        for patterns, safe in self._checks:
            violations.extend(scan_with_whitelist(cleaned, raw, path, self.name, patterns, safe))
        return violations
