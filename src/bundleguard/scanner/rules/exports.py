"""Global export presence — the UMD wrapper must publish the SDK global."""

from __future__ import annotations

import re

from bundleguard.profile.models import Profile
from bundleguard.scanner.models import Severity, Violation

_WRAPPER_ROOTS = r"(?:globalThis|window|self|root|this|[a-zA-Z_$])"


def _export_patterns(name: str, roots: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    name = re.escape(name)
    patterns = [
        # exports.Name, exports["Name"]
        re.compile(rf"\bexports(?:\.|\[[\"']){name}(?:[\"']\])?"),
        # Minified wrapper assignment: e.Name=, t.a["Name"] =
        re.compile(
            rf"{_WRAPPER_ROOTS}(?:\.[a-zA-Z_$][\w$]*)*[.\[][\"']?{name}[\"']?\]?\s*="
        ),
        re.compile(rf"\b[a-zA-Z_$][\w$]*(?:\.|\[[\"']){name}(?:[\"']\])?\s*=\s*[a-zA-Z_$]"),
    ]
    if roots:
        root = "|".join(re.escape(r) for r in roots)
        # globalThis.Name, window["Name"], root.Name
        patterns.insert(0, re.compile(rf"\b(?:{root})(?:\.|\[[\"']){name}(?:[\"']\])?"))
    return tuple(patterns)


class GlobalExportRule:
    """Fails when no assignment of the export name to a global root is found."""

    name = "global-export-presence"
    severity = Severity.HIGH

    def __init__(self, profile: Profile) -> None:
        self.export_name = profile.export_name
        self.description = f"Global {self.export_name} exposure validation"
        self.applies_to = profile.export_applies_to
        self.export_roots = profile.export_roots
        self._patterns = _export_patterns(self.export_name, self.export_roots)

    def evaluate(self, cleaned: str, raw: str, path: str) -> list[Violation]:
        if any(pattern.search(cleaned) for pattern in self._patterns):
            return []

        name = self.export_name
        return [
            Violation(
                rule_name=self.name,
                severity=self.severity,
                message=(
                    f"Global {name} assignment not found in UMD wrapper. "
                    f"Expected patterns like: globalThis.{name}, "
                    f'window["{name}"], root.{name}, or exports.{name}'
                ),
                file_path=path,
            )
        ]
