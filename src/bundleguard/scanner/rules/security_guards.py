"""Security guard presence — runtime guards must survive bundling."""

from __future__ import annotations

from bundleguard.profile.models import Profile
from bundleguard.scanner.models import Severity, Violation
from bundleguard.scanner.patterns import compile_all


class SecurityGuardRule:
    """Requires the insecure-WebSocket guard to be bundled into restricted builds.

    Primary patterns look for the guard's messages and method names. When
    none match, looser fallback patterns are tried: a fallback hit means the
    guard logic is probably there with its strings minified away, which is
    reported as a warning for manual review instead of a failure.
    """

    name = "websocket-scheme-validation"
    description = "WebSocket scheme guard presence for restricted runtimes"
    severity = Severity.HIGH

    def __init__(self, profile: Profile) -> None:
        self.applies_to = profile.guard_applies_to
        self._primary = compile_all(profile.guard_patterns)
        self._fallback = compile_all(profile.fallback_guard_patterns)

    def matched_guards(self, cleaned: str) -> dict[str, int]:
        """Primary pattern source -> number of matches, for patterns that hit."""
        found: dict[str, int] = {}
        for pattern in self._primary:
            count = len(pattern.findall(cleaned))
            if count:
                found[pattern.pattern] = count
        return found

    def evaluate(self, cleaned: str, raw: str, path: str) -> list[Violation]:
        if self.matched_guards(cleaned):
            return []

        fallback_matches = sum(len(p.findall(cleaned)) for p in self._fallback)
        if fallback_matches == 0:
            return [
                Violation(
                    rule_name=self.name,
                    severity=self.severity,
                    message=(
                        "WebSocket scheme validation logic not found in bundle. "
                        "Restricted builds must include runtime guards that reject "
                        "ws:// URLs. The guard may have been stripped during "
                        "minification or never bundled."
                    ),
                    file_path=path,
                )
            ]

        return [
            Violation(
                rule_name=self.name,
                severity=Severity.WARNING,
                message=(
                    f"WebSocket validation patterns found ({fallback_matches}) but "
                    f"expected guard messages are missing. This might be due to "
                    f"string minification; manual verification recommended."
                ),
                file_path=path,
            )
        ]
