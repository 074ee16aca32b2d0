"""Dynamic evaluation — eval() and Function() break CSP in production bundles."""

from __future__ import annotations

import re

from bundleguard.profile.models import Profile
from bundleguard.scanner.models import Severity, Violation
from bundleguard.scanner.patterns import Pattern, compile_all, scan_with_whitelist

EVAL_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        name="direct_eval",
        regex=re.compile(r"\beval\s*\("),
        severity=Severity.HIGH,
        description="Direct eval() call",
    ),
    Pattern(
        name="function_constructor",
        regex=re.compile(r"\bnew\s+Function\s*\("),
        severity=Severity.HIGH,
        description="Function constructor call",
    ),
    Pattern(
        name="bracket_eval",
        regex=re.compile(r"\[[\s\"']*eval[\s\"']*\]"),
        severity=Severity.MEDIUM,
        description="Bracket notation eval access",
    ),
    Pattern(
        name="property_eval",
        regex=re.compile(r"\.eval\s*\("),
        severity=Severity.MEDIUM,
        description="Property-based eval call",
    ),
    Pattern(
        name="window_eval",
        regex=re.compile(r"window\[[\s\"']*eval[\s\"']*\]"),
        severity=Severity.HIGH,
        description="Window eval access",
    ),
    Pattern(
        name="global_this_eval",
        regex=re.compile(r"globalThis\[[\s\"']*eval[\s\"']*\]"),
        severity=Severity.HIGH,
        description="GlobalThis eval access",
    ),
)

_SAFE_CONTEXT = (
    # Babel and build tool helpers
    r"(?i)Function\.toString\.call",
    r"(?i)\[native code\]",
    r"(?i)_isNativeFunction",
    r"(?i)babel[-_]helper",
    r"(?i)webpack[-_]helper",
    # Inside string literals
    r"\"[^\"]*eval[^\"]*\"",
    r"'[^']*eval[^']*'",
    r"`[^`]*eval[^`]*`",
    # Documentation and metadata
    r"(?i)description[:\s]*['\"][^'\"]*eval",
    r"(?i)comment[:\s]*['\"][^'\"]*eval",
    r"(?i)note[:\s]*['\"][^'\"]*eval",
    r"(?i)warning[:\s]*['\"][^'\"]*eval",
    # Error messages
    r"(?i)error.*message.*eval",
    r"(?i)cannot.*use.*eval",
    r"(?i)eval.*not.*allowed",
    r"(?i)eval.*forbidden",
    # Build configuration
    r"(?i)externals.*eval",
    r"(?i)exclude.*eval",
    r"(?i)ignore.*eval",
)


class DynamicEvalRule:
    """Flags eval/Function constructs outside whitelisted safe contexts."""

    name = "eval-security"
    description = "CSP-compliant eval/Function security validation"
    severity = Severity.HIGH

    def __init__(self, profile: Profile) -> None:
        self.applies_to = profile.eval_applies_to
        identifiers = tuple(
            rf"(?i){re.escape(ident)}"
            for ident in (*profile.eval_safe_identifiers, profile.export_name)
        )
        self._safe = compile_all(identifiers + _SAFE_CONTEXT)

    def evaluate(self, cleaned: str, raw: str, path: str) -> list[Violation]:
        return scan_with_whitelist(cleaned, raw, path, self.name, EVAL_PATTERNS, self._safe)
