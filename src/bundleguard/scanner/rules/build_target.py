"""Build identity — the bundler must have substituted the build target token."""

from __future__ import annotations

import re

from bundleguard.profile.models import Profile
from bundleguard.scanner.models import Severity, Violation


class BuildTargetRule:
    """Warns when no expected build target value was injected.

    Informational only: both findings are emitted as warnings.
    """

    name = "build-target-validation"
    description = "Build target token substitution validation"
    severity = Severity.LOW

    def __init__(self, profile: Profile) -> None:
        self.token = profile.build_token
        self.targets = profile.build_targets
        self.applies_to = profile.build_applies_to
        self._target_patterns = [
            (target, re.compile(rf"[\"']{re.escape(target)}[\"']")) for target in self.targets
        ]
        self._token_pattern = re.compile(re.escape(self.token))

    def found_targets(self, cleaned: str) -> dict[str, int]:
        """Count the quoted occurrences of each expected target value."""
        found: dict[str, int] = {}
        for target, pattern in self._target_patterns:
            count = len(pattern.findall(cleaned))
            if count:
                found[target] = count
        return found

    def evaluate(self, cleaned: str, raw: str, path: str) -> list[Violation]:
        if not self.found_targets(cleaned):
            return [
                Violation(
                    rule_name=self.name,
                    severity=Severity.WARNING,
                    message=(
                        f"Missing build target values. Expected {self.token} to be "
                        f"replaced with one of: {', '.join(self.targets)}"
                    ),
                    file_path=path,
                )
            ]

        leftovers = list(self._token_pattern.finditer(cleaned))
        if leftovers:
            first = leftovers[0]
            return [
                Violation(
                    rule_name=self.name,
                    severity=Severity.WARNING,
                    message=(
                        f"Found {len(leftovers)} unreplaced {self.token} token(s); "
                        f"the define step may not be substituting every occurrence"
                    ),
                    file_path=path,
                    line_number=cleaned.count("\n", 0, first.start()) + 1,
                    matched_text=first.group(0),
                )
            ]

        return []
