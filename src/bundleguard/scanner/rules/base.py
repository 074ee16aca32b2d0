"""Rule protocol — every bundle check must satisfy this."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from bundleguard.scanner.models import Severity, Violation


@runtime_checkable
class Rule(Protocol):
    """Protocol for bundle assertion rules.

    ``evaluate`` must not mutate its inputs and must be safe to call from
    several threads at once, on the same or different files.
    """

    name: str
    description: str
    severity: Severity
    applies_to: tuple[str, ...]

    def evaluate(self, cleaned: str, raw: str, path: str) -> list[Violation]:
        """Return the violations found in one file (empty when it passes)."""
        ...
