"""Bundle assertion rules."""

from __future__ import annotations

from bundleguard.profile.models import Profile
from bundleguard.scanner.rules.base import Rule
from bundleguard.scanner.rules.build_target import BuildTargetRule
from bundleguard.scanner.rules.dependencies import DependencyExclusionRule
from bundleguard.scanner.rules.dynamic_eval import DynamicEvalRule
from bundleguard.scanner.rules.exports import GlobalExportRule
from bundleguard.scanner.rules.security_guards import SecurityGuardRule

__all__ = [
    "BuildTargetRule",
    "DependencyExclusionRule",
    "DynamicEvalRule",
    "GlobalExportRule",
    "Rule",
    "SecurityGuardRule",
    "default_rules",
]


def default_rules(profile: Profile) -> list[Rule]:
    """The fixed rule set, parameterized by ``profile``, in registration order."""
    return [
        GlobalExportRule(profile),
        DynamicEvalRule(profile),
        DependencyExclusionRule(profile),
        BuildTargetRule(profile),
        SecurityGuardRule(profile),
    ]
