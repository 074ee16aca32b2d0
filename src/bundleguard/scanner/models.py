"""Scanner data models — sources, violations, and aggregated reports."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field


class Severity(enum.Enum):
    """Violation severity level."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    WARNING = "warning"

    @property
    def is_blocking(self) -> bool:
        """Whether a violation of this severity fails the run."""
        return self in (Severity.HIGH, Severity.MEDIUM)

    @property
    def rank(self) -> int:
        """Ordering used for downgrade checks and sorting (high first)."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.HIGH: 0,
    Severity.MEDIUM: 1,
    Severity.LOW: 2,
    Severity.WARNING: 3,
}


class OutcomeStatus(enum.Enum):
    """Result of evaluating one rule against one file."""

    PASSED = "passed"
    FAILED = "failed"
    WARNING = "warning"


@dataclass(frozen=True)
class SourceFile:
    """A bundle read from disk. Never modified after creation."""

    path: str
    raw_content: str


@dataclass(frozen=True)
class Violation:
    """A single rule finding against one file."""

    rule_name: str
    severity: Severity
    message: str
    file_path: str
    line_number: int | None = None
    matched_text: str = ""
    context: str = ""

    @property
    def is_blocking(self) -> bool:
        return self.severity.is_blocking

    def to_dict(self) -> dict:
        return {
            "rule": self.rule_name,
            "severity": self.severity.value,
            "message": self.message,
            "file": self.file_path,
            "line": self.line_number,
            "match": self.matched_text,
            "context": self.context,
        }


@dataclass
class RuleOutcome:
    """Record of one (file, rule) evaluation."""

    file_path: str
    rule_name: str
    status: OutcomeStatus
    duration: float = 0.0
    violations: list[Violation] = field(default_factory=list)
    faulted: bool = False

    def to_dict(self) -> dict:
        return {
            "task": self.rule_name,
            "file": self.file_path,
            "status": self.status.value,
            "executionTime": round(self.duration * 1000, 3),
            "violations": len(self.violations),
            "faulted": self.faulted,
        }


@dataclass(frozen=True)
class FileFault:
    """A candidate file that could not be read."""

    file_path: str
    message: str

    def to_dict(self) -> dict:
        return {"file": self.file_path, "message": self.message}


@dataclass
class Report:
    """Aggregate result of a registry run."""

    passed_count: int = 0
    failed_count: int = 0
    warning_count: int = 0
    violations: list[Violation] = field(default_factory=list)
    outcomes: list[RuleOutcome] = field(default_factory=list)
    faults: list[FileFault] = field(default_factory=list)
    files_scanned: int = 0
    elapsed_time: float = 0.0
    parallel: bool = False
    workers: int = 1
    timestamp: float = field(default_factory=time.time)

    def record(self, outcome: RuleOutcome) -> None:
        """Fold one rule outcome into the counters. Callers hold the lock."""
        self.outcomes.append(outcome)
        if not outcome.violations:
            self.passed_count += 1
            return
        for violation in outcome.violations:
            if violation.is_blocking:
                self.failed_count += 1
            else:
                self.warning_count += 1
            self.violations.append(violation)
