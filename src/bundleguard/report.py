"""Report generation — console text via Rich, or a JSON document for machines."""

from __future__ import annotations

import json
from collections import defaultdict
from datetime import datetime, timezone
from io import StringIO
from pathlib import Path

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from bundleguard.scanner.models import OutcomeStatus, Report, Severity, Violation

_SEVERITY_COLORS = {
    Severity.HIGH: "red",
    Severity.MEDIUM: "magenta",
    Severity.LOW: "blue",
    Severity.WARNING: "yellow",
}

REMEDIATION_HINTS = {
    "global-export-presence": (
        "Review the UMD wrapper configuration and library export settings "
        "so the SDK global is assigned"
    ),
    "eval-security": (
        "Investigate and eliminate dynamic code generation in dependencies "
        "or build output; it violates CSP policies"
    ),
    "dependency-exclusion": (
        "Update bundler externals to keep excluded dependencies out of "
        "restricted builds"
    ),
    "build-target-validation": (
        "Add or fix the define step that injects the build target token"
    ),
    "websocket-scheme-validation": (
        "Make sure the WebSocket scheme guard is imported for its side effects "
        "so minification and tree shaking keep it"
    ),
}

_FAULT_HINT = "Rule {name} is failing during evaluation; check its pattern list and profile settings"
_GENERIC_HINT = "Review the {name} findings above"


def is_success(report: Report, strict: bool = False) -> bool:
    """A run passes with no blocking violations and no read faults."""
    if report.failed_count or report.faults:
        return False
    if strict and report.warning_count:
        return False
    return True


def exit_code(report: Report, strict: bool = False) -> int:
    return 0 if is_success(report, strict=strict) else 1


def sorted_violations(report: Report) -> list[Violation]:
    """Violations in a stable order independent of completion order."""
    return sorted(
        report.violations,
        key=lambda v: (
            v.file_path,
            v.rule_name,
            v.line_number or 0,
            v.severity.rank,
            v.message,
        ),
    )


def rule_counts(report: Report) -> dict[str, dict[str, int]]:
    """Per-rule passed/failed/warning outcome counts."""
    counts: dict[str, dict[str, int]] = defaultdict(
        lambda: {status.value: 0 for status in OutcomeStatus}
    )
    for outcome in report.outcomes:
        counts[outcome.rule_name][outcome.status.value] += 1
    return dict(sorted(counts.items()))


def remediation_hints(report: Report) -> list[str]:
    """One hint per distinct failing rule or faulting rule."""
    hints: list[str] = []
    seen: set[str] = set()

    for outcome in sorted(report.outcomes, key=lambda o: o.rule_name):
        if outcome.status is OutcomeStatus.PASSED:
            continue
        key = f"fault:{outcome.rule_name}" if outcome.faulted else outcome.rule_name
        if key in seen:
            continue
        seen.add(key)
        if outcome.faulted:
            hints.append(_FAULT_HINT.format(name=outcome.rule_name))
        else:
            hints.append(
                REMEDIATION_HINTS.get(
                    outcome.rule_name, _GENERIC_HINT.format(name=outcome.rule_name)
                )
            )

    if report.faults:
        hints.append("Check that every bundle in the distribution directory is readable")
    return hints


def build_document(report: Report, strict: bool = False) -> dict:
    """The machine-readable report. Field names are stable."""
    timestamp = datetime.fromtimestamp(report.timestamp, tz=timezone.utc).isoformat()
    outcomes = sorted(report.outcomes, key=lambda o: (o.file_path, o.rule_name))

    return {
        "summary": {
            "passed": report.passed_count,
            "failed": report.failed_count,
            "warnings": report.warning_count,
            "total": report.passed_count + report.failed_count + report.warning_count,
            "success": is_success(report, strict=strict),
        },
        "metadata": {
            "parallel": report.parallel,
            "workers": report.workers,
            "filesScanned": report.files_scanned,
            "strict": strict,
            "timestamp": timestamp,
        },
        "tasks": [outcome.to_dict() for outcome in outcomes],
        "violations": [violation.to_dict() for violation in sorted_violations(report)],
        "faults": [fault.to_dict() for fault in report.faults],
        "executionTime": round(report.elapsed_time * 1000, 3),
        "timestamp": timestamp,
    }


def render_json(report: Report, strict: bool = False) -> str:
    return json.dumps(build_document(report, strict=strict), indent=2)


def build_renderable(report: Report, strict: bool = False) -> Group:
    """Build the console report as Rich renderables."""
    parts: list = [Text("Bundle Assertion Report", style="bold")]

    summary = Table(show_header=False, box=None, padding=(0, 1))
    summary.add_column("Metric")
    summary.add_column("Value", justify="right")
    summary.add_row("[green]Passed[/green]", str(report.passed_count))
    summary.add_row("[yellow]Warnings[/yellow]", str(report.warning_count))
    summary.add_row("[red]Failed[/red]", str(report.failed_count))
    summary.add_row("Files", str(report.files_scanned))
    summary.add_row("Time", f"{report.elapsed_time:.2f}s")
    parts.append(summary)

    counts = rule_counts(report)
    if counts:
        table = Table(title="Rules", show_lines=False)
        table.add_column("Rule", style="cyan")
        table.add_column("Passed", justify="right")
        table.add_column("Warnings", justify="right")
        table.add_column("Failed", justify="right")
        for rule_name, row in counts.items():
            table.add_row(
                rule_name,
                str(row[OutcomeStatus.PASSED.value]),
                str(row[OutcomeStatus.WARNING.value]),
                str(row[OutcomeStatus.FAILED.value]),
            )
        parts.append(table)

    grouped: dict[str, list[Violation]] = defaultdict(list)
    for violation in sorted_violations(report):
        grouped[violation.rule_name].append(violation)

    for rule_name in sorted(grouped):
        table = Table(title=f"Violations: {rule_name}", show_lines=False)
        table.add_column("Severity", style="bold", width=8)
        table.add_column("File", style="cyan")
        table.add_column("Line", justify="right")
        table.add_column("Message")
        for violation in grouped[rule_name]:
            color = _SEVERITY_COLORS.get(violation.severity, "white")
            table.add_row(
                f"[{color}]{violation.severity.value}[/{color}]",
                Text(Path(violation.file_path).name),
                str(violation.line_number) if violation.line_number else "",
                Text(violation.message),
            )
        parts.append(table)

    if report.faults:
        table = Table(title="Read Faults", show_lines=False)
        table.add_column("File", style="cyan")
        table.add_column("Error")
        for fault in report.faults:
            table.add_row(Text(fault.file_path), Text(fault.message))
        parts.append(table)

    hints = remediation_hints(report)
    if hints:
        parts.append(Text("Recommended actions:", style="bold"))
        for hint in hints:
            parts.append(Text(f"  • {hint}"))

    if is_success(report, strict=strict):
        parts.append(Text.from_markup("[green]PASS[/green] All assertions passed"))
    else:
        parts.append(Text.from_markup("[red]FAIL[/red] Some assertions failed"))

    return Group(*parts)


def render_text(report: Report, strict: bool = False, width: int = 100) -> str:
    """Render the console report to plain text."""
    buf = StringIO()
    console = Console(file=buf, width=width, force_terminal=False, color_system=None)
    console.print(build_renderable(report, strict=strict))
    return buf.getvalue()
