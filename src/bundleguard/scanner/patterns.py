"""Shared pattern matching — compiled detection patterns and safe-context whitelisting."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bundleguard.scanner.models import Severity, Violation

# Characters of raw text inspected on each side of a matched line
CONTEXT_RADIUS = 200

# Characters of raw text kept around a match for reporting
_SNIPPET_RADIUS = 60


@dataclass(frozen=True)
class Pattern:
    """A detection pattern with compiled regex and metadata."""

    name: str
    regex: re.Pattern[str]
    severity: Severity
    description: str = ""


@dataclass(frozen=True)
class Location:
    """Where a match offset lands in the raw text."""

    line_number: int
    line: str
    window: str
    snippet: str


def locate(raw: str, offset: int) -> Location:
    """Resolve an offset against the raw text.

    Offsets come from matches in cleaned text, so they drift by the number of
    comment characters removed before the match. The surrounding window is
    wide enough to absorb the drift for whitelist checks.
    """
    offset = max(0, min(offset, len(raw)))
    line_start = raw.rfind("\n", 0, offset)
    line_end = raw.find("\n", offset)
    if line_end == -1:
        line_end = len(raw)

    window_start = max(0, line_start - CONTEXT_RADIUS)
    window_end = min(len(raw), line_end + CONTEXT_RADIUS)

    snippet = raw[max(0, offset - _SNIPPET_RADIUS) : offset + _SNIPPET_RADIUS]

    return Location(
        line_number=raw.count("\n", 0, offset) + 1,
        line=raw[line_start + 1 : line_end],
        window=raw[window_start:window_end],
        snippet=" ".join(snippet.split()),
    )


def is_safe_context(
    line: str,
    window: str,
    safe_patterns: tuple[re.Pattern[str], ...],
) -> bool:
    """Whether any whitelist pattern matches the line or its surrounding window.

    The line is also tried lower-cased; the window is matched as written.
    """
    lowered_line = line.lower()
    for pattern in safe_patterns:
        if pattern.search(line) or pattern.search(lowered_line):
            return True
        if pattern.search(window):
            return True
    return False


def scan_with_whitelist(
    cleaned: str,
    raw: str,
    file_path: str,
    rule_name: str,
    patterns: tuple[Pattern, ...],
    safe_patterns: tuple[re.Pattern[str], ...],
) -> list[Violation]:
    """Match ``patterns`` in cleaned text, dropping matches in a safe raw context."""
    violations: list[Violation] = []

    for pattern in patterns:
        for match in pattern.regex.finditer(cleaned):
            where = locate(raw, match.start())
            if is_safe_context(where.line, where.window, safe_patterns):
                continue
            violations.append(
                Violation(
                    rule_name=rule_name,
                    severity=pattern.severity,
                    message=f"{pattern.description}: {match.group(0)!r}",
                    file_path=file_path,
                    line_number=where.line_number,
                    matched_text=match.group(0),
                    context=where.snippet,
                )
            )

    return violations


def compile_all(sources: tuple[str, ...], flags: int = 0) -> tuple[re.Pattern[str], ...]:
    """Compile a tuple of regex sources with shared flags."""
    return tuple(re.compile(source, flags) for source in sources)
