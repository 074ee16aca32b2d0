"""Comment stripper — removes JS comments while keeping literals byte-for-byte.

This is a lexical heuristic, not a parser. It walks the text line by line,
tracking just enough state to tell code from comments and from string,
template and regex literals:

* ``//`` discards the rest of the line.
* ``/* ... */`` is elided. When it spans a line break, a single space is
  emitted in place of each newline so the tokens on either side never merge.
* Quotes open a literal closed by the same quote, unless that quote is
  preceded by an odd number of backslashes.
* ``/`` opens a regex literal only when the previous significant character
  is an operator or punctuation mark (or nothing precedes it). Division that
  follows such a character is misread as a regex; this is a known limitation.

String, template and regex state is dropped at each line break, so a
malformed literal can never swallow the rest of the file.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class ScanMode(enum.Enum):
    """Lexical mode of the scanner."""

    CODE = "code"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    SINGLE_QUOTE = "single_quote"
    DOUBLE_QUOTE = "double_quote"
    TEMPLATE = "template"
    REGEX = "regex"


# Characters after which a "/" starts a regex literal instead of a division
REGEX_PRECEDERS = frozenset("=([{:;!&|?+-*/%^~<>,")

_OPENERS = {
    "'": ScanMode.SINGLE_QUOTE,
    '"': ScanMode.DOUBLE_QUOTE,
    "`": ScanMode.TEMPLATE,
}

_CLOSERS = {
    ScanMode.SINGLE_QUOTE: "'",
    ScanMode.DOUBLE_QUOTE: '"',
    ScanMode.TEMPLATE: "`",
    ScanMode.REGEX: "/",
}


@dataclass
class ScanState:
    """Mutable state for a single strip pass."""

    mode: ScanMode = ScanMode.CODE
    previous: str = ""  # last non-whitespace character emitted


def strip(raw: str) -> str:
    """Return ``raw`` with comments removed and literal contents untouched.

    Never raises: unterminated comments and literals simply run to the end
    of their line (literals) or of the input (block comments).
    """
    state = ScanState()
    lines = raw.split("\n")
    last = len(lines) - 1
    out: list[str] = []

    for index, line in enumerate(lines):
        out.append(_strip_line(line, state))
        if index < last:
            out.append(" " if state.mode is ScanMode.BLOCK_COMMENT else "\n")

    return "".join(out)


def is_escaped(text: str, index: int) -> bool:
    """Whether ``text[index]`` is preceded by an odd run of backslashes."""
    count = 0
    pos = index - 1
    while pos >= 0 and text[pos] == "\\":
        count += 1
        pos -= 1
    return count % 2 == 1


def _strip_line(line: str, state: ScanState) -> str:
    if state.mode is not ScanMode.BLOCK_COMMENT:
        state.mode = ScanMode.CODE

    kept: list[str] = []
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        nxt = line[i + 1] if i + 1 < length else ""
        mode = state.mode

        if mode is ScanMode.BLOCK_COMMENT:
            if char == "*" and nxt == "/":
                state.mode = ScanMode.CODE
                i += 2
            else:
                i += 1
            continue

        if mode is ScanMode.CODE:
            if char == "/" and nxt == "*":
                state.mode = ScanMode.BLOCK_COMMENT
                i += 2
                continue
            if char == "/" and nxt == "/":
                state.mode = ScanMode.LINE_COMMENT
                break
            if char == "/" and _regex_may_start(state.previous):
                state.mode = ScanMode.REGEX
            elif char in _OPENERS:
                state.mode = _OPENERS[char]
        elif char == _CLOSERS[mode] and not is_escaped(line, i):
            state.mode = ScanMode.CODE

        kept.append(char)
        if not char.isspace():
            state.previous = char
        i += 1

    return "".join(kept)


def _regex_may_start(previous: str) -> bool:
    return previous == "" or previous in REGEX_PRECEDERS
