"""
Statement extraction from Progress ABL source text.

This module handles:
- FOR EACH / FOR FIRST / FOR LAST scans
- FIND / FIND FIRST / FIND LAST seeks
- CAN-FIND ( [FIRST] table WHERE ... ) existence checks, whose
  table-qualified fields become the statement's explicit filter fields

It is pattern based, not a grammar: comments, strings and preprocessor
references are not understood, and buffers/aliases are taken at face value.

Each statement form is a separate pass over the whole text. Results are
grouped by form (all FOR, then all FIND, then all CAN-FIND), each group in
document order. They are not re-sorted by position.
"""

from __future__ import annotations

import bisect
import logging
import re

from ablsense.extractor.models import CAN_FIND_MARKER, SourceAnalysis, Statement, StatementKind

logger = logging.getLogger(__name__)

IDENTIFIER = r"[A-Za-z0-9_\-]+"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class _LineIndex:
    """Maps character offsets to 1-based line numbers."""

    def __init__(self, text: str) -> None:
        self._breaks = [m.start() for m in _LINE_BREAK.finditer(text)]

    def line_at(self, offset: int) -> int:
        return bisect.bisect_left(self._breaks, offset) + 1


class StatementExtractor:
    """
    Extracts data-access statements from ABL source text.

    Usage:
        statements = StatementExtractor.extract(source_text)

        for st in statements:
            print(st.line, st.kind.value, st.table)
    """

    FOR_PATTERN = re.compile(
        rf"\bFOR\s+(EACH|FIRST|LAST)\s+({IDENTIFIER})[^\r\n]*",
        re.IGNORECASE,
    )

    FIND_PATTERN = re.compile(
        rf"\bFIND\s+(FIRST|LAST)?\s*({IDENTIFIER})[^\r\n]*",
        re.IGNORECASE,
    )

    # Header only; the predicate runs to the balancing ")"
    CAN_FIND_PATTERN = re.compile(
        rf"\bCAN-FIND\s*(?P<open>\()\s*(?:FIRST\s+)?(?P<table>{IDENTIFIER})\s+WHERE\s+",
        re.IGNORECASE,
    )

    FOR_KINDS = {
        "EACH": StatementKind.FOR_EACH,
        "FIRST": StatementKind.FOR_FIRST,
        "LAST": StatementKind.FOR_LAST,
    }

    FIND_KINDS = {
        "": StatementKind.FIND,
        "FIRST": StatementKind.FIND_FIRST,
        "LAST": StatementKind.FIND_LAST,
    }

    @classmethod
    def extract(cls, text: str) -> list[Statement]:
        """
        Extract every statement from one source text.

        Args:
            text: Raw ABL source

        Returns:
            FOR statements, then FIND statements, then CAN-FIND statements
        """
        lines = _LineIndex(text)
        statements: list[Statement] = []
        statements.extend(cls._scan_for(text, lines))
        statements.extend(cls._scan_find(text, lines))
        statements.extend(cls._scan_can_find(text, lines))
        return statements

    @classmethod
    def _scan_for(cls, text: str, lines: _LineIndex) -> list[Statement]:
        found = []
        for match in cls.FOR_PATTERN.finditer(text):
            found.append(Statement(
                kind=cls.FOR_KINDS[match.group(1).upper()],
                table=match.group(2),
                line=lines.line_at(match.start()),
                raw=match.group(0).strip(),
            ))
        return found

    @classmethod
    def _scan_find(cls, text: str, lines: _LineIndex) -> list[Statement]:
        found = []
        for match in cls.FIND_PATTERN.finditer(text):
            found.append(Statement(
                kind=cls.FIND_KINDS[(match.group(1) or "").upper()],
                table=match.group(2),
                line=lines.line_at(match.start()),
                raw=match.group(0).strip(),
            ))
        return found

    @classmethod
    def _scan_can_find(cls, text: str, lines: _LineIndex) -> list[Statement]:
        found = []
        pos = 0
        while True:
            match = cls.CAN_FIND_PATTERN.search(text, pos)
            if match is None:
                break

            close = find_closing_paren(text, match.start("open"))
            if close is None:
                logger.debug(
                    "Unterminated CAN-FIND at line %d", lines.line_at(match.start())
                )
                pos = match.end()
                continue

            table = match.group("table")
            predicate = text[match.end():close]
            found.append(Statement(
                kind=StatementKind.FIND,
                table=table,
                line=lines.line_at(match.start()),
                raw=f"{text[match.start():close + 1].strip()} {CAN_FIND_MARKER}",
                explicit_filter_fields=tuple(qualified_fields(predicate, table)),
            ))
            pos = close + 1
        return found


def find_closing_paren(text: str, open_at: int, quotes: bool = True) -> int | None:
    """
    Find the ")" that balances the "(" at ``open_at``.

    Parentheses inside quoted strings and (nested) ``/* */`` comments are
    ignored, and ``~`` escapes the character after it. If a quote is still
    open when the text ends, the scan is repeated without string tracking.
    Returns None when the text ends first.
    """
    depth = 0
    comments = 0
    quote: str | None = None
    i = open_at
    while i < len(text):
        ch = text[i]
        if ch == "~":
            i += 2
            continue

        if comments:
            if text.startswith("/*", i):
                comments += 1
                i += 2
            elif text.startswith("*/", i):
                comments -= 1
                i += 2
            else:
                i += 1
            continue

        if quote:
            if ch == quote:
                quote = None
        elif text.startswith("/*", i):
            comments = 1
            i += 2
            continue
        elif quotes and ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1

    if quote is not None:
        return find_closing_paren(text, open_at, quotes=False)
    return None


def qualified_fields(predicate: str, table: str) -> list[str]:
    """
    Collect ``table.field`` references from a predicate.

    The table qualifier matches case-insensitively; field names are kept as
    written and deduplicated in first-occurrence order.
    """
    pattern = re.compile(
        rf"(?<![A-Za-z0-9_\-]){re.escape(table)}\.({IDENTIFIER})",
        re.IGNORECASE,
    )
    fields: list[str] = []
    for match in pattern.finditer(predicate):
        if match.group(1) not in fields:
            fields.append(match.group(1))
    return fields


def extract_statements(text: str) -> list[Statement]:
    """Convenience wrapper around StatementExtractor.extract()."""
    return StatementExtractor.extract(text)


def analyze_source(file_name: str, text: str) -> SourceAnalysis:
    """Extract statements from one named source blob."""
    statements = StatementExtractor.extract(text)
    logger.info("Extracted %s (%d FOR/FIND statement(s))", file_name, len(statements))
    return SourceAnalysis(file_name=file_name, statements=tuple(statements))
