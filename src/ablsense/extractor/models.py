"""
Data models for statements found in ABL source text.

Statements are immutable once extracted: the advisor reads them, the
renderers print them, nothing changes them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

CAN_FIND_MARKER = "[CAN-FIND]"


class StatementKind(str, Enum):
    """
    Data-access statement forms recognized in ABL source.

    FOR_* iterate a table (scan), FIND* position on a record (seek).
    CAN-FIND existence checks are reported as plain FIND.
    """
    FOR_EACH = "FOR EACH"
    FOR_FIRST = "FOR FIRST"
    FOR_LAST = "FOR LAST"
    FIND = "FIND"
    FIND_FIRST = "FIND FIRST"
    FIND_LAST = "FIND LAST"

    @property
    def is_scan(self) -> bool:
        return self in (StatementKind.FOR_EACH, StatementKind.FOR_FIRST, StatementKind.FOR_LAST)


@dataclass(frozen=True)
class Statement:
    """
    One data-access statement.

    Attributes:
        kind: Statement form
        table: Table identifier exactly as written in the source
        line: 1-based line where the statement starts
        raw: Statement text (keyword through end of line, or the whole
            CAN-FIND block followed by the marker)
        explicit_filter_fields: Fields already known to filter the table
            (CAN-FIND only), in first-occurrence order
    """
    kind: StatementKind
    table: str
    line: int
    raw: str
    explicit_filter_fields: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_existence_check(self) -> bool:
        """Whether this statement came from a CAN-FIND block."""
        return self.raw.endswith(CAN_FIND_MARKER)


@dataclass(frozen=True)
class SourceAnalysis:
    """Statements extracted from one source blob, in extraction order."""
    file_name: str
    statements: tuple[Statement, ...] = ()
