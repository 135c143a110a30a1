"""
Data models for index advice.

The advisor produces exactly one result per statement:
- IndexMatch: an existing index covers a prefix of the statement's filters
- IndexSuggestion: nothing usable exists; carries a ready-to-load .df fragment
- AdvisorWarning: the statement could not be assessed (or no schema at all)

They're designed to be:
- Immutable (frozen=True): results don't change after creation
- Serializable: plain values the renderers turn into text/JSON/Markdown
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from ablsense.extractor.models import Statement


class ResultKind(str, Enum):
    """Tag of a MatchResult."""
    MATCH = "match"
    SUGGESTION = "suggestion"
    WARNING = "warning"


class WarningKind(str, Enum):
    """
    Why a statement (or the whole run) could not be assessed.

    SCHEMA_MISSING: no .df definitions loaded; reported once per run
    TABLE_NOT_FOUND: the statement's table is in no loaded .df
    INSUFFICIENT_FILTERS: no WHERE fields could be extracted
    """
    SCHEMA_MISSING = "no schema loaded"
    TABLE_NOT_FOUND = "table not found"
    INSUFFICIENT_FILTERS = "insufficient filters"


@dataclass(frozen=True)
class IndexMatch:
    """
    Best existing index for a statement.

    Attributes:
        table: Table the statement reads
        statement: The statement assessed
        used_fields: Filter fields, first-occurrence order
        index_name: Chosen index
        index_fields: All key fields of the chosen index
        match_count: Length of the index prefix bound by used_fields
        is_perfect: Every used field is part of the matched prefix
        file_name: Source blob the statement came from
    """
    table: str
    statement: Statement
    used_fields: tuple[str, ...]
    index_name: str
    index_fields: tuple[str, ...]
    match_count: int
    is_perfect: bool
    file_name: str | None = None

    kind: ClassVar[ResultKind] = ResultKind.MATCH


@dataclass(frozen=True)
class IndexSuggestion:
    """
    No index matched; ``suggestion`` is a new ADD INDEX in .df syntax.

    ``index_fields`` are the key fields of the suggested index, in order.
    """
    table: str
    statement: Statement
    used_fields: tuple[str, ...]
    index_fields: tuple[str, ...]
    suggestion: str
    file_name: str | None = None

    kind: ClassVar[ResultKind] = ResultKind.SUGGESTION


@dataclass(frozen=True)
class AdvisorWarning:
    """A statement, or the whole run, that could not be assessed."""
    reason: WarningKind
    table: str | None = None
    statement: Statement | None = None
    file_name: str | None = None

    kind: ClassVar[ResultKind] = ResultKind.WARNING

    @property
    def message(self) -> str:
        return self.reason.value


MatchResult = Union[IndexMatch, IndexSuggestion, AdvisorWarning]
