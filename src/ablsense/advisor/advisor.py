"""
Index advisor.

Checks every extracted FOR/FIND statement against the indexes declared in
the loaded .df files and reports which index serves it, or suggests one.

Technical approach:
1. Resolve the statement's table in the merged schema catalog
2. Collect the fields the statement filters on (CAN-FIND fields, or the
   fields compared in its WHERE clause)
3. Score each index by how many of its leading fields are filtered on;
   the count stops at the first key field that is not
4. Pick the highest score, earliest declared index on ties
5. With no usable index, generate a new one in .df syntax
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from ablsense.advisor.models import (
    AdvisorWarning,
    IndexMatch,
    IndexSuggestion,
    MatchResult,
    WarningKind,
)
from ablsense.advisor.suggestions import SuggestionGenerator
from ablsense.extractor.models import SourceAnalysis, Statement
from ablsense.schema.catalog import SchemaCatalog
from ablsense.schema.models import IndexDef

logger = logging.getLogger(__name__)

WHERE_KEYWORD = re.compile(r"\bWHERE\b", re.IGNORECASE)

# [table.]field immediately before a comparison operator
COMPARED_FIELD = re.compile(
    r"\b(?:[A-Za-z0-9_\-]+\.)?([A-Za-z0-9_\-]+)\s*(?:=|<>|>=|<=|>|<)"
)


def extract_where_fields(raw: str) -> list[str]:
    """
    Fields compared in a statement's WHERE clause.

    Only text after the first WHERE is considered. Qualifiers are dropped
    (``customer.city`` gives ``city``); duplicates keep their first position.

    Example:
        >>> extract_where_fields("FOR EACH customer WHERE customer.city = 'X' AND balance > 0:")
        ['city', 'balance']
    """
    where = WHERE_KEYWORD.search(raw)
    if where is None:
        return []

    fields: list[str] = []
    for match in COMPARED_FIELD.finditer(raw, where.end()):
        if match.group(1) not in fields:
            fields.append(match.group(1))
    return fields


def used_fields_for(statement: Statement) -> list[str]:
    """Filter fields of a statement: explicit CAN-FIND fields win."""
    if statement.explicit_filter_fields:
        return list(dict.fromkeys(statement.explicit_filter_fields))
    return extract_where_fields(statement.raw)


def score_index(index: IndexDef, used_fields: Iterable[str]) -> int:
    """
    Length of the leading run of index fields that are filtered on.

    The run ends at the first key field not in ``used_fields``; later
    fields never count, even if they are filtered on.
    """
    used = set(used_fields)
    count = 0
    for field in index.fields:
        if field not in used:
            break
        count += 1
    return count


def select_best_index(
    indexes: Sequence[IndexDef],
    used_fields: Iterable[str],
) -> tuple[IndexDef, int] | None:
    """
    Best index and its score, or None when no index scores above zero.

    Only a strictly greater score replaces the current best, so ties go to
    the index declared first.
    """
    used = set(used_fields)
    best: tuple[IndexDef, int] | None = None
    for index in indexes:
        count = score_index(index, used)
        if count == 0:
            continue
        if best is None or count > best[1]:
            best = (index, count)
    return best


class IndexAdvisor:
    """
    Matches statements against schema indexes.

    Usage:
        advisor = IndexAdvisor()
        results = advisor.analyze(source_analyses, catalog)

        for result in results:
            print(result.kind.value, result.table)
    """

    def __init__(self, suggestions: SuggestionGenerator | None = None) -> None:
        self.suggestions = suggestions or SuggestionGenerator()

    def analyze(
        self,
        sources: Iterable[SourceAnalysis],
        catalog: SchemaCatalog,
    ) -> list[MatchResult]:
        """
        Assess every statement of every source, in order.

        Args:
            sources: Per-file statements, in file order
            catalog: Merged schema

        Returns:
            One result per statement, or a single SCHEMA_MISSING warning
            when the catalog is empty
        """
        if len(catalog) == 0:
            logger.warning("No schema loaded; index analysis skipped")
            return [AdvisorWarning(reason=WarningKind.SCHEMA_MISSING)]

        results: list[MatchResult] = []
        for source in sources:
            for statement in source.statements:
                results.append(self.assess(statement, catalog, file_name=source.file_name))
        return results

    def assess(
        self,
        statement: Statement,
        catalog: SchemaCatalog,
        file_name: str | None = None,
    ) -> MatchResult:
        """Assess a single statement against the catalog."""
        table = catalog.get(statement.table)
        if table is None:
            return AdvisorWarning(
                reason=WarningKind.TABLE_NOT_FOUND,
                table=statement.table,
                statement=statement,
                file_name=file_name,
            )

        used = used_fields_for(statement)
        if not used:
            return AdvisorWarning(
                reason=WarningKind.INSUFFICIENT_FILTERS,
                table=statement.table,
                statement=statement,
                file_name=file_name,
            )

        best = select_best_index(table.indexes, used)
        if best is None:
            logger.debug(
                "No index on %s serves %s (line %d)",
                table.name, ", ".join(used), statement.line,
            )
            key_fields = self.suggestions.select_fields(table, used)
            return IndexSuggestion(
                table=statement.table,
                statement=statement,
                used_fields=tuple(used),
                index_fields=tuple(key_fields),
                suggestion=self.suggestions.render(table.name, key_fields),
                file_name=file_name,
            )

        index, count = best
        return IndexMatch(
            table=statement.table,
            statement=statement,
            used_fields=tuple(used),
            index_name=index.name,
            index_fields=tuple(index.fields),
            match_count=count,
            is_perfect=count == len(used),
            file_name=file_name,
        )


def analyze_index_usage(
    sources: Iterable[SourceAnalysis],
    catalog: SchemaCatalog,
) -> list[MatchResult]:
    """
    Convenience function to run the advisor with default suggestions.

    Args:
        sources: Per-file statements
        catalog: Merged schema

    Returns:
        One result per statement
    """
    return IndexAdvisor().analyze(sources, catalog)
