"""
Output renderers for different formats.

Separates presentation logic from analysis logic.
Uses schema.py Pydantic models as the single source of truth
for JSON serialization; no manual dict construction.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import TYPE_CHECKING

from ablsense.advisor.models import AdvisorWarning, IndexMatch, IndexSuggestion
from ablsense.output.schema import (
    IndexSchema,
    ReportSchema,
    ResultSchema,
    StatementSchema,
    SummarySchema,
    TableSchema,
)

if TYPE_CHECKING:
    from ablsense.advisor.models import MatchResult
    from ablsense.engine import AnalysisReport
    from ablsense.extractor.models import Statement
    from ablsense.schema.models import Table


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"
    MARKDOWN = "markdown"


def render(report: "AnalysisReport", format: OutputFormat = OutputFormat.TEXT) -> str:
    """
    Render an analysis report in the specified format.

    Args:
        report: Report to render
        format: Output format (text, json, markdown)

    Returns:
        Formatted string
    """
    if format == OutputFormat.TEXT:
        return render_text(report)
    elif format == OutputFormat.JSON:
        return render_json(report)
    elif format == OutputFormat.MARKDOWN:
        return render_markdown(report)
    else:
        raise ValueError(f"Unknown output format: {format}")


# =============================================================================
# Schema-based serialization (single source of truth)
# =============================================================================


def _statement_to_schema(statement: "Statement") -> StatementSchema:
    return StatementSchema(
        kind=statement.kind.value,
        table=statement.table,
        line=statement.line,
        raw=statement.raw,
        explicit_filter_fields=list(statement.explicit_filter_fields),
    )


def _result_to_schema(result: "MatchResult") -> ResultSchema:
    """Convert an advisor result to the Pydantic schema model."""
    statement = _statement_to_schema(result.statement) if result.statement else None

    if isinstance(result, IndexMatch):
        return ResultSchema(
            kind=result.kind.value,
            file_name=result.file_name,
            table=result.table,
            statement=statement,
            used_fields=list(result.used_fields),
            index_name=result.index_name,
            index_fields=list(result.index_fields),
            match_count=result.match_count,
            is_perfect=result.is_perfect,
        )

    if isinstance(result, IndexSuggestion):
        return ResultSchema(
            kind=result.kind.value,
            file_name=result.file_name,
            table=result.table,
            statement=statement,
            used_fields=list(result.used_fields),
            index_fields=list(result.index_fields),
            suggestion=result.suggestion,
        )

    return ResultSchema(
        kind=result.kind.value,
        file_name=result.file_name,
        table=result.table,
        statement=statement,
        message=result.message,
    )


def _table_to_schema(table: "Table") -> TableSchema:
    return TableSchema(
        name=table.name,
        field_count=len(table.fields),
        indexes=[
            IndexSchema(name=i.name, is_primary=i.is_primary, fields=list(i.fields))
            for i in table.indexes
        ],
    )


def _report_to_schema(report: "AnalysisReport") -> ReportSchema:
    return ReportSchema(
        summary=SummarySchema(**report.summary()),
        results=[_result_to_schema(r) for r in report.results],
        tables=[_table_to_schema(t) for t in report.catalog.tables],
    )


# =============================================================================
# Text renderer (terminal)
# =============================================================================


def describe_result(result: "MatchResult") -> str:
    """One-line description of a result, as printed in reports."""
    if isinstance(result, AdvisorWarning):
        if result.table is None:
            return "No DF file was loaded. Unable to analyze or suggest indexes."
        return f'Table "{result.table}" → {result.message}'

    if isinstance(result, IndexMatch):
        status = (
            "perfect index"
            if result.is_perfect
            else f"partial match ({result.match_count} fields)"
        )
        return f'Table "{result.table}": recommended index "{result.index_name}" ({status})'

    return f'Table "{result.table}": no compatible index found'


def _location(result: "MatchResult") -> str | None:
    if result.statement is None:
        return None
    if result.file_name:
        return f"{result.file_name}:{result.statement.line}"
    return f"line {result.statement.line}"


def render_text(report: "AnalysisReport") -> str:
    """Render an analysis report as plain terminal text."""
    lines: list[str] = []
    summary = report.summary()

    lines.append("=" * 60)
    lines.append("ABL Index Analysis Report")
    lines.append("=" * 60)
    lines.append("")
    lines.append(
        f"Files: {summary['files']}  Statements: {summary['statements']}  "
        f"Tables: {summary['tables']}  Indexes: {summary['indexes']}"
    )
    lines.append(
        f"Matched: {summary['matched']} ({summary['perfect']} perfect, "
        f"{summary['partial']} partial)  Suggested: {summary['suggested']}  "
        f"Warnings: {summary['warnings']}"
    )
    lines.append("")

    if report.results:
        lines.append("-" * 60)
        lines.append("RESULTS")
        lines.append("-" * 60)

    for i, result in enumerate(report.results, 1):
        lines.append("")
        lines.append(f"[{i}] {_kind_icon(result)} {describe_result(result)}")

        location = _location(result)
        if location:
            lines.append(f"    Location: {location}")
        if result.statement is not None:
            lines.append(f"    Statement: {result.statement.raw}")
        if isinstance(result, (IndexMatch, IndexSuggestion)):
            lines.append(f"    Filter fields: {', '.join(result.used_fields)}")
        if isinstance(result, IndexMatch):
            lines.append(f"    Index fields: {', '.join(result.index_fields)}")
        if isinstance(result, IndexSuggestion):
            lines.append("")
            lines.append("    Suggestion:")
            for line in result.suggestion.split("\n"):
                lines.append(f"      {line}")

    lines.append("")
    lines.append("=" * 60)

    return "\n".join(lines)


# =============================================================================
# JSON renderer (uses schema models)
# =============================================================================


def render_json(report: "AnalysisReport", indent: int = 2) -> str:
    """
    Render an analysis report as stable JSON.

    Uses Pydantic schema models for guaranteed consistency.
    """
    return json.dumps(_report_to_schema(report).model_dump(mode="json"), indent=indent)


# =============================================================================
# Markdown renderer
# =============================================================================


def render_markdown(report: "AnalysisReport") -> str:
    """
    Render an analysis report as Markdown.

    Suitable for merge request comments and wiki pages.
    """
    lines: list[str] = []
    summary = report.summary()

    lines.append("# ABL Index Analysis Report")
    lines.append("")

    if report.schema_missing:
        lines.append("⚠️ **No schema loaded**")
    elif summary["suggested"]:
        lines.append("🟡 **Missing indexes found**")
    else:
        lines.append("✅ **Every assessed statement has an index**")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| Files | {summary['files']} |")
    lines.append(f"| Statements | {summary['statements']} |")
    lines.append(f"| Tables | {summary['tables']} |")
    lines.append(f"| Perfect matches | {summary['perfect']} |")
    lines.append(f"| Partial matches | {summary['partial']} |")
    lines.append(f"| Suggested indexes | {summary['suggested']} |")
    lines.append(f"| Warnings | {summary['warnings']} |")
    lines.append("")

    if report.results:
        lines.append("## Results")
        lines.append("")

        for i, result in enumerate(report.results, 1):
            lines.append(f"### {i}. {_kind_icon(result)} {describe_result(result)}")
            lines.append("")
            location = _location(result)
            if location:
                lines.append(f"**Location:** `{location}`  ")
            if result.statement is not None:
                lines.append(f"**Statement:** `{result.statement.raw}`  ")
            if isinstance(result, (IndexMatch, IndexSuggestion)):
                lines.append(f"**Filter fields:** {', '.join(f'`{f}`' for f in result.used_fields)}")
            lines.append("")

            if isinstance(result, IndexSuggestion):
                lines.append("**Suggestion:**")
                lines.append("")
                lines.append("```")
                lines.append(result.suggestion)
                lines.append("```")
                lines.append("")

    return "\n".join(lines)


# =============================================================================
# Helpers
# =============================================================================


def _kind_icon(result: "MatchResult") -> str:
    """Get icon for a result."""
    if isinstance(result, IndexMatch):
        return "✅" if result.is_perfect else "🔵"
    if isinstance(result, IndexSuggestion):
        return "🟡"
    return "⚠️"
