"""
JSON Schema definitions for stable report output.

Provides a versioned schema for:
- CI/CD integration (`ablsense analyze --format json`)
- Feeding results to other tooling
- Documentation generation

Every result kind shares one record shape; fields that do not apply to a
kind are null or empty.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Schema version - increment on breaking changes
SCHEMA_VERSION = "1.0"


class StatementSchema(BaseModel):
    """Schema for an extracted statement."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="FOR EACH, FOR FIRST, FOR LAST, FIND, FIND FIRST, FIND LAST")
    table: str = Field(..., description="Table as written in the source")
    line: int = Field(..., ge=1, description="1-based line number")
    raw: str = Field(..., description="Statement text")
    explicit_filter_fields: list[str] = Field(
        default_factory=list,
        description="CAN-FIND fields, if the statement came from one",
    )


class ResultSchema(BaseModel):
    """Schema for one advisor result."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="match, suggestion or warning")
    file_name: str | None = Field(None, description="Source the statement came from")
    table: str | None = Field(None, description="Table the statement reads")
    statement: StatementSchema | None = Field(None, description="Statement assessed")
    used_fields: list[str] = Field(default_factory=list, description="Filter fields found")
    index_name: str | None = Field(None, description="Matched index (match only)")
    index_fields: list[str] = Field(
        default_factory=list,
        description="Key fields of the matched or suggested index",
    )
    match_count: int | None = Field(None, description="Matched prefix length (match only)")
    is_perfect: bool | None = Field(None, description="Prefix covers every filter field")
    suggestion: str | None = Field(None, description=".df fragment (suggestion only)")
    message: str | None = Field(None, description="Warning reason (warning only)")


class IndexSchema(BaseModel):
    """Schema for a parsed index."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_primary: bool = False
    fields: list[str] = Field(default_factory=list)


class TableSchema(BaseModel):
    """Schema for a parsed table."""

    model_config = ConfigDict(frozen=True)

    name: str
    field_count: int = Field(0, description="Declared fields")
    indexes: list[IndexSchema] = Field(default_factory=list)


class SummarySchema(BaseModel):
    """Schema for report summary."""

    model_config = ConfigDict(frozen=True)

    files: int = Field(0, description="Source files analyzed")
    statements: int = Field(0, description="Statements extracted")
    tables: int = Field(0, description="Tables in the merged schema")
    indexes: int = Field(0, description="Indexes in the merged schema")
    matched: int = Field(0, description="Statements served by an existing index")
    perfect: int = Field(0, description="Matches covering every filter field")
    partial: int = Field(0, description="Matches covering some filter fields")
    suggested: int = Field(0, description="Statements with a suggested index")
    warnings: int = Field(0, description="Statements that could not be assessed")


class ReportSchema(BaseModel):
    """
    Top-level schema for an analysis report.

    This schema is stable across minor versions.
    Breaking changes require major version bump.
    """

    model_config = ConfigDict(frozen=True)

    version: str = Field(SCHEMA_VERSION, description="Schema version")
    summary: SummarySchema = Field(..., description="Report summary")
    results: list[ResultSchema] = Field(default_factory=list, description="One per statement")
    tables: list[TableSchema] = Field(default_factory=list, description="Merged schema")


def get_json_schema() -> dict[str, Any]:
    """Get the JSON Schema of the report output."""
    return ReportSchema.model_json_schema()
