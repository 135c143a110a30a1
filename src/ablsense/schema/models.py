"""
Pydantic models for Data Dictionary (.df) schema definitions.

These models represent the subset of a .df export the advisor needs:
- Table: fields and indexes in declaration order
- FieldDef: a field name and its lowercased data type
- IndexDef: an index and its ordered key fields

Declaration order is load-bearing. Index field order drives prefix
matching, and index order breaks ties between equally good indexes.

Reference: OpenEdge Data Dictionary "Dump Data Definitions" (.df) format.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class FieldDef(BaseModel):
    """A field declared with ADD FIELD."""

    name: str = Field(..., description="Field name as declared")
    data_type: str = Field(
        default="",
        description="Declared type, lowercased (character, integer, date, logical, ...)",
    )


class IndexDef(BaseModel):
    """
    An index declared with ADD INDEX.

    ``fields`` holds the INDEX-FIELD names in the order they were declared,
    which is the order the index can be used in.
    """

    name: str = Field(..., description="Index name")
    is_primary: bool = Field(default=False, description="Declared PRIMARY")
    fields: list[str] = Field(default_factory=list, description="Key fields in order")


class Table(BaseModel):
    """A table with its fields and indexes in declaration order."""

    name: str = Field(..., description="Table name as declared")
    fields: list[FieldDef] = Field(default_factory=list)
    indexes: list[IndexDef] = Field(default_factory=list)

    def field_type(self, name: str) -> str:
        """
        Declared type of a field, or "" when unknown.

        ABL field names are case-insensitive, so the lookup is too. When a
        name is declared twice the first declaration wins.
        """
        wanted = name.lower()
        for field_def in self.fields:
            if field_def.name.lower() == wanted:
                return field_def.data_type
        return ""

    @property
    def primary_index(self) -> IndexDef | None:
        """First index declared PRIMARY, if any."""
        for index in self.indexes:
            if index.is_primary:
                return index
        return None
