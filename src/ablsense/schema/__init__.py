"""Data Dictionary (.df) schema parsing module."""

from ablsense.schema.catalog import SchemaCatalog
from ablsense.schema.models import FieldDef, IndexDef, Table
from ablsense.schema.parser import parse_df, parse_df_file

__all__ = [
    "FieldDef",
    "IndexDef",
    "Table",
    "SchemaCatalog",
    "parse_df",
    "parse_df_file",
]
