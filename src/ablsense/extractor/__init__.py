"""ABL source statement extraction module."""

from ablsense.extractor.extractor import (
    StatementExtractor,
    analyze_source,
    extract_statements,
)
from ablsense.extractor.models import CAN_FIND_MARKER, SourceAnalysis, Statement, StatementKind

__all__ = [
    "StatementExtractor",
    "Statement",
    "StatementKind",
    "SourceAnalysis",
    "CAN_FIND_MARKER",
    "extract_statements",
    "analyze_source",
]
