"""
Output module - Separates rendering from analysis.

Design principle: Presentation ≠ domain logic.

Provides multiple output formats:
- render_text: Plain terminal output
- render_json: Stable JSON schema for tooling
- render_markdown: Merge-request / wiki friendly format

Usage:
    from ablsense.output import render_text, render_json

    report = AnalysisService().analyze_paths(programs, schemas)
    print(render_text(report))
"""

from ablsense.output.renderers import (
    OutputFormat,
    describe_result,
    render,
    render_json,
    render_markdown,
    render_text,
)
from ablsense.output.schema import (
    ReportSchema,
    ResultSchema,
    get_json_schema,
)

__all__ = [
    "OutputFormat",
    "describe_result",
    "render",
    "render_text",
    "render_json",
    "render_markdown",
    "ReportSchema",
    "ResultSchema",
    "get_json_schema",
]
