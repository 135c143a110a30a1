"""
AnalysisService - orchestration layer for ablsense.

This is the single entry point for running an index analysis. The CLI and
any embedding application should use this service rather than wiring the
extractor, schema parser and advisor together themselves.

Pipeline:
    program blobs → StatementExtractor → per-file statements
    schema blobs  → parse_df → table maps → SchemaCatalog.merge
    (statements, catalog) → IndexAdvisor → results

Usage:
    from ablsense.engine import AnalysisService

    service = AnalysisService()

    # From paths (archives expanded, unsupported files skipped)
    report = service.analyze_paths(["close.p", "orders.zip"], ["sports.df"])

    # From in-memory blobs
    report = service.analyze_texts(
        programs=[NamedText("close.p", source)],
        schemas=[NamedText("sports.df", df_text)],
    )

    print(report.summary())

A SourceReadError from any input aborts the run; no partial report is
returned.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ablsense.advisor.advisor import IndexAdvisor
from ablsense.advisor.models import (
    AdvisorWarning,
    IndexMatch,
    IndexSuggestion,
    MatchResult,
    WarningKind,
)
from ablsense.advisor.suggestions import SuggestionGenerator
from ablsense.config import Config, get_config
from ablsense.extractor.extractor import analyze_source
from ablsense.extractor.models import SourceAnalysis
from ablsense.inputs import NamedText, load_program_texts, load_schema_texts
from ablsense.schema.catalog import SchemaCatalog
from ablsense.schema.parser import parse_df

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisReport:
    """
    Complete result of one analysis run.

    Results follow file order, then statement order within each file.
    """

    sources: tuple[SourceAnalysis, ...] = ()
    catalog: SchemaCatalog = field(default_factory=SchemaCatalog)
    results: tuple[MatchResult, ...] = ()

    @property
    def statement_count(self) -> int:
        return sum(len(s.statements) for s in self.sources)

    @property
    def matches(self) -> list[IndexMatch]:
        return [r for r in self.results if isinstance(r, IndexMatch)]

    @property
    def suggestions(self) -> list[IndexSuggestion]:
        return [r for r in self.results if isinstance(r, IndexSuggestion)]

    @property
    def warnings(self) -> list[AdvisorWarning]:
        return [r for r in self.results if isinstance(r, AdvisorWarning)]

    @property
    def schema_missing(self) -> bool:
        return any(w.reason is WarningKind.SCHEMA_MISSING for w in self.warnings)

    def summary(self) -> dict[str, Any]:
        """Counts for report headers and JSON output."""
        matches = self.matches
        return {
            "files": len(self.sources),
            "statements": self.statement_count,
            "tables": len(self.catalog),
            "indexes": self.catalog.index_count,
            "matched": len(matches),
            "perfect": sum(1 for m in matches if m.is_perfect),
            "partial": sum(1 for m in matches if not m.is_perfect),
            "suggested": len(self.suggestions),
            "warnings": len(self.warnings),
        }

    def suggestions_df(self) -> str:
        """
        Every distinct suggestion as one .df text, blank-line separated.

        Suggestions are compared by table and key fields, so the same index
        proposed by several statements appears once.
        """
        seen: set[tuple[str, tuple[str, ...]]] = set()
        fragments: list[str] = []
        for suggestion in self.suggestions:
            key = (suggestion.table, suggestion.index_fields)
            if key in seen:
                continue
            seen.add(key)
            fragments.append(suggestion.suggestion)
        return "\n\n".join(fragments)


class AnalysisService:
    """
    Orchestration service for index analysis.

    Coordinates input loading, statement extraction, schema parsing and
    index matching.
    """

    def __init__(
        self,
        config: Config | None = None,
        suggestions: SuggestionGenerator | None = None,
        seed: int | None = None,
    ) -> None:
        """
        Initialize the analysis service.

        Args:
            config: Configuration (defaults to get_config())
            suggestions: Suggestion generator; built from config if None
            seed: Seed for suggested index names, for reproducible output
        """
        self.config = config or get_config()
        if suggestions is None:
            rng = random.Random(seed) if seed is not None else None
            suggestions = SuggestionGenerator.from_config(self.config, rng=rng)
        self.advisor = IndexAdvisor(suggestions)

    def analyze_texts(
        self,
        programs: Iterable[NamedText],
        schemas: Iterable[NamedText],
    ) -> AnalysisReport:
        """
        Analyze already-loaded program and schema blobs.

        Args:
            programs: ABL sources, in report order
            schemas: .df texts, in merge order (later tables win)
        """
        logger.info("Analyzing Progress programs...")
        sources = tuple(analyze_source(blob.name, blob.text) for blob in programs)

        logger.info("Reading DF files...")
        table_maps = []
        for blob in schemas:
            tables = parse_df(blob.text)
            logger.info("DF processed: %s (%d table(s))", blob.name, len(tables))
            table_maps.append(tables)
        catalog = SchemaCatalog.merge(table_maps)

        logger.info("Comparing FOR/FIND statements with indexes...")
        results = tuple(self.advisor.analyze(sources, catalog))

        return AnalysisReport(sources=sources, catalog=catalog, results=results)

    def analyze_paths(
        self,
        program_paths: Iterable[str | Path],
        schema_paths: Iterable[str | Path],
    ) -> AnalysisReport:
        """
        Load inputs from disk and analyze them.

        Raises:
            SourceReadError: If any input cannot be read
        """
        programs = load_program_texts(program_paths, self.config)
        schemas = load_schema_texts(schema_paths, self.config)
        return self.analyze_texts(programs, schemas)
