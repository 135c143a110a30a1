"""Core analysis commands: analyze, suggest."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ablsense.advisor.models import AdvisorWarning, IndexMatch, IndexSuggestion
from ablsense.engine import AnalysisService
from ablsense.exceptions import AblSenseError, SourceReadError
from ablsense.output.renderers import OutputFormat, describe_result, render

console = Console()
error_console = Console(stderr=True)

ProgramsArg = Annotated[
    list[Path],
    typer.Argument(
        help="ABL sources (.p, .w, .i, .cls) or .zip archives of them",
        exists=True,
        readable=True,
        resolve_path=True,
    ),
]

SchemaOpt = Annotated[
    Optional[list[Path]],
    typer.Option(
        "--schema",
        "-s",
        help="Data Dictionary export (.df); repeat for several",
        exists=True,
        readable=True,
        resolve_path=True,
    ),
]

SeedOpt = Annotated[
    Optional[int],
    typer.Option("--seed", help="Seed for suggested index names (reproducible output)"),
]


def _report_error(e: AblSenseError) -> None:
    error_console.print(f"[red]Error:[/red] {e.message}")
    if isinstance(e, SourceReadError) and e.detail:
        error_console.print(f"\n[dim]{e.detail}[/dim]")


def register(app: typer.Typer) -> None:
    """Register core commands on the given Typer app."""

    @app.command()
    def analyze(
        programs: ProgramsArg,
        schema: SchemaOpt = None,
        output_format: Annotated[
            OutputFormat,
            typer.Option("--format", "-f", help="Output format"),
        ] = OutputFormat.TEXT,
        seed: SeedOpt = None,
    ) -> None:
        """
        Check every FOR/FIND statement against the schema's indexes.

        Examples:

            $ ablsense analyze close.p -s sports.df
            $ ablsense analyze src.zip -s sports.df -s custom.df --format json
        """
        try:
            service = AnalysisService(seed=seed)
            report = service.analyze_paths(programs, schema or [])
        except AblSenseError as e:
            _report_error(e)
            raise typer.Exit(code=1)

        if output_format != OutputFormat.TEXT:
            # Plain print: rich markup would mangle [CAN-FIND] markers
            typer.echo(render(report, format=output_format))
            return

        if not report.results:
            console.print(Panel(
                "[green]No FOR/FIND statements found.[/green]\n\n"
                f"Analyzed {len(report.sources)} file(s).",
                title="ablsense",
                border_style="green",
            ))
            return

        console.print(f"[bold]Assessed {report.statement_count} statement(s):[/bold]\n")

        for result in report.results:
            if isinstance(result, AdvisorWarning):
                style = "yellow"
            elif isinstance(result, IndexMatch) and result.is_perfect:
                style = "green"
            elif isinstance(result, IndexMatch):
                style = "blue"
            else:
                style = "red"

            console.print(f"[{style}]{describe_result(result)}[/{style}]")
            if result.statement is not None:
                location = f"{result.file_name}:{result.statement.line}"
                console.print(f"   [dim]{location}[/dim]")
                console.print(f"   {result.statement.raw}", markup=False)

            if isinstance(result, IndexSuggestion):
                console.print("\n   [bold]Suggested index:[/bold]")
                for line in result.suggestion.split("\n"):
                    console.print(f"   [green]{line}[/green]")

            console.print()

        summary = report.summary()
        console.print(
            f"[dim]{summary['matched']} matched ({summary['perfect']} perfect), "
            f"{summary['suggested']} suggested, {summary['warnings']} warning(s) "
            f"across {summary['files']} file(s)[/dim]"
        )

    @app.command()
    def suggest(
        programs: ProgramsArg,
        schema: SchemaOpt = None,
        seed: SeedOpt = None,
    ) -> None:
        """
        Output only the suggested indexes, in .df syntax.

        Unlike 'analyze', this prints nothing but the ADD INDEX records,
        ready to load through the Data Dictionary.

        Examples:

            $ ablsense suggest src.zip -s sports.df > new-indexes.df
        """
        try:
            service = AnalysisService(seed=seed)
            report = service.analyze_paths(programs, schema or [])
        except AblSenseError as e:
            _report_error(e)
            raise typer.Exit(code=1)

        if report.schema_missing:
            error_console.print("[yellow]No DF file was loaded. Nothing to suggest.[/yellow]")
            raise typer.Exit(code=1)

        df_text = report.suggestions_df()
        if df_text:
            typer.echo(df_text)
