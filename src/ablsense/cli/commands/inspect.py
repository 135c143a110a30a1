"""Inspection commands: statements, tables."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from ablsense.config import get_config
from ablsense.exceptions import AblSenseError
from ablsense.extractor.extractor import analyze_source
from ablsense.extractor.models import Statement
from ablsense.inputs import load_program_texts
from ablsense.schema.catalog import SchemaCatalog
from ablsense.schema.parser import parse_df_file

console = Console()
error_console = Console(stderr=True)


def _access(statement: Statement) -> str:
    if statement.is_existence_check:
        return "exists"
    return "scan" if statement.kind.is_scan else "seek"


def register(app: typer.Typer) -> None:
    """Register inspection commands on the given Typer app."""

    @app.command()
    def statements(
        programs: Annotated[
            list[Path],
            typer.Argument(
                help="ABL sources or .zip archives of them",
                exists=True,
                readable=True,
                resolve_path=True,
            ),
        ],
    ) -> None:
        """List the FOR/FIND/CAN-FIND statements found in ABL sources."""
        try:
            blobs = load_program_texts(programs)
        except AblSenseError as e:
            error_console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(code=1)

        table = Table()
        table.add_column("File", style="cyan")
        table.add_column("Line", justify="right")
        table.add_column("Kind")
        table.add_column("Access")
        table.add_column("Table", style="bold")
        table.add_column("CAN-FIND fields")

        total = 0
        for blob in blobs:
            analysis = analyze_source(blob.name, blob.text)
            for st in analysis.statements:
                table.add_row(
                    Path(blob.name).name,
                    str(st.line),
                    st.kind.value,
                    _access(st),
                    st.table,
                    ", ".join(st.explicit_filter_fields),
                )
                total += 1

        console.print(table)
        console.print(f"\n[dim]{total} statement(s) in {len(blobs)} file(s)[/dim]")

    @app.command()
    def tables(
        schemas: Annotated[
            list[Path],
            typer.Argument(
                help="Data Dictionary exports (.df), in merge order",
                exists=True,
                readable=True,
                resolve_path=True,
            ),
        ],
    ) -> None:
        """List the tables and indexes of merged .df exports."""
        config = get_config()
        try:
            catalog = SchemaCatalog.merge(
                parse_df_file(path, config.encoding) for path in schemas
            )
        except AblSenseError as e:
            error_console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(code=1)

        table = Table()
        table.add_column("Table", style="cyan")
        table.add_column("Fields", justify="right")
        table.add_column("Index")
        table.add_column("Primary")
        table.add_column("Key fields")

        for tbl in catalog.tables:
            if not tbl.indexes:
                table.add_row(tbl.name, str(len(tbl.fields)), "[dim]-[/dim]", "", "")
                continue
            primary = tbl.primary_index
            for n, index in enumerate(tbl.indexes):
                table.add_row(
                    tbl.name if n == 0 else "",
                    str(len(tbl.fields)) if n == 0 else "",
                    index.name,
                    "[green]yes[/green]" if index is primary else "",
                    ", ".join(index.fields),
                )

        console.print(table)
        console.print(
            f"\n[dim]{len(catalog)} table(s), {catalog.index_count} index(es)[/dim]"
        )
