# src/circuitrag/cli/app.py
"""Command-line interface for circuitrag.

This module provides a thin Typer wrapper around the commands layer.
Each command:
1. Parses args (via Typer)
2. Creates progress callbacks (for Rich display)
3. Calls commands module functions
4. Renders results with Rich
"""

from __future__ import annotations

import logging
import os

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from circuitrag import __version__
from circuitrag.commands import CommandStage, ProgressUpdate, delete, ingest, query, status
from circuitrag.commands.base import ConfirmRequest, FileIngestResult, IngestResult
from circuitrag.config import load_env_file
from circuitrag.models import DocumentRole, DocumentType

app = typer.Typer(
    name="circuitrag",
    help="circuitrag - Question answering over circuit-board manuals and datasheets.",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"circuitrag {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log pipeline decisions (retrieval, fallbacks, provider calls).",
    ),
) -> None:
    """circuitrag - RAG support assistant for circuit-board maintenance."""
    load_env_file()
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# Stage names for progress display
STAGE_NAMES = {
    CommandStage.CHUNKING: "Chunking",
    CommandStage.EMBEDDING: "Embedding",
    CommandStage.INDEXING: "Indexing",
    CommandStage.LOADING: "Loading",
    CommandStage.PROCESSING: "Processing",
    CommandStage.COMPLETE: "Complete",
}


@app.command(name="ingest")
def ingest_cmd(
    path: str = typer.Argument(..., help="File or directory to ingest"),
    document_type: DocumentType = typer.Option(
        None,
        "--type",
        "-t",
        help="Document type (default: chosen from the file extension)",
    ),
    role: DocumentRole = typer.Option(
        DocumentRole.REFERENCE,
        "--role",
        help="'instruction' documents are always included ahead of reference material",
    ),
    language: str = typer.Option(
        None,
        "--language",
        "-l",
        help="Document language (pt or en)",
    ),
    data_dir: str = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: from settings)",
    ),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
    no_progress: bool = typer.Option(
        False,
        "--no-progress",
        help="Disable progress bars",
    ),
) -> None:
    """Ingest a file or directory into the training corpus."""
    show_progress = not plain and not no_progress and console.is_terminal
    options = {
        "document_type": document_type,
        "role": role,
        "language": language,
        "data_dir": data_dir,
        "config_path": config_file,
    }

    if show_progress:
        result = _ingest_with_progress(path, options)
        _render_ingest_result(result, plain=False)
    else:
        _ingest_simple(path, options, plain)


def _ingest_with_progress(path: str, options: dict) -> IngestResult:
    """Ingest with Rich progress bars."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.fields[stage]:>12}", justify="right"),
        BarColumn(bar_width=20),
        TextColumn("{task.fields[progress_text]}", style="cyan"),
        TextColumn("{task.description}", style="dim"),
        console=console,
    ) as progress:
        files_task = progress.add_task("", total=None, stage="Files", progress_text="")
        stage_task = progress.add_task("", total=100, stage="", visible=False, progress_text="")

        total_files = 0

        def on_file_start(filepath: str, index: int, total: int) -> None:
            nonlocal total_files
            total_files = total
            progress.update(
                files_task,
                description=os.path.basename(filepath),
                completed=index,
                total=total,
                progress_text=f"{index + 1}/{total}",
            )

        def on_progress(update: ProgressUpdate) -> None:
            stage_name = STAGE_NAMES.get(update.stage, update.stage.value)
            if update.total > 1:
                progress.update(
                    stage_task,
                    visible=True,
                    stage=stage_name,
                    progress_text=f"{update.percentage}%",
                    description=f"({update.current}/{update.total})",
                    total=update.total,
                    completed=update.current,
                )
            else:
                progress.update(
                    stage_task,
                    visible=True,
                    stage=stage_name,
                    progress_text="",
                    description=update.message or "",
                    total=None,
                )

        def on_file_complete(result: FileIngestResult) -> None:
            progress.update(stage_task, visible=False)

        result = ingest.ingest(
            path=path,
            on_progress=on_progress,
            on_file_start=on_file_start,
            on_file_complete=on_file_complete,
            **options,
        )

        progress.update(files_task, completed=total_files, progress_text="Done", description="")

    return result


def _ingest_simple(path: str, options: dict, plain: bool) -> None:
    """Ingest with simple console output."""

    def on_file_complete(file_result: FileIngestResult) -> None:
        if plain:
            return
        if file_result.skipped:
            console.print(f"[dim]Skipped {file_result.filepath}: {file_result.reason}[/dim]")
        elif file_result.status == "error":
            console.print(f"[red]Failed {file_result.filepath}: {file_result.reason}[/red]")
        else:
            console.print(f"[green]Ingested {file_result.filepath}[/green]")

    result = ingest.ingest(path=path, on_file_complete=on_file_complete, **options)
    _render_ingest_result(result, plain=plain)


def _render_ingest_result(result: IngestResult, plain: bool) -> None:
    """Render ingest result to console."""
    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    if result.error and result.files_processed == 0 and result.files_skipped == 0:
        console.print(result.error if plain else f"[yellow]{result.error}[/yellow]")
        return

    summary = f"Ingested {result.files_processed} files ({result.total_chunks} chunks)"
    embedded = f"Embedded {result.total_embedded} chunks"
    if plain:
        console.print(summary)
        console.print(embedded)
        if result.files_skipped > 0:
            console.print(f"Skipped {result.files_skipped} unchanged files")
        for filepath, error in result.errors:
            console.print(f"Failed {filepath}: {error}")
    else:
        console.print()
        console.print(f"[green]{summary}[/green]")
        console.print(f"[green]{embedded}[/green]")
        if result.files_skipped > 0:
            console.print(f"[dim]Skipped {result.files_skipped} unchanged files[/dim]")
        for filepath, error in result.errors:
            console.print(f"[red]Failed {filepath}: {error}[/red]")


@app.command(name="query")
def query_cmd(
    question: str = typer.Argument(..., help="Question to ask"),
    language: str = typer.Option(
        None,
        "--language",
        "-l",
        help="Answer language (pt or en)",
    ),
    limit: int = typer.Option(
        None,
        "--limit",
        "-k",
        help="Maximum number of retrieved chunks",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Force extraction from every trained document",
    ),
    no_external: bool = typer.Option(
        False,
        "--no-external",
        help="Never consult external sources",
    ),
    show_sources: bool = typer.Option(
        False,
        "--sources",
        "-s",
        help="Show the excerpts the answer was built from",
    ),
    data_dir: str = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: from settings)",
    ),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Ask a question about the ingested documents."""
    result = query.query(
        question=question,
        data_dir=data_dir,
        config_path=config_file,
        language=language,
        limit=limit,
        force_extraction=force,
        use_external_search=not no_external,
    )

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    answer = result.answer or ""
    if plain:
        console.print(f"Answer: {answer}")
    else:
        title = "Answer (with external sources)" if result.used_external_search else "Answer"
        console.print(Panel(Markdown(answer), title=title, border_style="green"))

    if not show_sources or not result.sources:
        return

    console.print()
    console.print("Sources:" if plain else "[bold]Sources:[/bold]")
    for i, source in enumerate(result.sources, 1):
        preview = source.content[:100].replace("\n", " ")
        if len(source.content) > 100:
            preview += "..."
        if plain:
            console.print(
                f"  [{i}] {source.document_name} (score: {source.score:.2f}, {source.origin})"
            )
            console.print(f"      {preview}")
        else:
            console.print(
                f"  [{i}] [cyan]{source.document_name}[/cyan] "
                f"[dim](score: {source.score:.2f}, {source.origin})[/dim]"
            )
            console.print(f"      [dim]{preview}[/dim]")


@app.command(name="status")
def status_cmd(
    data_dir: str = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: from settings)",
    ),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    detailed: bool = typer.Option(
        False,
        "--detailed",
        help="List every document with its status",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Show corpus statistics."""

    result = status.status(data_dir=data_dir, config_path=config_file, detailed=detailed)

    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    if result.total_documents == 0:
        if plain:
            console.print("No documents found.")
        else:
            console.print("[dim]No documents found. Run 'circuitrag ingest' first.[/dim]")
        raise typer.Exit(0)

    rows = [
        ("Data directory", result.data_dir or "-"),
        ("Documents", str(result.total_documents)),
        ("Trained documents", str(result.trained_documents)),
        ("Chunks", str(result.total_chunks)),
        ("Indexed vectors", str(result.indexed_vectors)),
        ("Learned topics", str(result.learned_topics)),
        ("Tokens used", str(result.total_tokens)),
    ]

    if plain:
        console.print("Corpus Status:")
        for name, value in rows:
            console.print(f"  {name}: {value}")
        if detailed and result.documents:
            console.print()
            console.print("Documents:")
            for doc in result.documents:
                console.print(
                    f"  {doc.document_id} {doc.name} ({doc.status}) {doc.chunk_count} chunks"
                )
        return

    table = Table(title="Corpus Status")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)

    if detailed and result.documents:
        console.print()
        detail_table = Table(title="Documents")
        detail_table.add_column("ID", style="dim")
        detail_table.add_column("Name", style="cyan")
        detail_table.add_column("Type")
        detail_table.add_column("Role")
        detail_table.add_column("Status")
        detail_table.add_column("Chunks", justify="right", style="green")
        for doc in result.documents:
            detail_table.add_row(
                doc.document_id,
                doc.name,
                doc.document_type,
                doc.role or "-",
                doc.status,
                str(doc.chunk_count),
            )
        console.print(detail_table)


@app.command(name="delete")
def delete_cmd(
    document_id: str = typer.Argument(..., help="ID of the document to delete"),
    data_dir: str = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory (default: from settings)",
    ),
    config_file: str = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Skip confirmation prompt",
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Plain output (no colors/formatting)",
    ),
) -> None:
    """Delete a document and all its chunks from the database."""

    def cli_confirm(request: ConfirmRequest) -> bool:
        """CLI confirmation callback using typer.confirm."""
        console.print(request.message)
        if request.details:
            console.print(request.details if plain else f"[yellow]{request.details}[/yellow]")
        return typer.confirm("Continue?")

    on_confirm = None if force else cli_confirm

    result = delete.delete(
        document_id=document_id,
        data_dir=data_dir,
        config_path=config_file,
        on_confirm=on_confirm,
    )

    if not result.success:
        # Cancellation is not an error
        if result.error == "Cancelled.":
            console.print("Cancelled.")
            raise typer.Exit(0)
        console.print(f"Error: {result.error}" if plain else f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    message = f"Deleted '{result.name}' ({result.chunks_deleted} chunks)"
    console.print(message if plain else f"[green]{message}[/green]")
