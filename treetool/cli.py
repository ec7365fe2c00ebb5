from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from treetool.config import CopyConfig, ListConfig, load_settings
from treetool.copier import copy_tree
from treetool.errors import TreeToolError
from treetool.filters import build_entry_filter
from treetool.lister import list_entries, list_entries_with_progress
from treetool.logs import configure_logging
from treetool.manifest import read_manifest, write_manifest
from treetool.models import SkippedEntry
from treetool.progress_ui import CopyProgressUI


app = typer.Typer(help="treetool CLI", add_completion=False)
console = Console()
err_console = Console(stderr=True)


def _print_error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")


def _exit_with_usage(ctx: typer.Context) -> None:
    typer.echo(ctx.get_help())
    raise typer.Exit(code=1)


def _render_skipped(skipped: list[SkippedEntry]) -> None:
    if not skipped:
        return

    table = Table(title=f"Skipped ({len(skipped)})")
    table.add_column("Path")
    table.add_column("Reason")
    for entry in skipped:
        table.add_row(escape(entry.path), escape(entry.reason))
    console.print(table)


def _strict_exit_code(skipped: list[SkippedEntry], strict: bool) -> int:
    if strict and skipped:
        console.print(f"[red]Strict mode:[/red] {len(skipped)} skipped entry(ies).")
        return 1
    return 0


def _run_list(config: ListConfig, *, strict: bool, show_progress: bool) -> int:
    try:
        codec = config.codec
        if show_progress:
            result = list_entries_with_progress(
                config.directory_path,
                include_files=config.include_files,
                include_dirs=config.include_dirs,
                recursive=config.recursive,
                console=console,
            )
        else:
            result = list_entries(
                config.directory_path,
                include_files=config.include_files,
                include_dirs=config.include_dirs,
                recursive=config.recursive,
            )
        written = write_manifest(config.output_path, result.entries, codec=codec)
    except KeyboardInterrupt:
        console.print("[yellow]List interrupted.[/yellow] The manifest may be incomplete.")
        return 130
    except TreeToolError as exc:
        _print_error(str(exc))
        return 1

    _render_skipped(result.skipped)
    console.print(
        f"[green]Listed {written} entry(ies)[/green] "
        f"into {escape(str(config.output_path))} ({codec.name})"
    )
    return _strict_exit_code(result.skipped, strict)


def _run_copy(config: CopyConfig, *, strict: bool, show_progress: bool) -> int:
    try:
        sources = read_manifest(config.input_path, codec=config.codec)
        if show_progress:
            with CopyProgressUI(console) as progress:
                result = copy_tree(config.destination_path, sources, progress=progress)
        else:
            result = copy_tree(config.destination_path, sources)
    except KeyboardInterrupt:
        console.print("[yellow]Copy interrupted.[/yellow] The destination may be partially written.")
        return 130
    except TreeToolError as exc:
        _print_error(str(exc))
        return 1

    _render_skipped(result.skipped)
    console.print(
        f"[green]Copied {len(result.copied_files)} file(s)[/green] and "
        f"{len(result.created_dirs)} dir(s), {result.bytes_copied} bytes "
        f"from {len(sources)} source(s) into {escape(str(config.destination_path))}"
    )
    return _strict_exit_code(result.skipped, strict)


@app.command()
def main(
    ctx: typer.Context,
    list_mode: bool = typer.Option(False, "--list", help="List operation."),
    copy_mode: bool = typer.Option(False, "--copy", help="Copy operation."),
    directory: str | None = typer.Option(
        None,
        "--directory",
        help="Directory to list, or destination to copy into (mandatory).",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        help="Manifest to append entries to (list, mandatory).",
    ),
    input_file: str | None = typer.Option(
        None,
        "--input",
        help="Manifest naming the directories to copy (copy, mandatory).",
    ),
    no_dir: bool = typer.Option(False, "--nodir", help="Don't include directories (list)."),
    no_file: bool = typer.Option(False, "--nofile", help="Don't include files (list)."),
    recursive: bool = typer.Option(False, "--recursive", help="Include every descendant (list)."),
    manifest_format: str | None = typer.Option(
        None,
        "--format",
        help="Manifest format: text or jsonl. Defaults to .treetool.json or text.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with code 1 when any entry had to be skipped.",
    ),
    progress: bool = typer.Option(
        True,
        "--progress/--no-progress",
        help="Show Rich progress while sizing or copying.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log skipped entries."),
) -> None:
    """List directory entries with their sizes, or copy the directories named in a manifest."""
    configure_logging(verbose, console=err_console)

    if list_mode == copy_mode:
        _exit_with_usage(ctx)

    if list_mode:
        if not output or not directory:
            _exit_with_usage(ctx)
        if not Path(directory).is_dir():
            _print_error(f"{directory} does not exist or is not a directory")
            raise typer.Exit(code=1)
    else:
        if not input_file or not directory:
            _exit_with_usage(ctx)
        if not Path(input_file).exists():
            _print_error(f"{input_file} does not exist")
            raise typer.Exit(code=1)

    try:
        settings = load_settings()
    except TreeToolError as exc:
        _print_error(str(exc))
        raise typer.Exit(code=1)

    fmt = manifest_format or settings.manifest_format
    strict = strict or settings.strict

    if list_mode:
        entry_filter = build_entry_filter(no_file=no_file, no_dir=no_dir)
        list_config = ListConfig(
            directory=directory,
            output=output,
            include_files=entry_filter.include_files,
            include_dirs=entry_filter.include_dirs,
            recursive=recursive,
            manifest_format=fmt,
        )
        code = _run_list(list_config, strict=strict, show_progress=progress)
    else:
        copy_config = CopyConfig(destination=directory, input=input_file, manifest_format=fmt)
        code = _run_copy(copy_config, strict=strict, show_progress=progress)
    raise typer.Exit(code=code)
