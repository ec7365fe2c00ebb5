from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from treetool.errors import FatalIOError
from treetool.filters import EntryFilter
from treetool.models import Entry, ListResult
from treetool.sizes import aggregate_size
from treetool.walker import SkipRecorder, WalkNode, walk

if TYPE_CHECKING:
    from rich.console import Console


logger = logging.getLogger(__name__)


def _open_root(directory: Path) -> list[Path]:
    try:
        return list(directory.iterdir())
    except OSError as exc:
        raise FatalIOError(f"Cannot read directory {directory}: {exc.strerror or exc}") from exc


def _discover_nodes(
    directory: Path,
    entry_filter: EntryFilter,
    *,
    recursive: bool,
    recorder: SkipRecorder,
) -> list[WalkNode]:
    children = _open_root(directory)
    if entry_filter.matches_nothing:
        return []

    if recursive:
        nodes = walk(directory, on_error=recorder)
    else:
        nodes = _stat_children(children, recorder)
    return [node for node in nodes if entry_filter.matches(node.is_dir)]


def _stat_children(children: list[Path], recorder: SkipRecorder) -> list[WalkNode]:
    nodes: list[WalkNode] = []
    for child in children:
        try:
            nodes.append(WalkNode(child, child.lstat()))
        except OSError as exc:
            recorder(child, exc)
    return nodes


def _entry_from_node(node: WalkNode, recorder: SkipRecorder) -> Entry:
    absolute = os.path.abspath(node.path)
    return Entry(
        path=absolute,
        size=aggregate_size(absolute, on_error=recorder),
        is_dir=node.is_dir,
    )


def list_entries(
    directory: Path | str,
    *,
    include_files: bool = True,
    include_dirs: bool = True,
    recursive: bool = False,
) -> ListResult:
    """List the children (or, with ``recursive``, the whole tree) of ``directory``.

    Entries keep directory-read order, which is platform dependent. Raises
    FatalIOError when ``directory`` itself cannot be read; failures below it
    end up in ``ListResult.skipped``.
    """
    directory = Path(directory)
    entry_filter = EntryFilter(include_files=include_files, include_dirs=include_dirs)
    recorder = SkipRecorder()
    nodes = _discover_nodes(directory, entry_filter, recursive=recursive, recorder=recorder)
    entries = [_entry_from_node(node, recorder) for node in nodes]
    logger.debug("Listed %d entries under %s", len(entries), directory)
    return ListResult(entries=entries, skipped=recorder.skipped)


def list_entries_with_progress(
    directory: Path | str,
    *,
    include_files: bool = True,
    include_dirs: bool = True,
    recursive: bool = False,
    console: "Console | None" = None,
) -> ListResult:
    from rich.progress import (
        BarColumn,
        MofNCompleteColumn,
        Progress,
        SpinnerColumn,
        TextColumn,
        TimeElapsedColumn,
    )

    def _shorten_path(path: str, max_len: int = 64) -> str:
        if len(path) <= max_len:
            return path
        keep = max_len - 3
        head = keep // 2
        tail = keep - head
        return f"{path[:head]}...{path[-tail:]}"

    directory = Path(directory)
    entry_filter = EntryFilter(include_files=include_files, include_dirs=include_dirs)
    recorder = SkipRecorder()

    if console is not None:
        with console.status("Discovering entries..."):
            nodes = _discover_nodes(directory, entry_filter, recursive=recursive, recorder=recorder)
    else:
        nodes = _discover_nodes(directory, entry_filter, recursive=recursive, recorder=recorder)

    if not nodes:
        return ListResult(entries=[], skipped=recorder.skipped)

    entries: list[Entry] = []
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold]Sizing"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        TextColumn("{task.fields[path]}"),
        console=console,
        transient=True,
        expand=True,
    ) as progress:
        task_id = progress.add_task("size", total=len(nodes), path="")
        for node in nodes:
            progress.update(task_id, path=_shorten_path(str(node.path)))
            entries.append(_entry_from_node(node, recorder))
            progress.advance(task_id, 1)

    return ListResult(entries=entries, skipped=recorder.skipped)
