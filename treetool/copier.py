from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterable

from treetool.errors import FatalIOError
from treetool.models import CopyResult
from treetool.progress_ui import CopyProgressUI
from treetool.walker import SkipRecorder, WalkNode, walk


logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024


def destination_for(node_path: Path, source_root: Path, destination_root: Path) -> Path:
    """Map a node under ``source_root`` to ``destination_root/<source name>/<rest>``.

    The suffix is taken relative to the walk root, so a directory sharing the
    source's name deeper in the tree does not shift the split point.
    """
    relative = node_path.relative_to(source_root)
    return destination_root / source_root.name / relative


def _copy_file(
    source: Path,
    destination: Path,
    *,
    chunk_size: int = COPY_CHUNK_SIZE,
    on_chunk: Callable[[int], None] | None = None,
) -> int:
    copied = 0
    with source.open("rb") as src, destination.open("wb") as dst:
        while True:
            chunk = src.read(chunk_size)
            if not chunk:
                break
            dst.write(chunk)
            copied += len(chunk)
            if on_chunk is not None:
                on_chunk(len(chunk))
    return copied


def _is_same_file(source: Path, destination: Path) -> bool:
    try:
        return os.path.samefile(source, destination)
    except OSError:
        return False


def _ensure_destination_root(destination_root: Path) -> None:
    try:
        destination_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FatalIOError(
            f"Cannot create destination {destination_root}: {exc.strerror or exc}"
        ) from exc


def _copy_node(
    node: WalkNode,
    destination: Path,
    result: CopyResult,
    recorder: SkipRecorder,
    progress: CopyProgressUI | None,
) -> None:
    if node.is_dir:
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            recorder(destination, exc)
            return
        result.created_dirs.append(str(destination))
        return

    if _is_same_file(node.path, destination):
        recorder(node.path, OSError(f"source and destination are the same file: {destination}"))
        return

    handle = None
    if progress is not None:
        handle = progress.add_copy(path=str(node.path), total_bytes=node.size)
    try:
        copied = _copy_file(
            node.path,
            destination,
            on_chunk=None if handle is None else lambda delta: progress.advance(handle, delta),
        )
    except OSError as exc:
        recorder(node.path, exc)
        if handle is not None:
            progress.fail(handle)
        return

    if handle is not None:
        progress.complete(handle, copied)
    result.copied_files.append(str(destination))
    result.bytes_copied += copied


def copy_tree(
    destination_root: Path | str,
    source_paths: Iterable[str | Path],
    *,
    progress: CopyProgressUI | None = None,
) -> CopyResult:
    """Copy each source directory to ``destination_root/<source name>``.

    Sources are handled independently and in order, so duplicates are copied
    again. Failures on individual nodes are collected in ``CopyResult.skipped``
    and nothing already copied is rolled back. Only a failure to create
    ``destination_root`` raises FatalIOError.
    """
    destination_root = Path(os.path.abspath(destination_root))
    _ensure_destination_root(destination_root)
    resolved_destination = destination_root.resolve()

    def _is_destination(directory: Path) -> bool:
        return directory.resolve() == resolved_destination

    result = CopyResult()
    recorder = SkipRecorder()
    for source in source_paths:
        source_root = Path(os.path.abspath(source))
        logger.debug("Copying %s into %s", source_root, destination_root)
        for node in walk(source_root, on_error=recorder, prune=_is_destination):
            destination = destination_for(node.path, source_root, destination_root)
            _copy_node(node, destination, result, recorder, progress)

    result.skipped = recorder.skipped
    return result
