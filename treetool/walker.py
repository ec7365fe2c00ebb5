from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from stat import S_ISDIR
from typing import Callable, Iterator

from treetool.models import SkippedEntry


logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Path, OSError], None]


@dataclass(slots=True)
class WalkNode:
    path: Path
    stat: os.stat_result

    @property
    def is_dir(self) -> bool:
        return S_ISDIR(self.stat.st_mode)

    @property
    def size(self) -> int:
        return self.stat.st_size


class SkipRecorder:
    """`on_error` callback that keeps one SkippedEntry per failing path."""

    def __init__(self) -> None:
        self._skipped: dict[str, SkippedEntry] = {}

    def __call__(self, path: Path, exc: OSError) -> None:
        key = str(path)
        if key in self._skipped:
            return
        reason = exc.strerror or str(exc)
        logger.debug("Skipping %s: %s", key, reason)
        self._skipped[key] = SkippedEntry(path=key, reason=reason)

    @property
    def skipped(self) -> list[SkippedEntry]:
        return list(self._skipped.values())


def _report(on_error: ErrorCallback | None, path: Path, exc: OSError) -> None:
    if on_error is not None:
        on_error(path, exc)


def walk(
    root: Path,
    *,
    on_error: ErrorCallback | None = None,
    prune: Callable[[Path], bool] | None = None,
) -> Iterator[WalkNode]:
    """Yield ``root`` and everything below it in pre-order.

    Nodes are stat'ed with ``lstat`` so symlinks are reported as leaves. Children
    come in directory-read order. Any node that cannot be stat'ed or listed is
    passed to ``on_error`` and skipped without stopping the walk.
    """
    try:
        root_stat = root.lstat()
    except OSError as exc:
        _report(on_error, root, exc)
        return

    node = WalkNode(root, root_stat)
    yield node
    if not node.is_dir:
        return

    # One iterator per open directory, innermost last.
    stack: list[Iterator[Path]] = []
    children = _read_children(root, on_error, prune)
    if children is not None:
        stack.append(iter(children))

    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        try:
            child_stat = child.lstat()
        except OSError as exc:
            _report(on_error, child, exc)
            continue

        node = WalkNode(child, child_stat)
        yield node
        if node.is_dir:
            grandchildren = _read_children(child, on_error, prune)
            if grandchildren is not None:
                stack.append(iter(grandchildren))


def _read_children(
    directory: Path,
    on_error: ErrorCallback | None,
    prune: Callable[[Path], bool] | None,
) -> list[Path] | None:
    if prune is not None and prune(directory):
        return None
    try:
        return list(directory.iterdir())
    except OSError as exc:
        _report(on_error, directory, exc)
        return None
