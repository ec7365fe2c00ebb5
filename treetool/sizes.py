from __future__ import annotations

from pathlib import Path

from treetool.walker import ErrorCallback, walk


def aggregate_size(path: Path | str, *, on_error: ErrorCallback | None = None) -> int:
    """Best-effort byte total of ``path`` and everything below it.

    Directories count their own entry size as reported by ``lstat`` on top of
    their descendants. Unreadable nodes go to ``on_error`` and count as zero.
    """
    return sum(node.size for node in walk(Path(path), on_error=on_error))
