from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


@dataclass(slots=True)
class CopyTaskHandle:
    task_id: TaskID
    total: int


class CopyProgressUI:
    """Rich progress display with one row per file being copied."""

    def __init__(self, console: Console | None = None, *, transient: bool = True) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]copy"),
            TextColumn("{task.fields[path]}"),
            BarColumn(),
            DownloadColumn(binary_units=True),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            TextColumn("{task.fields[state]}"),
            console=console,
            transient=transient,
            expand=True,
        )

    def __enter__(self) -> "CopyProgressUI":
        self._progress.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._progress.__exit__(exc_type, exc, tb)

    def add_copy(self, *, path: str, total_bytes: int) -> CopyTaskHandle:
        task_id = self._progress.add_task(
            description=path,
            total=total_bytes,
            completed=0,
            path=path,
            state="copying",
        )
        return CopyTaskHandle(task_id=task_id, total=total_bytes)

    def advance(self, handle: CopyTaskHandle, delta: int) -> None:
        self._progress.update(handle.task_id, advance=max(0, delta))

    def complete(self, handle: CopyTaskHandle, total_bytes: int | None = None) -> None:
        # Completed tracks bytes written, which can differ from the size seen at stat time.
        completed = handle.total if total_bytes is None else total_bytes
        self._progress.update(handle.task_id, total=completed, completed=completed, state="done")
        self._progress.remove_task(handle.task_id)

    def fail(self, handle: CopyTaskHandle, message: str = "failed") -> None:
        self._progress.update(handle.task_id, state=message)
        self._progress.stop_task(handle.task_id)
