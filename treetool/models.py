from __future__ import annotations

from dataclasses import dataclass, field


BYTES_PER_MB = 1024000


@dataclass(slots=True)
class Entry:
    path: str
    size: int
    is_dir: bool


@dataclass(slots=True)
class SkippedEntry:
    path: str
    reason: str


@dataclass(slots=True)
class ListResult:
    entries: list[Entry] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped


@dataclass(slots=True)
class CopyResult:
    copied_files: list[str] = field(default_factory=list)
    created_dirs: list[str] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)
    bytes_copied: int = 0

    @property
    def complete(self) -> bool:
        return not self.skipped
