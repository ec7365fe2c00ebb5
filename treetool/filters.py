from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class EntryFilter:
    include_files: bool = True
    include_dirs: bool = True

    def matches(self, is_dir: bool) -> bool:
        if is_dir:
            return self.include_dirs
        return self.include_files

    @property
    def matches_nothing(self) -> bool:
        return not (self.include_files or self.include_dirs)


def build_entry_filter(*, no_file: bool = False, no_dir: bool = False) -> EntryFilter:
    return EntryFilter(include_files=not no_file, include_dirs=not no_dir)
