from __future__ import annotations


class TreeToolError(Exception):
    """Base class for errors that abort a whole list or copy run."""


class FatalInputError(TreeToolError):
    """Invalid arguments, settings, or a required root path that does not exist."""


class ManifestFormatError(FatalInputError):
    def __init__(self, manifest_path: str, line_number: int, line: str) -> None:
        super().__init__(
            f"Unrecognized manifest line {line_number} in {manifest_path}: {line!r}"
        )
        self.manifest_path = manifest_path
        self.line_number = line_number
        self.line = line


class FatalIOError(TreeToolError):
    """Root-level I/O failure: the list root, the manifest, or the copy destination."""
