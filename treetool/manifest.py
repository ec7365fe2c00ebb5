"""Manifest encoding shared by the list writer and the copy reader.

Two line formats are supported. ``text`` is the human readable default::

    /abs/path - 12.34MB

and is only reversible while no path contains ``" - "``. ``jsonl`` writes one
JSON object per line and round-trips any path.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Protocol

from treetool.errors import FatalInputError, FatalIOError, ManifestFormatError
from treetool.models import BYTES_PER_MB, Entry


logger = logging.getLogger(__name__)

SEPARATOR = " - "
SIZE_UNIT = "MB"


class ManifestCodec(Protocol):
    name: str

    def encode(self, entry: Entry) -> str: ...

    def decode(self, line: str) -> str | None: ...


def format_size(size: int) -> str:
    return f"{size / BYTES_PER_MB:.2f}{SIZE_UNIT}"


class TextManifestCodec:
    name = "text"

    def encode(self, entry: Entry) -> str:
        return f"{entry.path}{SEPARATOR}{format_size(entry.size)}\n"

    def decode(self, line: str) -> str | None:
        trimmed = line.strip()
        if not trimmed:
            return None
        # The size never contains "-", so the last one belongs to the separator.
        # At least one path character must precede " - ".
        dash = trimmed.rfind("-")
        if dash < 2:
            raise ValueError("missing path or size separator")
        return trimmed[: dash - 1]


class JsonLinesManifestCodec:
    name = "jsonl"

    def encode(self, entry: Entry) -> str:
        payload = {"path": entry.path, "size": entry.size, "is_dir": entry.is_dir}
        return json.dumps(payload, ensure_ascii=False) + "\n"

    def decode(self, line: str) -> str | None:
        if not line.strip():
            return None
        data = json.loads(line)
        if not isinstance(data, dict) or not isinstance(data.get("path"), str):
            raise ValueError("expected an object with a string 'path'")
        return data["path"]


TEXT = TextManifestCodec()
JSONL = JsonLinesManifestCodec()
CODECS: dict[str, ManifestCodec] = {TEXT.name: TEXT, JSONL.name: JSONL}


def get_codec(name: str) -> ManifestCodec:
    normalized = (name or "").strip().lower()
    try:
        return CODECS[normalized]
    except KeyError:
        choices = ", ".join(sorted(CODECS))
        raise FatalInputError(f"Unknown manifest format {name!r}. Use one of: {choices}.") from None


def write_manifest(
    manifest_path: Path | str,
    entries: Iterable[Entry],
    *,
    codec: ManifestCodec = TEXT,
) -> int:
    """Append one line per entry to ``manifest_path`` and return the line count."""
    path = Path(manifest_path)
    written = 0
    try:
        with path.open("a", encoding="utf-8", errors="surrogateescape") as fh:
            for entry in entries:
                fh.write(codec.encode(entry))
                written += 1
    except OSError as exc:
        raise FatalIOError(f"Cannot write manifest {path}: {exc.strerror or exc}") from exc
    logger.debug("Appended %d %s line(s) to %s", written, codec.name, path)
    return written


def read_manifest(manifest_path: Path | str, *, codec: ManifestCodec = TEXT) -> list[str]:
    """Return the paths recorded in ``manifest_path``, in file order."""
    path = Path(manifest_path)
    paths: list[str] = []
    try:
        with path.open("r", encoding="utf-8", errors="surrogateescape") as fh:
            for line_number, line in enumerate(fh, start=1):
                try:
                    decoded = codec.decode(line)
                except ValueError as exc:
                    raise ManifestFormatError(str(path), line_number, line.rstrip("\n")) from exc
                if decoded is not None:
                    paths.append(decoded)
    except OSError as exc:
        raise FatalIOError(f"Cannot read manifest {path}: {exc.strerror or exc}") from exc
    return paths
