from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from treetool.errors import FatalInputError
from treetool.manifest import CODECS, ManifestCodec, get_codec


SETTINGS_FILENAME = ".treetool.json"
FORMAT_ENV_VAR = "TREETOOL_MANIFEST_FORMAT"
DEFAULT_MANIFEST_FORMAT = "text"


@dataclass(slots=True)
class TreeToolSettings:
    manifest_format: str = DEFAULT_MANIFEST_FORMAT
    strict: bool = False


@dataclass(slots=True)
class ListConfig:
    directory: str
    output: str
    include_files: bool = True
    include_dirs: bool = True
    recursive: bool = False
    manifest_format: str = DEFAULT_MANIFEST_FORMAT

    @property
    def directory_path(self) -> Path:
        return Path(self.directory)

    @property
    def output_path(self) -> Path:
        return Path(self.output)

    @property
    def codec(self) -> ManifestCodec:
        return get_codec(self.manifest_format)


@dataclass(slots=True)
class CopyConfig:
    destination: str
    input: str
    manifest_format: str = DEFAULT_MANIFEST_FORMAT

    @property
    def destination_path(self) -> Path:
        return Path(self.destination)

    @property
    def input_path(self) -> Path:
        return Path(self.input)

    @property
    def codec(self) -> ManifestCodec:
        return get_codec(self.manifest_format)


def settings_path(base_dir: Path | None = None) -> Path:
    return (base_dir or Path.cwd()).resolve() / SETTINGS_FILENAME


def _require_bool(data: dict, key: str, default: bool, path: Path) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise FatalInputError(f"Setting `{key}` in {path} must be true or false.")
    return value


def _normalize_format(value: object, source: str) -> str:
    normalized = str(value).strip().lower()
    if normalized not in CODECS:
        choices = ", ".join(sorted(CODECS))
        raise FatalInputError(f"Unknown manifest format {value!r} in {source}. Use one of: {choices}.")
    return normalized


def load_settings(base_dir: Path | None = None) -> TreeToolSettings:
    """Read ``.treetool.json`` from ``base_dir`` (default: cwd), falling back to defaults.

    ``TREETOOL_MANIFEST_FORMAT`` overrides the file's ``manifest_format``.
    """
    path = settings_path(base_dir)
    data: dict = {}
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            raise FatalInputError(f"Cannot load settings from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise FatalInputError(f"Settings file {path} must contain a JSON object.")

    manifest_format = _normalize_format(
        data.get("manifest_format", DEFAULT_MANIFEST_FORMAT), str(path)
    )
    env_format = os.getenv(FORMAT_ENV_VAR, "").strip()
    if env_format:
        manifest_format = _normalize_format(env_format, FORMAT_ENV_VAR)

    return TreeToolSettings(
        manifest_format=manifest_format,
        strict=_require_bool(data, "strict", False, path),
    )
