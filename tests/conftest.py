"""Shared fixtures for treetool tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def reports_tree(tmp_path: Path) -> Path:
    """Create ``<tmp>/a/reports`` with ``x.txt`` (5 bytes) and ``sub/y.txt`` (3 bytes)."""
    reports = tmp_path / "a" / "reports"
    (reports / "sub").mkdir(parents=True)
    _ = (reports / "x.txt").write_bytes(b"hello")
    _ = (reports / "sub" / "y.txt").write_bytes(b"abc")
    return reports


@pytest.fixture
def mixed_dir(tmp_path: Path) -> Path:
    """Create a directory holding one 1,024,000-byte file and one subdirectory."""
    root = tmp_path / "mixed"
    (root / "child").mkdir(parents=True)
    _ = (root / "f.bin").write_bytes(b"\0" * 1024000)
    _ = (root / "child" / "inner.txt").write_bytes(b"12345678")
    return root


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of any .treetool.json or environment override."""
    monkeypatch.delenv("TREETOOL_MANIFEST_FORMAT", raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
