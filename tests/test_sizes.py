"""Tests for size aggregation and the shared walk primitive."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from treetool.sizes import aggregate_size
from treetool.walker import SkipRecorder, walk


class TestAggregateSize:
    """aggregate_size sums every node below a path."""

    def test_file_returns_its_length(self, tmp_path: Path) -> None:
        target = tmp_path / "data.bin"
        _ = target.write_bytes(b"x" * 1234)

        assert aggregate_size(target) == 1234

    def test_directory_equals_own_size_plus_children(self, reports_tree: Path) -> None:
        """A directory counts its own entry size on top of every child's aggregate."""
        children_total = sum(aggregate_size(child) for child in reports_tree.iterdir())

        assert aggregate_size(reports_tree) == reports_tree.lstat().st_size + children_total

    def test_accepts_string_paths(self, reports_tree: Path) -> None:
        assert aggregate_size(str(reports_tree)) == aggregate_size(reports_tree)

    def test_missing_path_is_zero_and_reported(self, tmp_path: Path) -> None:
        recorder = SkipRecorder()

        assert aggregate_size(tmp_path / "nope", on_error=recorder) == 0
        assert [entry.path for entry in recorder.skipped] == [str(tmp_path / "nope")]


class TestWalk:
    """walk yields nodes in pre-order without following symlinks."""

    def test_parents_come_before_children(self, reports_tree: Path) -> None:
        paths = [node.path for node in walk(reports_tree)]

        assert paths[0] == reports_tree
        assert set(paths) == {
            reports_tree,
            reports_tree / "x.txt",
            reports_tree / "sub",
            reports_tree / "sub" / "y.txt",
        }
        assert paths.index(reports_tree / "sub") < paths.index(reports_tree / "sub" / "y.txt")

    def test_prune_stops_descent(self, reports_tree: Path) -> None:
        paths = [
            node.path
            for node in walk(reports_tree, prune=lambda directory: directory.name == "sub")
        ]

        assert reports_tree / "sub" in paths
        assert reports_tree / "sub" / "y.txt" not in paths

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinked_directory_is_a_leaf(self, reports_tree: Path, tmp_path: Path) -> None:
        link = tmp_path / "link"
        os.symlink(reports_tree, link)

        nodes = list(walk(link))

        assert len(nodes) == 1
        assert not nodes[0].is_dir

    def test_duplicate_failures_are_recorded_once(self, tmp_path: Path) -> None:
        recorder = SkipRecorder()
        missing = tmp_path / "gone"

        recorder(missing, FileNotFoundError(2, "No such file or directory"))
        recorder(missing, FileNotFoundError(2, "No such file or directory"))

        assert len(recorder.skipped) == 1
        assert recorder.skipped[0].reason == "No such file or directory"
