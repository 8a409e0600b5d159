# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for filesystem utilities: atomic writes and directory helpers.

Atomic writes are tested by verifying that the target file either has the full
new content or the old one. There should never be a partially written file.
"""

from pathlib import Path

from sympi.utils.filesystem import atomic_write, ensure_directory, reset_directory


class TestAtomicWrite:
    def test_writes_content_successfully(self, tmp_path: Path) -> None:
        target = tmp_path / "output.txt"
        atomic_write(target, "hello world")
        assert target.read_text(encoding="utf-8") == "hello world"

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "deep" / "output.txt"
        atomic_write(target, "nested content")
        assert target.read_text(encoding="utf-8") == "nested content"

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "overwrite.txt"
        atomic_write(target, "first version")
        atomic_write(target, "second version")
        assert target.read_text(encoding="utf-8") == "second version"

    def test_no_leftover_temp_files_on_success(self, tmp_path: Path) -> None:
        atomic_write(tmp_path / "clean.txt", "clean write")
        assert list(tmp_path.glob(".sympi_tmp_*")) == []


class TestDirectories:
    def test_reset_directory_empties_it(self, tmp_path: Path) -> None:
        scratch = tmp_path / "scratch"
        (scratch / "build").mkdir(parents=True)
        (scratch / "build" / "mpi.sif").write_text("image", encoding="utf-8")

        reset_directory(scratch)
        assert scratch.is_dir()
        assert list(scratch.iterdir()) == []

    def test_reset_directory_replaces_file(self, tmp_path: Path) -> None:
        target = tmp_path / "scratch"
        target.write_text("not a dir", encoding="utf-8")
        assert reset_directory(target).is_dir()

    def test_ensure_directory_keeps_content(self, tmp_path: Path) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        (scratch / "keep.txt").write_text("x", encoding="utf-8")

        assert ensure_directory(scratch) == scratch
        assert (scratch / "keep.txt").exists()
