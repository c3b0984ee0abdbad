# Tests for deez.sync.status
# Classification of entries between root and Home

import os
import sys
from pathlib import Path

import pytest

from deez.errors import IoFailure, PathTypeClash
from deez.sync.status import StateClassifier, SyncStatus, classify
from deez.sync.walk import EntryKind, RelativeEntry, Walker

symlinks = pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")


class TestSyncStatus:
    """Tests for status symbols."""

    def test_symbols(self):
        assert SyncStatus.IN_SYNC.symbol == "S"
        assert SyncStatus.MODIFIED.symbol == "M"
        assert SyncStatus.MISSING.symbol == "!"


class TestClassify:
    """Tests for classify()."""

    def test_missing(self, root_dir: Path, temp_home: Path):
        result = classify(RelativeEntry(".gitconfig"), root_dir, temp_home)
        assert result.status == SyncStatus.MISSING
        assert not result.target_is_symlink

    def test_in_sync(self, root_dir: Path, temp_home: Path):
        (temp_home / ".bashrc").write_text("export EDITOR=vim\n", encoding="utf-8")
        assert classify(RelativeEntry(".bashrc"), root_dir, temp_home).status == SyncStatus.IN_SYNC

    def test_modified(self, root_dir: Path, temp_home: Path):
        (temp_home / ".bashrc").write_text("export EDITOR=nano\n", encoding="utf-8")
        assert classify(RelativeEntry(".bashrc"), root_dir, temp_home).status == SyncStatus.MODIFIED

    def test_modified_same_size(self, root_dir: Path, temp_home: Path):
        (temp_home / ".bashrc").write_text("export EDITOR=vi \n", encoding="utf-8")
        assert classify(RelativeEntry(".bashrc"), root_dir, temp_home).status == SyncStatus.MODIFIED

    def test_directory_in_home_clashes(self, root_dir: Path, temp_home: Path):
        (temp_home / ".bashrc").mkdir()
        with pytest.raises(PathTypeClash):
            classify(RelativeEntry(".bashrc"), root_dir, temp_home)

    def test_file_in_place_of_parent_is_missing(self, root_dir: Path, temp_home: Path):
        (temp_home / ".config").write_text("not a dir", encoding="utf-8")
        result = classify(RelativeEntry(".config/nvim/init.lua"), root_dir, temp_home)
        assert result.status == SyncStatus.MISSING

    @symlinks
    def test_home_symlink_to_root_is_in_sync(self, root_dir: Path, temp_home: Path):
        os.symlink(root_dir / ".bashrc", temp_home / ".bashrc")
        result = classify(RelativeEntry(".bashrc"), root_dir, temp_home)
        assert result.status == SyncStatus.IN_SYNC
        assert result.target_is_symlink

    @symlinks
    def test_dangling_home_symlink_is_missing(self, root_dir: Path, temp_home: Path):
        os.symlink(temp_home / "nowhere", temp_home / ".bashrc")
        result = classify(RelativeEntry(".bashrc"), root_dir, temp_home)
        assert result.status == SyncStatus.MISSING
        assert result.target_is_symlink

    @symlinks
    def test_identical_link_text_is_in_sync(self, make_root, temp_home: Path):
        root = make_root()
        os.symlink("nowhere", root / ".link")
        os.symlink("nowhere", temp_home / ".link")
        entry = RelativeEntry(".link", EntryKind.SYMLINK)
        assert classify(entry, root, temp_home).status == SyncStatus.IN_SYNC

    @symlinks
    def test_dangling_root_symlink_raises(self, make_root, temp_home: Path):
        root = make_root()
        os.symlink("nowhere", root / ".link")
        (temp_home / ".link").write_text("x", encoding="utf-8")
        with pytest.raises(IoFailure, match="dangling"):
            classify(RelativeEntry(".link", EntryKind.SYMLINK), root, temp_home)


class TestStateClassifier:
    """Tests for whole-root reports."""

    def test_totals_match_entries(self, root_dir: Path, temp_home: Path):
        (temp_home / ".bashrc").write_text("export EDITOR=vim\n", encoding="utf-8")
        (temp_home / ".gitconfig").write_text("changed\n", encoding="utf-8")

        entries = list(Walker(root_dir))
        report = StateClassifier(root_dir, temp_home).report(entries)

        assert report.total == len(entries) == 3
        assert report.in_sync + report.modified + report.missing == report.total
        assert (report.in_sync, report.modified, report.missing) == (1, 1, 1)
        assert [s.path for s in report.entries] == [e.path for e in entries]

    def test_clean_report(self, make_root, temp_home: Path):
        root = make_root({".vimrc": "set nu\n"})
        (temp_home / ".vimrc").write_text("set nu\n", encoding="utf-8")
        report = StateClassifier(root, temp_home).report(Walker(root))
        assert report.in_sync == report.total == 1
