# Tests for deez.sync.walk
# Ignore-aware enumeration of root entries

import os
import sys
from pathlib import Path

import pytest

from deez.errors import IoFailure
from deez.sync.walk import (
    EntryKind,
    IgnoreFilter,
    RelativeEntry,
    Walker,
    file_prefix,
    is_hook_file,
)


def _paths(root: Path, extra_patterns=()) -> list[str]:
    return [entry.path for entry in Walker(root, IgnoreFilter(root, extra_patterns))]


class TestFilePrefix:
    """Tests for file name prefix extraction."""

    def test_no_extension(self):
        assert file_prefix("post-sync") == "post-sync"

    def test_sequence_and_extension(self):
        assert file_prefix("post-sync.001.sh") == "post-sync"

    def test_leading_dot_kept(self):
        assert file_prefix(".bashrc") == ".bashrc"
        assert file_prefix(".config.bak") == ".config"

    def test_hook_names(self):
        assert is_hook_file("pre-sync")
        assert is_hook_file("post-clean.sh")
        assert is_hook_file("pre-rsync.010.py")
        assert not is_hook_file("pre-syncing.sh")
        assert not is_hook_file("post-deploy")
        assert not is_hook_file(".pre-sync")


class TestRelativeEntry:
    """Tests for RelativeEntry."""

    def test_join(self, temp_dir: Path):
        entry = RelativeEntry(".config/nvim/init.lua")
        assert entry.join(temp_dir) == temp_dir / ".config" / "nvim" / "init.lua"

    def test_ordering_ignores_kind(self):
        a = RelativeEntry("a", EntryKind.SYMLINK)
        b = RelativeEntry("b", EntryKind.FILE)
        assert sorted([b, a]) == [a, b]
        assert RelativeEntry("a", EntryKind.FILE) == RelativeEntry("a", EntryKind.SYMLINK)

    def test_str(self):
        assert str(RelativeEntry("x/y")) == "x/y"


class TestWalkerExclusions:
    """Tests for the built-in exclusions."""

    def test_marker_and_vcs_excluded(self, make_root):
        root = make_root({".gitconfig": "A", ".git/config": "core", ".git/HEAD": "ref"})
        assert _paths(root) == [".gitconfig"]

    def test_nested_git_dir_kept(self, make_root):
        root = make_root({"vendor/.git/config": "x"})
        assert _paths(root) == ["vendor/.git/config"]

    def test_nested_marker_excluded(self, make_root):
        root = make_root({"nested/.deez": "", "nested/file": "x"})
        assert _paths(root) == ["nested/file"]

    def test_top_level_ignore_files_excluded(self, make_root):
        root = make_root({".gitignore": "", ".ignore": "", "file": "x"})
        assert _paths(root) == ["file"]

    def test_nested_ignore_files_kept(self, make_root):
        root = make_root({"sub/.gitignore": "", "sub/file": "x"})
        assert _paths(root) == ["sub/.gitignore", "sub/file"]

    def test_top_level_hooks_excluded(self, make_root):
        root = make_root(
            {
                "pre-sync": "",
                "post-sync.001.sh": "",
                "post-status.sh": "",
                "pre-syncing": "",
                "scripts/pre-sync": "",
            }
        )
        assert _paths(root) == ["pre-syncing", "scripts/pre-sync"]

    def test_empty_root(self, make_root):
        root = make_root()
        assert _paths(root) == []


class TestWalkerIgnoreRules:
    """Tests for gitignore-compatible rules."""

    def test_glob_at_any_depth(self, make_root):
        root = make_root({".gitignore": "*.log\n", "a.log": "", "sub/b.log": "", "sub/c.txt": ""})
        assert _paths(root) == ["sub/c.txt"]

    def test_negation(self, make_root):
        root = make_root({".gitignore": "*.log\n!keep.log\n", "drop.log": "", "keep.log": ""})
        assert _paths(root) == ["keep.log"]

    def test_directory_pattern_prunes(self, make_root):
        root = make_root({".ignore": "cache/\n", "cache/a": "", "cache/deep/b": "", "cachefile": ""})
        assert _paths(root) == ["cachefile"]

    def test_directory_contents_pattern_allows_reinclusion(self, make_root):
        root = make_root({".gitignore": "foo/**\n!foo/keep\n", "foo/keep": "", "foo/drop": ""})
        assert _paths(root) == ["foo/keep"]

    def test_directory_contents_pattern_prunes_subdirectories(self, make_root):
        root = make_root({".gitignore": "foo/**\n!foo/bar/keep\n", "foo/bar/keep": "", "foo/top": ""})
        assert _paths(root) == []

    def test_comments_and_blank_lines(self, make_root):
        root = make_root({".gitignore": "# comment\n\nsecret\n", "secret": "", "public": ""})
        assert _paths(root) == ["public"]

    def test_nested_rules_are_anchored(self, make_root):
        root = make_root(
            {
                "sub/.gitignore": "/only.txt\n",
                "sub/only.txt": "",
                "sub/deeper/only.txt": "",
                "only.txt": "",
            }
        )
        assert _paths(root) == ["only.txt", "sub/.gitignore", "sub/deeper/only.txt"]

    def test_nested_rules_override_parent(self, make_root):
        root = make_root(
            {
                ".gitignore": "*.conf\n",
                "app/.gitignore": "!app.conf\n",
                "app/app.conf": "",
                "app/other.conf": "",
                "top.conf": "",
            }
        )
        assert _paths(root) == ["app/.gitignore", "app/app.conf"]

    def test_rules_do_not_leak_to_siblings(self, make_root):
        root = make_root({"a/.gitignore": "*.txt\n", "a/x.txt": "", "b/x.txt": ""})
        assert _paths(root) == ["a/.gitignore", "b/x.txt"]

    def test_extra_patterns(self, make_root):
        root = make_root({"README.md": "", "LICENSE": "", ".vimrc": ""})
        assert _paths(root, ["README.md", "LICENSE"]) == [".vimrc"]

    def test_ignore_file_overrides_extra_patterns(self, make_root):
        root = make_root({".gitignore": "!README.md\n", "README.md": ""})
        assert _paths(root, ["*.md"]) == ["README.md"]


class TestWalkerOrder:
    """Tests for deterministic, restartable enumeration."""

    def test_lexicographic_order(self, make_root):
        root = make_root({"b": "", "a.txt": "", "a/z": "", "a/b/c": "", "A": "", ".x": ""})
        paths = _paths(root)
        assert paths == sorted(paths)
        assert paths == [".x", "A", "a.txt", "a/b/c", "a/z", "b"]

    def test_restartable(self, root_dir: Path):
        walker = Walker(root_dir)
        assert list(walker) == list(walker)

    def test_lazy(self, root_dir: Path):
        iterator = iter(Walker(root_dir))
        first = next(iterator)
        assert first.path == ".bashrc"

    def test_missing_root_raises(self, temp_dir: Path):
        with pytest.raises(IoFailure):
            list(Walker(temp_dir / "missing"))


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
class TestWalkerSymlinks:
    """Tests for symlinks inside the root."""

    def test_file_symlink_is_entry(self, make_root):
        root = make_root({"real": "x"})
        os.symlink(root / "real", root / "alias")
        entries = list(Walker(root))
        assert [(e.path, e.kind) for e in entries] == [
            ("alias", EntryKind.SYMLINK),
            ("real", EntryKind.FILE),
        ]

    def test_directory_symlink_not_followed(self, make_root):
        root = make_root({"dir/file": "x"})
        os.symlink(root / "dir", root / "link")
        entries = list(Walker(root))
        assert [e.path for e in entries] == ["dir/file", "link"]
        assert entries[1].is_symlink


class TestIgnoreFilter:
    """Tests for the built-in exclusions."""

    def test_is_excluded(self, make_root):
        flt = IgnoreFilter(make_root())

        assert flt.is_excluded(".git", True)
        assert not flt.is_excluded("sub/.git", True)
        assert flt.is_excluded(".deez", False)
        assert flt.is_excluded("sub/.deez", False)
        assert flt.is_excluded(".gitignore", False)
        assert not flt.is_excluded("sub/.gitignore", False)
        assert flt.is_excluded("pre-sync.sh", False)
        assert not flt.is_excluded("sub/pre-sync.sh", False)
        assert not flt.is_excluded(".vimrc", False)
