# DEEZ Test Fixtures
# Pytest fixtures for DEEZ tests

import os
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from deez.sync.root import ConfigRoot


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("DEEZ_ROOT", raising=False)
    monkeypatch.delenv("DEEZ_CONFIG", raising=False)
    monkeypatch.delenv("DEEZ_VERBOSE", raising=False)
    return home


def _write_files(base: Path, files: dict[str, str]) -> None:
    """Write a mapping of relative path to content under base."""
    for rel_path, content in files.items():
        path = base / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _write_hook(root: Path, name: str, body: str) -> Path:
    """Write an executable shell hook at the top of root."""
    hook = root / name
    hook.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    os.chmod(hook, 0o755)
    return hook


@pytest.fixture
def make_root(temp_dir: Path) -> Callable[..., Path]:
    """Factory creating a root directory with files, marked by default."""

    def _make_root(files: dict[str, str] | None = None, *, name: str = "root", marked: bool = True) -> Path:
        root = temp_dir / name
        root.mkdir(parents=True, exist_ok=True)
        if marked:
            (root / ".deez").touch()
        _write_files(root, files or {})
        return root

    return _make_root


@pytest.fixture
def root_dir(make_root: Callable[..., Path]) -> Path:
    """A marked root with a few config files."""
    return make_root(
        {
            ".gitconfig": "[user]\n    name = A\n",
            ".config/nvim/init.lua": "vim.o.number = true\n",
            ".bashrc": "export EDITOR=vim\n",
        }
    )


@pytest.fixture
def config_root(root_dir: Path) -> ConfigRoot:
    """The marked root as a resolved ConfigRoot."""
    return ConfigRoot(path=root_dir, trusted=True)


@pytest.fixture
def write_files() -> Callable[[Path, dict[str, str]], None]:
    """Helper writing relative path -> content mappings."""
    return _write_files


@pytest.fixture
def write_hook() -> Callable[[Path, str, str], Path]:
    """Helper writing executable shell hooks."""
    return _write_hook
