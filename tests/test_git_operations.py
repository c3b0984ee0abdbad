# Tests for deez.git.operations
# Git command execution for remote roots

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from deez.git.operations import GitError, _run_git, clone_repo, get_head_commit


class TestGitError:
    """Tests for GitError exception."""

    def test_basic_error(self):
        err = GitError("test message")
        assert err.message == "test message"
        assert err.returncode == 1
        assert err.stderr == ""
        assert str(err) == "test message"

    def test_error_with_details(self):
        err = GitError("failed", returncode=128, stderr="fatal: not a repo")
        assert err.returncode == 128
        assert err.stderr == "fatal: not a repo"


class TestRunGit:
    """Tests for _run_git helper."""

    @patch("deez.git.operations.subprocess.run")
    def test_successful_command(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git", "status"], returncode=0, stdout="clean", stderr=""
        )
        result = _run_git("status")
        assert result.returncode == 0
        assert result.stdout == "clean"
        assert mock_run.call_args.args[0] == ["git", "status"]

    @patch("deez.git.operations.subprocess.run")
    def test_failed_command_raises(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git", "bad"], returncode=1, stdout="", stderr="  error\n"
        )
        with pytest.raises(GitError) as exc_info:
            _run_git("bad")
        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "error"

    @patch("deez.git.operations.subprocess.run")
    def test_failed_command_no_check(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git", "bad"], returncode=1, stdout="", stderr="error"
        )
        result = _run_git("bad", check=False)
        assert result.returncode == 1

    @patch("deez.git.operations.subprocess.run")
    def test_uncaptured_failure(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(args=["git", "clone"], returncode=128)
        with pytest.raises(GitError) as exc_info:
            _run_git("clone", capture_output=False)
        assert exc_info.value.stderr == ""

    @patch("deez.git.operations.subprocess.run", side_effect=FileNotFoundError)
    def test_git_not_found(self, mock_run):
        with pytest.raises(GitError, match="Did not find the .git. executable"):
            _run_git("status")


class TestCloneRepo:
    """Tests for clone_repo."""

    @patch("deez.git.operations._run_git")
    def test_shallow_quiet_clone(self, mock_git):
        clone_repo("git@github.com:user/dots", Path("/tmp/dest"))
        mock_git.assert_called_once_with(
            "clone",
            "--single-branch",
            "--depth=1",
            "--no-tags",
            "--quiet",
            "git@github.com:user/dots",
            "/tmp/dest",
            capture_output=True,
        )

    @patch("deez.git.operations._run_git")
    def test_verbose_clone(self, mock_git):
        clone_repo("https://example.com/dots.git", Path("/tmp/dest"), quiet=False)
        assert mock_git.call_args.args == (
            "clone",
            "--single-branch",
            "--depth=1",
            "--no-tags",
            "https://example.com/dots.git",
            "/tmp/dest",
        )
        assert mock_git.call_args.kwargs == {"capture_output": False}

    @patch("deez.git.operations.subprocess.run")
    def test_failure_propagates(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=128, stdout="", stderr="fatal: repository not found"
        )
        with pytest.raises(GitError) as exc_info:
            clone_repo("gh:nope", Path("/tmp/dest"))
        assert "repository not found" in exc_info.value.stderr


class TestGetHeadCommit:
    """Tests for get_head_commit."""

    @patch("deez.git.operations.subprocess.run")
    def test_returns_hash(self, mock_run, temp_dir: Path):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=0, stdout="0123456789abcdef\n", stderr=""
        )
        assert get_head_commit(temp_dir) == "0123456789abcdef"
        assert mock_run.call_args.kwargs["cwd"] == temp_dir

    @patch("deez.git.operations.subprocess.run")
    def test_not_a_repo(self, mock_run, temp_dir: Path):
        mock_run.return_value = subprocess.CompletedProcess(
            args=[], returncode=128, stdout="", stderr="fatal: not a git repository"
        )
        assert get_head_commit(temp_dir) is None


def test_error_from_process():
    result = subprocess.CompletedProcess(args=["git", "clone", "x"], returncode=128, stderr="fatal: nope\n")
    err = GitError.from_process(result)
    assert err.message == "'git clone' exited with status 128"
    assert err.stderr == "fatal: nope"
