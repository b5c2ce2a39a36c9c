"""
Tests for revision range resolution and commit walking.
"""

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest
from git.exc import GitCommandError

from ticket_notifier.models import RangeKind
from ticket_notifier.vcs import GitPythonBackend, is_null_revision, resolve_range, walk_commits

from .conftest import ZERO

A, B, C, D = ("a" * 40, "b" * 40, "c" * 40, "d" * 40)


@pytest.mark.parametrize("revision", [ZERO, "0" * 64, "", None])
def test_null_revisions(revision):
    assert is_null_revision(revision)


def test_real_revision_is_not_null():
    assert not is_null_revision("0" * 39 + "1")


def test_resolve_branch_create():
    revision_range = resolve_range(ZERO, D)
    assert revision_range.kind == RangeKind.CREATE
    assert revision_range.rev_spec == D
    assert not revision_range.is_empty


def test_resolve_branch_delete():
    revision_range = resolve_range(D, ZERO)
    assert revision_range.kind == RangeKind.DELETE
    assert revision_range.rev_spec is None
    assert revision_range.is_empty


def test_resolve_branch_update():
    revision_range = resolve_range(B, D)
    assert revision_range.kind == RangeKind.UPDATE
    assert revision_range.rev_spec == f"{B}..{D}"


def test_walk_create_returns_full_history_oldest_first(backend):
    assert walk_commits(backend, resolve_range(ZERO, D)) == [A, B, C, D]


def test_walk_update_returns_new_commits_oldest_first(backend):
    assert walk_commits(backend, resolve_range(B, D)) == [C, D]


def test_walk_delete_returns_nothing(backend):
    backend.commit_ids = Mock()
    assert walk_commits(backend, resolve_range(D, ZERO)) == []
    backend.commit_ids.assert_not_called()


def test_walk_unknown_revision_returns_nothing(backend):
    assert walk_commits(backend, resolve_range(B, "e" * 40)) == []


def test_walk_swallows_git_errors():
    failing = Mock()
    failing.commit_ids.side_effect = GitCommandError("rev-list", 128)
    assert walk_commits(failing, resolve_range(B, D)) == []


@patch("ticket_notifier.vcs.Repo")
def test_gitpython_backend(mock_repo_class):
    """Test the GitPython backend delegates to the repository."""
    mock_repo = Mock()
    mock_repo_class.return_value = mock_repo
    mock_repo.iter_commits.return_value = [Mock(hexsha=D), Mock(hexsha=C)]
    commit = Mock()
    commit.author.name = "Jane Doe"
    commit.author.email = "jane@example.com"
    commit.authored_datetime = datetime(2024, 3, 1, tzinfo=timezone.utc)
    mock_repo.commit.return_value = commit
    mock_repo.git.cat_file.return_value = "tree x\n\nmessage"

    backend = GitPythonBackend("/srv/git/project.git")

    mock_repo_class.assert_called_once_with("/srv/git/project.git")
    assert backend.commit_ids(f"{B}..{D}") == [D, C]
    mock_repo.iter_commits.assert_called_once_with(f"{B}..{D}")

    metadata = backend.commit_metadata(C)
    assert metadata.author_name == "Jane Doe"
    assert metadata.author_email == "jane@example.com"
    assert metadata.commit_date == datetime(2024, 3, 1, tzinfo=timezone.utc)

    assert backend.raw_commit(C) == "tree x\n\nmessage"
    mock_repo.git.cat_file.assert_called_once_with("commit", C)
