"""
Version-control access: resolving pushed ranges and walking their commits.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from git import Repo
from git.exc import GitCommandError
from pydantic import BaseModel

from .models import RangeKind, RevisionRange

logger = logging.getLogger("ticket_notifier")


class CommitMetadata(BaseModel):
    """Author details of a commit."""
    author_name: str
    author_email: str
    commit_date: datetime

    model_config = {"frozen": True}


class GitBackend(ABC):
    """Read-only view of the repository the hook runs in."""

    @abstractmethod
    def commit_ids(self, rev_spec: str) -> List[str]:
        """List commit ids selected by ``rev_spec``, newest first."""
        raise NotImplementedError

    @abstractmethod
    def commit_metadata(self, sha: str) -> CommitMetadata:
        """Fetch author name, author email and date of a commit."""
        raise NotImplementedError

    @abstractmethod
    def raw_commit(self, sha: str) -> str:
        """Return the raw commit object text (headers, blank line, message)."""
        raise NotImplementedError


class GitPythonBackend(GitBackend):
    """Backend reading a local repository through GitPython."""

    def __init__(self, repo_path: str = "."):
        self.repo = Repo(repo_path)
        logger.debug(f"Opened git repository at {self.repo.git_dir}")

    def commit_ids(self, rev_spec: str) -> List[str]:
        return [commit.hexsha for commit in self.repo.iter_commits(rev_spec)]

    def commit_metadata(self, sha: str) -> CommitMetadata:
        commit = self.repo.commit(sha)
        return CommitMetadata(
            author_name=commit.author.name or "",
            author_email=commit.author.email or "",
            commit_date=commit.authored_datetime,
        )

    def raw_commit(self, sha: str) -> str:
        return self.repo.git.cat_file("commit", sha)


def is_null_revision(revision: Optional[str]) -> bool:
    """True for the all-zero id git reports for a missing side of a ref update."""
    return not revision or set(revision) == {"0"}


def resolve_range(old: str, new: str) -> RevisionRange:
    """Classify a ref update and return the range of commits it introduced."""
    if is_null_revision(old):
        kind = RangeKind.CREATE
    elif is_null_revision(new):
        kind = RangeKind.DELETE
    else:
        kind = RangeKind.UPDATE
    return RevisionRange(kind=kind, old_revision=old, new_revision=new)


def walk_commits(backend: GitBackend, revision_range: RevisionRange) -> List[str]:
    """
    List the commits of a range in chronological order, oldest first.

    Args:
        backend: Repository access
        revision_range: Range produced by :func:`resolve_range`

    Returns:
        Commit ids, empty for deletions or ranges the backend cannot resolve
    """
    if revision_range.is_empty:
        return []

    rev_spec = revision_range.rev_spec

    try:
        newest_first = backend.commit_ids(rev_spec)
    except (GitCommandError, ValueError) as e:
        logger.warning(f"Could not list commits for {rev_spec}: {e}")
        return []

    logger.debug(f"{len(newest_first)} commits in {rev_spec}")
    return list(reversed(newest_first))
