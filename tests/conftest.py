"""
Shared fixtures for Ticket Notifier tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from ticket_notifier.config import ChatConfig, HookConfig, Settings, TrackerConfig
from ticket_notifier.vcs import CommitMetadata, GitBackend

ZERO = "0" * 40


class FakeBackend(GitBackend):
    """In-memory linear history standing in for a git repository."""

    def __init__(self):
        self.parents: Dict[str, Optional[str]] = {}
        self.messages: Dict[str, str] = {}
        self.raw_overrides: Dict[str, str] = {}
        self.order: List[str] = []

    def add(self, sha: str, message: str, parent: Optional[str] = None) -> str:
        self.parents[sha] = parent
        self.messages[sha] = message
        self.order.append(sha)
        return sha

    def ancestry(self, sha: str) -> List[str]:
        if sha not in self.parents:
            raise ValueError(f"unknown revision {sha}")
        commits = []
        current: Optional[str] = sha
        while current is not None:
            commits.append(current)
            current = self.parents[current]
        return commits

    def commit_ids(self, rev_spec: str) -> List[str]:
        if ".." in rev_spec:
            old, new = rev_spec.split("..")
            excluded = set(self.ancestry(old))
            return [sha for sha in self.ancestry(new) if sha not in excluded]
        return self.ancestry(rev_spec)

    def commit_metadata(self, sha: str) -> CommitMetadata:
        index = self.order.index(sha)
        return CommitMetadata(
            author_name="Jane Doe",
            author_email="jane@example.com",
            commit_date=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc) + timedelta(hours=index),
        )

    def raw_commit(self, sha: str) -> str:
        if sha in self.raw_overrides:
            return self.raw_overrides[sha]
        parent = self.parents[sha]
        headers = [f"tree {'f' * 40}"]
        if parent:
            headers.append(f"parent {parent}")
        headers.append("author Jane Doe <jane@example.com> 1709294400 +0000")
        headers.append("committer Jane Doe <jane@example.com> 1709294400 +0000")
        return "\n".join(headers) + "\n\n" + self.messages[sha] + "\n"


@pytest.fixture
def backend():
    """Fixture providing a linear history A -> B -> C -> D."""
    fake = FakeBackend()
    fake.add("a" * 40, "Initial commit")
    fake.add("b" * 40, "Set up build ABC-1", parent="a" * 40)
    fake.add("c" * 40, "Fix crash on empty input\n\nRefs ABC-2", parent="b" * 40)
    fake.add("d" * 40, "Add docs for XYZ-3 and ABC-2", parent="c" * 40)
    return fake


@pytest.fixture
def hook_config():
    """Fixture for hook configuration."""
    return HookConfig(tracked_branch="refs/heads/master")


@pytest.fixture
def tracker_config():
    """Fixture for tracker configuration."""
    return TrackerConfig(
        base_url="https://jira.test/rest/api/2/issue",
        browse_url="https://jira.test/browse/",
        login="bot",
        password="secret",
    )


@pytest.fixture
def chat_config():
    """Fixture for chat configuration."""
    return ChatConfig(
        webhook_url="https://hooks.chat.test/services/T000",
        channel="#commits",
        username="gitbot",
        icon_emoji=":robot_face:",
    )


@pytest.fixture
def settings(tracker_config, chat_config, hook_config):
    """Fixture for complete settings."""
    return Settings(tracker=tracker_config, chat=chat_config, hook=hook_config)
