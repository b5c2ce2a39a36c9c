"""
Building ticket comments from commits.
"""

import logging
import re
from typing import List, Optional, Tuple

from .config import HookConfig
from .models import CommitRecord, TicketComment
from .vcs import GitBackend

logger = logging.getLogger("ticket_notifier")


def message_from_raw_commit(raw: str) -> str:
    """Return everything after the first blank line of a raw commit object."""
    _, sep, message = raw.partition("\n\n")
    if not sep:
        return ""
    return message.rstrip()


class CommentBuilder:
    """Turns a commit into a ticket comment and the ticket ids it references."""

    def __init__(self, backend: GitBackend, config: HookConfig):
        """
        Initialize the comment builder.

        Args:
            backend: Repository access
            config: Hook settings providing the ticket pattern and source URL
        """
        self.backend = backend
        self.config = config
        self.ticket_re = re.compile(config.ticket_pattern, re.IGNORECASE)

    def read_commit(self, sha: str) -> CommitRecord:
        metadata = self.backend.commit_metadata(sha)
        return CommitRecord(
            sha=sha,
            author_name=metadata.author_name,
            author_email=metadata.author_email,
            commit_date=metadata.commit_date,
            message=message_from_raw_commit(self.backend.raw_commit(sha)),
        )

    def extract_ticket_ids(self, message: str) -> List[str]:
        """
        Find ticket ids in a commit message, in order of appearance.

        Repeated mentions are kept unless ``dedupe_ticket_ids`` is set.
        """
        ticket_ids = [match.group(0) for match in self.ticket_re.finditer(message)]
        if self.config.dedupe_ticket_ids:
            ticket_ids = list(dict.fromkeys(ticket_ids))
        return ticket_ids

    def build(self, sha: str, ref_name: str) -> Tuple[TicketComment, List[str]]:
        commit = self.read_commit(sha)
        comment = TicketComment.from_commit(commit, ref_name, self.config.source_url)
        return comment, self.extract_ticket_ids(commit.message)

    def build_safely(self, sha: str, ref_name: str) -> Optional[Tuple[TicketComment, List[str]]]:
        """Like :meth:`build`, but logs and returns None when the commit cannot be read."""
        try:
            return self.build(sha, ref_name)
        except Exception as e:
            logger.warning(f"Skipping commit {sha[:10]}: {e}")
            logger.debug("Commit read error details", exc_info=True)
            return None
