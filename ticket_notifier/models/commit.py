"""
Models for commits and the comments built from them.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CommitRecord(BaseModel):
    """Commit data read from the version-control backend."""
    sha: str
    author_name: str
    author_email: str
    commit_date: datetime
    message: str = ""

    model_config = {"frozen": True}


class TicketComment(BaseModel):
    """
    Comment posted to every ticket a commit references.

    The same rendered text is reused for each ticket id found in the commit.
    """
    ref_name: str
    sha: str
    author_name: str
    author_email: str
    commit_date: datetime
    message: str = ""
    source_link: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_commit(
        cls,
        commit: CommitRecord,
        ref_name: str,
        source_url: Optional[str] = None
    ) -> "TicketComment":
        return cls(
            ref_name=ref_name,
            sha=commit.sha,
            author_name=commit.author_name,
            author_email=commit.author_email,
            commit_date=commit.commit_date,
            message=commit.message,
            source_link=f"{source_url}{commit.sha}" if source_url else None,
        )

    @property
    def text(self) -> str:
        lines = [
            f"Branch: {self.ref_name}",
            f"Commit: {self.sha}",
            f"Author: {self.author_name} - {self.author_email}",
            f"Date: {self.commit_date.strftime('%Y-%m-%d %H:%M:%S %z').strip()}",
            "",
            self.message,
        ]
        if self.source_link:
            lines.extend(["", self.source_link])
        return "\n".join(lines)
