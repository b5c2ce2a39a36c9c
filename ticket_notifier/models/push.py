"""
Models for the ref updates reported by a git push.
"""

import logging
from enum import Enum
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel

logger = logging.getLogger("ticket_notifier")


class PushEvent(BaseModel):
    """One updated ref, as fed to post-receive hooks on stdin."""
    old_revision: str
    new_revision: str
    ref_name: str

    model_config = {"frozen": True}

    @classmethod
    def parse_line(cls, line: str) -> "PushEvent":
        """
        Parse an ``<old> <new> <ref>`` hook input line.

        Raises:
            ValueError: If the line does not hold exactly three tokens
        """
        parts = line.split()
        if len(parts) != 3:
            raise ValueError(f"Expected '<old> <new> <ref>', got {line.strip()!r}")
        old, new, ref = parts
        return cls(old_revision=old, new_revision=new, ref_name=ref)


def parse_push_events(lines: Iterable[str]) -> Iterator[PushEvent]:
    """Yield push events from hook input, skipping blank and malformed lines."""
    for line in lines:
        if not line.strip():
            continue
        try:
            yield PushEvent.parse_line(line)
        except ValueError as e:
            logger.warning(f"Ignoring hook input line: {e}")


class RangeKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class RevisionRange(BaseModel):
    """The commits a ref update introduced."""
    kind: RangeKind
    old_revision: str
    new_revision: str

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return self.kind == RangeKind.DELETE

    @property
    def rev_spec(self) -> Optional[str]:
        """Revision argument for the backend, or None when nothing is to be walked."""
        if self.kind == RangeKind.CREATE:
            return self.new_revision
        if self.kind == RangeKind.UPDATE:
            return f"{self.old_revision}..{self.new_revision}"
        return None
