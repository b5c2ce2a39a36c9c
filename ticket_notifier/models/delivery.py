"""
Models for best-effort notification outcomes.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class DeliveryResult(BaseModel):
    """Outcome of a single notification attempt."""
    channel: str
    ticket_id: str
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    dry_run: bool = False

    model_config = {"frozen": True}


class ProcessingSummary(BaseModel):
    """Counters and outcomes for one push."""
    refs_seen: int = 0
    refs_processed: int = 0
    commits: int = 0
    notifications: int = 0
    results: List[DeliveryResult] = Field(default_factory=list)

    @property
    def failures(self) -> List[DeliveryResult]:
        return [result for result in self.results if not result.ok]
