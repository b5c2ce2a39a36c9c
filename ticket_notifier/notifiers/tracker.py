"""
Issue tracker comment delivery.
"""

import logging
from typing import Any, Dict

import requests

from ..config import HookConfig, TrackerConfig
from ..models import DeliveryResult, TicketComment
from .base import Notifier

logger = logging.getLogger("ticket_notifier")


class TrackerNotifier(Notifier):
    """Adds commit comments to tickets through the tracker's REST API."""

    channel = "tracker"

    def __init__(
        self,
        config: TrackerConfig,
        hook_config: HookConfig,
        session: requests.Session = None
    ):
        super().__init__(hook_config, session)
        self.config = config
        self.auth = (config.login, config.password.get_secret_value())

    def comment_url(self, ticket_id: str) -> str:
        return f"{self.config.base_url}/{ticket_id}{self.config.comment_path}"

    def build_payload(self, comment: TicketComment) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"body": comment.text}
        if self.config.visibility_role:
            payload["visibility"] = {
                "type": "role",
                "value": self.config.visibility_role
            }
        return payload

    def notify(self, ticket_id: str, comment: TicketComment) -> DeliveryResult:
        url = self.comment_url(ticket_id)
        logger.debug(f"Posting comment for commit {comment.sha[:10]} to {url}")
        return self._post(
            ticket_id,
            url,
            json=self.build_payload(comment),
            auth=self.auth,
            headers={"Accept": "application/json"}
        )

    def describe(self, ticket_id: str, comment: TicketComment) -> Dict[str, Any]:
        summary = super().describe(ticket_id, comment)
        summary["url"] = self.comment_url(ticket_id)
        return summary
