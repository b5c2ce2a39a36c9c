"""
Chat webhook delivery.
"""

import json
import logging
from typing import Any, Dict

import requests

from ..config import ChatConfig, HookConfig
from ..models import DeliveryResult, TicketComment
from .base import Notifier

logger = logging.getLogger("ticket_notifier")


class ChatNotifier(Notifier):
    """Mirrors ticket comments to a chat channel through an incoming webhook."""

    channel = "chat"

    def __init__(
        self,
        config: ChatConfig,
        browse_url: str,
        hook_config: HookConfig,
        session: requests.Session = None
    ):
        super().__init__(hook_config, session)
        if not config.webhook_url:
            raise ValueError("Chat notifications need a webhook URL")
        self.config = config
        self.browse_url = browse_url

    def build_text(self, ticket_id: str, comment: TicketComment) -> str:
        quoted = "\n".join(f"> {line}" if line else ">" for line in comment.text.split("\n"))
        return f"{quoted}\n{self.browse_url}{ticket_id}"

    def build_payload(self, ticket_id: str, comment: TicketComment) -> Dict[str, str]:
        message = {
            "channel": self.config.channel,
            "username": self.config.username,
            "text": self.build_text(ticket_id, comment),
            "icon_emoji": self.config.icon_emoji,
        }
        return {"payload": json.dumps(message)}

    def notify(self, ticket_id: str, comment: TicketComment) -> DeliveryResult:
        logger.debug(f"Posting chat message for {ticket_id} to {self.config.channel}")
        return self._post(
            ticket_id,
            self.config.webhook_url,
            data=self.build_payload(ticket_id, comment)
        )

    def describe(self, ticket_id: str, comment: TicketComment) -> Dict[str, Any]:
        summary = super().describe(ticket_id, comment)
        summary["chat_channel"] = self.config.channel
        return summary
