"""
Shared HTTP plumbing for notifiers.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__
from ..config import HookConfig
from ..models import DeliveryResult, TicketComment

logger = logging.getLogger("ticket_notifier")


def build_session(config: HookConfig) -> requests.Session:
    """Create a session with the configured retry policy."""
    session = requests.Session()

    retry_strategy = Retry(
        total=config.max_retries,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["POST"]
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": f"ticket-notifier/{__version__}"
    })
    return session


class Notifier(ABC):
    """Best-effort delivery of a comment about one ticket."""

    channel = "notifier"

    def __init__(self, hook_config: HookConfig, session: requests.Session = None):
        self.hook_config = hook_config
        self.session = session or build_session(hook_config)

    @abstractmethod
    def notify(self, ticket_id: str, comment: TicketComment) -> DeliveryResult:
        """Deliver ``comment`` about ``ticket_id``; failures are returned, never raised."""
        raise NotImplementedError

    def _post(self, ticket_id: str, url: str, **kwargs: Any) -> DeliveryResult:
        """
        POST to ``url`` and report the outcome instead of raising.

        Args:
            ticket_id: Ticket the delivery is about, for logging
            url: Destination URL
            **kwargs: Passed through to ``requests.Session.post``
        """
        try:
            response = self.session.post(url, timeout=self.hook_config.request_timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.warning(f"Failed to post {self.channel} notification for {ticket_id}: {e}")
            return DeliveryResult(channel=self.channel, ticket_id=ticket_id, ok=False, error=str(e))

        if not response.ok:
            logger.warning(
                f"Failed to post {self.channel} notification for {ticket_id}: "
                f"HTTP {response.status_code}"
            )
            logger.debug(f"Response body: {response.text[:500]}")
            return DeliveryResult(
                channel=self.channel,
                ticket_id=ticket_id,
                ok=False,
                status_code=response.status_code,
                error=response.reason,
            )

        logger.info(f"Posted {self.channel} notification for {ticket_id}")
        return DeliveryResult(
            channel=self.channel,
            ticket_id=ticket_id,
            ok=True,
            status_code=response.status_code,
        )

    def describe(self, ticket_id: str, comment: TicketComment) -> Dict[str, Any]:
        """Summary of a delivery, logged instead of sending it in dry-run mode."""
        return {"channel": self.channel, "ticket_id": ticket_id, "sha": comment.sha}
