"""
Push processing: from ref updates to ticket notifications.
"""

import logging
from typing import Iterable, List, Optional

from .comments import CommentBuilder
from .config import Settings
from .models import DeliveryResult, ProcessingSummary, PushEvent, TicketComment
from .notifiers import ChatNotifier, Notifier, TrackerNotifier
from .vcs import GitBackend, resolve_range, walk_commits

logger = logging.getLogger("ticket_notifier")


class PushProcessor:
    """Walks the commits of a push and notifies every ticket they reference."""

    def __init__(
        self,
        settings: Settings,
        backend: GitBackend,
        notifiers: Optional[List[Notifier]] = None
    ):
        """
        Initialize the push processor.

        Args:
            settings: Immutable hook settings
            backend: Repository access
            notifiers: Delivery targets, in call order. Built from ``settings``
                when omitted: the tracker first, then chat when a webhook is set.
        """
        self.settings = settings
        self.backend = backend
        self.builder = CommentBuilder(backend, settings.hook)
        self.notifiers = notifiers if notifiers is not None else self.default_notifiers(settings)

        logger.debug(
            f"PushProcessor tracking {settings.hook.tracked_branch} with "
            f"{[n.channel for n in self.notifiers]}"
        )

    @staticmethod
    def default_notifiers(settings: Settings) -> List[Notifier]:
        notifiers: List[Notifier] = []
        if settings.tracker.base_url:
            notifiers.append(TrackerNotifier(settings.tracker, settings.hook))
        if settings.chat.webhook_url:
            notifiers.append(
                ChatNotifier(settings.chat, settings.tracker.browse_url, settings.hook)
            )
        return notifiers

    def process(self, events: Iterable[PushEvent]) -> ProcessingSummary:
        summary = ProcessingSummary()
        for event in events:
            summary.refs_seen += 1
            if event.ref_name != self.settings.hook.tracked_branch:
                logger.debug(f"Skipping untracked ref {event.ref_name}")
                continue
            summary.refs_processed += 1
            self.process_ref(event, summary)

        logger.info(
            f"Processed {summary.refs_processed} of {summary.refs_seen} refs: "
            f"{summary.commits} commits, {summary.notifications} notifications"
        )
        return summary

    def process_ref(self, event: PushEvent, summary: ProcessingSummary) -> None:
        revision_range = resolve_range(event.old_revision, event.new_revision)
        logger.info(f"{event.ref_name}: {revision_range.kind.value} {revision_range.rev_spec or ''}")

        for sha in walk_commits(self.backend, revision_range):
            summary.commits += 1
            built = self.builder.build_safely(sha, event.ref_name)
            if built is None:
                continue
            comment, ticket_ids = built
            if not ticket_ids:
                logger.debug(f"No ticket ids in commit {sha[:10]}")
                continue
            for ticket_id in ticket_ids:
                summary.results.extend(self.notify(ticket_id, comment))
                summary.notifications += 1

    def notify(self, ticket_id: str, comment: TicketComment) -> List[DeliveryResult]:
        results = []
        for notifier in self.notifiers:
            if self.settings.hook.dry_run:
                logger.info(f"[dry run] Would post {notifier.describe(ticket_id, comment)}")
                results.append(
                    DeliveryResult(
                        channel=notifier.channel,
                        ticket_id=ticket_id,
                        ok=True,
                        dry_run=True,
                    )
                )
                continue
            results.append(notifier.notify(ticket_id, comment))
        return results
