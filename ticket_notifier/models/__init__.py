"""
Models for push events, commits and notification outcomes.
"""

from .push import PushEvent, RevisionRange, RangeKind, parse_push_events
from .commit import CommitRecord, TicketComment
from .delivery import DeliveryResult, ProcessingSummary

__all__ = [
    'PushEvent',
    'RevisionRange',
    'RangeKind',
    'parse_push_events',
    'CommitRecord',
    'TicketComment',
    'DeliveryResult',
    'ProcessingSummary'
]
