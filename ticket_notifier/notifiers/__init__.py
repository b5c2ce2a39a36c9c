"""
Notification delivery to the issue tracker and chat.
"""

from .base import Notifier, build_session
from .tracker import TrackerNotifier
from .chat import ChatNotifier

__all__ = [
    'Notifier',
    'build_session',
    'TrackerNotifier',
    'ChatNotifier'
]
