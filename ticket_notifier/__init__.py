"""
Ticket Notifier - post git commit summaries to referenced issue-tracker tickets.
"""

__version__ = "0.1.0"
