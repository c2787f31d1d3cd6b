"""
Ticket Trackers

Linked-ticket extraction and tracker adapters.
"""

from .base import TicketAdapter, TicketLookupError, extract_ticket_references
from .github import GitHubIssueAdapter
from .jira import JiraAdapter
from .linear import LinearAdapter

__all__ = [
    'TicketAdapter',
    'TicketLookupError',
    'extract_ticket_references',
    'GitHubIssueAdapter',
    'JiraAdapter',
    'LinearAdapter',
]
