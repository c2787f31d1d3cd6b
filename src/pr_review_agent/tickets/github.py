"""
GitHub Issues Ticket Adapter

Resolves ``#123`` references against the repository's issues.
"""

import logging

from ..github.client import GitHubClient, GitHubAPIError
from ..models.ticket import Ticket, TicketLookup, TicketReference
from .base import TicketAdapter, TicketLookupError


logger = logging.getLogger(__name__)


class GitHubIssueAdapter(TicketAdapter):
    """Ticket adapter backed by GitHub issues"""

    name = 'github'

    def __init__(self, client: GitHubClient):
        self.client = client

    def supports(self, reference: TicketReference) -> bool:
        return reference.kind == 'github' and reference.key.isdigit()

    def lookup(self, reference: TicketReference) -> TicketLookup:
        try:
            issue = self.client.get_issue(int(reference.key))
        except GitHubAPIError as e:
            raise TicketLookupError(f"Issue #{reference.key} lookup failed: {e}") from e
        except ValueError as e:
            # Non-JSON response body
            raise TicketLookupError(f"Issue #{reference.key} returned an unreadable body: {e}") from e

        if issue is None:
            return TicketLookup.not_found(f"Issue #{reference.key} does not exist")

        labels = tuple(
            label.get('name', '') if isinstance(label, dict) else str(label)
            for label in issue.get('labels') or []
        )
        ticket = Ticket(
            id=str(issue.get('id', reference.key)),
            key=f"#{reference.key}",
            title=issue.get('title') or '',
            description=issue.get('body') or '',
            status=issue.get('state') or 'unknown',
            type='pull_request' if 'pull_request' in issue else 'issue',
            labels=labels,
        )
        logger.debug(f"Resolved issue #{reference.key}: {ticket.title}")
        return TicketLookup.found(ticket)
