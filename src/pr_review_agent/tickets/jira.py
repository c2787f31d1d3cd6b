"""
Jira Ticket Adapter

Recognizes Jira keys but does not talk to Jira yet; every lookup
answers with an unsupported outcome.
"""

import re

from ..models.ticket import TicketLookup, TicketReference
from .base import TicketAdapter


class JiraAdapter(TicketAdapter):
    name = 'jira'

    def __init__(self, url: str = '', token: str = ''):
        self.url = url
        self.token = token
        self.key_pattern = re.compile(r'^[A-Z][A-Z0-9]*-\d+$')

    def supports(self, reference: TicketReference) -> bool:
        return reference.kind == 'project' and bool(self.key_pattern.match(reference.key))

    def lookup(self, reference: TicketReference) -> TicketLookup:
        return TicketLookup.unsupported(f"Jira lookup is not available for {reference.key}")
