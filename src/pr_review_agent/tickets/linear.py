"""
Linear Ticket Adapter

Recognizes Linear issue identifiers; lookups answer with an
unsupported outcome.
"""

import re

from ..models.ticket import TicketLookup, TicketReference
from .base import TicketAdapter


class LinearAdapter(TicketAdapter):
    name = 'linear'

    def __init__(self, api_key: str = ''):
        self.api_key = api_key
        self.key_pattern = re.compile(r'^[A-Z]{2,}-\d+$')

    def supports(self, reference: TicketReference) -> bool:
        return reference.kind == 'project' and bool(self.key_pattern.match(reference.key))

    def lookup(self, reference: TicketReference) -> TicketLookup:
        return TicketLookup.unsupported(f"Linear lookup is not available for {reference.key}")
