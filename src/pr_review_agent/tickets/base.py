"""
Ticket Adapter Base

Ticket reference extraction and the adapter interface for issue trackers.
"""

import re
from abc import ABC, abstractmethod
from typing import List

from ..models.ticket import TicketLookup, TicketReference


TICKET_PATTERNS = (
    ('project', re.compile(r'\b([A-Z][A-Z0-9]*-\d+)\b')),
    ('github', re.compile(r'(?<![\w&])#(\d+)\b')),
)


class TicketLookupError(Exception):
    """A tracker failed while resolving a ticket"""


def extract_ticket_references(text: str) -> List[TicketReference]:
    """
    Find ticket keys in PR title and description text.

    Args:
        text: Free text to scan

    Returns:
        Unique references in order of first appearance
    """
    found = {}
    for kind, pattern in TICKET_PATTERNS:
        for match in pattern.finditer(text or ''):
            key = match.group(1)
            position = match.start()
            if key not in found:
                found[key] = (position, TicketReference(key=key, kind=kind))

    return [ref for _, ref in sorted(found.values(), key=lambda item: item[0])]


class TicketAdapter(ABC):
    """Issue tracker adapter"""

    name = 'base'

    @abstractmethod
    def supports(self, reference: TicketReference) -> bool:
        """Whether this tracker can be asked about the reference."""

    @abstractmethod
    def lookup(self, reference: TicketReference) -> TicketLookup:
        """
        Resolve a reference.

        Expected gaps are reported through the lookup status; exceptions
        are reserved for transport failures.
        """
