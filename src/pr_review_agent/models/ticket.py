"""
Ticket Data Models

Tickets linked from a pull request and the outcome of resolving them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class Ticket:
    """A resolved ticket from an issue tracker"""
    id: str
    key: str
    title: str
    description: str = ''
    status: str = 'unknown'
    type: str = 'unknown'
    labels: Tuple[str, ...] = ()
    acceptance_criteria: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'labels', tuple(self.labels))
        object.__setattr__(self, 'acceptance_criteria', tuple(self.acceptance_criteria))


@dataclass(frozen=True)
class TicketReference:
    """A ticket key found in PR text, tagged with the tracker kind it looks like"""
    key: str
    kind: str  # 'project' (PROJ-123 style) or 'github' (#123)


class LookupStatus(str, Enum):
    FOUND = 'found'
    NOT_FOUND = 'not_found'
    UNSUPPORTED = 'unsupported'


@dataclass(frozen=True)
class TicketLookup:
    """Outcome of asking a tracker for a ticket"""
    status: LookupStatus
    ticket: Optional[Ticket] = None
    reason: str = ''

    def __post_init__(self):
        if self.status is LookupStatus.FOUND and self.ticket is None:
            raise ValueError("A found lookup must carry a ticket")

    @classmethod
    def found(cls, ticket: Ticket) -> "TicketLookup":
        return cls(LookupStatus.FOUND, ticket)

    @classmethod
    def not_found(cls, reason: str = '') -> "TicketLookup":
        return cls(LookupStatus.NOT_FOUND, reason=reason)

    @classmethod
    def unsupported(cls, reason: str) -> "TicketLookup":
        return cls(LookupStatus.UNSUPPORTED, reason=reason)
