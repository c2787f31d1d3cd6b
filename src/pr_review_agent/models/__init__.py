"""
Data Models

Core data models of the PR review agent.
"""

from .pr_diff import Author, PullRequest, FileChange, Hunk, FileDiff, Diff
from .skill import Skill, SkillPriority
from .ticket import Ticket, TicketReference, TicketLookup, LookupStatus
from .review import (
    Severity,
    Verdict,
    ReviewComment,
    CodeSuggestion,
    ReviewResult,
    InlineCommentDirective,
)

__all__ = [
    "Author",
    "PullRequest",
    "FileChange",
    "Hunk",
    "FileDiff",
    "Diff",
    "Skill",
    "SkillPriority",
    "Ticket",
    "TicketReference",
    "TicketLookup",
    "LookupStatus",
    "Severity",
    "Verdict",
    "ReviewComment",
    "CodeSuggestion",
    "ReviewResult",
    "InlineCommentDirective",
]
