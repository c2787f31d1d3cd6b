"""
GitHub Formatters

GitHub Actions workflow annotations, inline review comments and the
review event derived from a verdict.
"""

import logging
from typing import List

from ..models.review import (
    InlineCommentDirective,
    ReviewResult,
    Severity,
    Verdict,
)


logger = logging.getLogger(__name__)

SUMMARY_ANNOTATION_CHARS = 200

ANNOTATION_LEVELS = {
    Severity.ERROR: 'error',
    Severity.WARNING: 'warning',
    Severity.INFO: 'notice',
}

REVIEW_EVENTS = {
    Verdict.APPROVE: 'APPROVE',
    Verdict.REQUEST_CHANGES: 'REQUEST_CHANGES',
    Verdict.COMMENT: 'COMMENT',
}


def escape_data(value: str) -> str:
    """Escape a workflow command message so it stays on one line."""
    return value.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


def escape_property(value: str) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(':', '%3A').replace(',', '%2C')


class GitHubActionsFormatter:
    """
    Formats review results as GitHub Actions annotations.

    Emits one summary notice followed by one annotation per comment.
    """

    def format(self, result: ReviewResult) -> str:
        summary = result.summary[:SUMMARY_ANNOTATION_CHARS]
        lines = [f"::notice::Review Summary: {escape_data(summary)}"]

        for comment in result.comments:
            level = ANNOTATION_LEVELS[comment.severity]
            lines.append(
                f"::{level} file={escape_property(comment.path)},line={comment.line}"
                f"::{escape_data(comment.body)}"
            )

        return "\n".join(lines)


def to_inline_comments(result: ReviewResult) -> List[InlineCommentDirective]:
    """
    Convert review comments into inline comment directives.

    A comment's suggestion fence is appended to the body so GitHub
    renders it as an applicable suggestion.

    Args:
        result: ReviewResult to convert

    Returns:
        Directives in comment order
    """
    directives = []
    for comment in result.comments:
        body = comment.body
        if comment.suggestion is not None:
            body += f"\n\n```suggestion\n{comment.suggestion}\n```"
        directives.append(InlineCommentDirective(
            path=comment.path,
            line=comment.line,
            body=body,
            severity=comment.severity,
        ))

    logger.debug(f"Prepared {len(directives)} inline comments")
    return directives


def review_event(verdict: Verdict) -> str:
    """GitHub review event name for a verdict."""
    return REVIEW_EVENTS.get(Verdict(verdict), 'COMMENT')
