"""
Review Output Formatting

Renders review results as JSON, Markdown or GitHub Actions annotations,
and converts them into GitHub review directives.
"""

from enum import Enum

from ..models.review import ReviewResult
from .report import MarkdownFormatter
from .structured import JsonFormatter, parse_structured
from .github import GitHubActionsFormatter, to_inline_comments, review_event


class OutputFormat(str, Enum):
    JSON = 'json'
    MARKDOWN = 'markdown'
    GH_ACTIONS = 'gh-actions'


FORMATTERS = {
    OutputFormat.JSON: JsonFormatter,
    OutputFormat.MARKDOWN: MarkdownFormatter,
    OutputFormat.GH_ACTIONS: GitHubActionsFormatter,
}


def format_result(result: ReviewResult, kind: str = OutputFormat.MARKDOWN) -> str:
    """
    Render a review result in the requested output format.

    Args:
        result: ReviewResult to render
        kind: One of 'json', 'markdown' or 'gh-actions'

    Returns:
        Rendered text

    Raises:
        ValueError: If the format is unknown
    """
    formatter = FORMATTERS[OutputFormat(kind)]()
    return formatter.format(result)


__all__ = [
    'OutputFormat',
    'format_result',
    'MarkdownFormatter',
    'JsonFormatter',
    'GitHubActionsFormatter',
    'parse_structured',
    'to_inline_comments',
    'review_event',
]
