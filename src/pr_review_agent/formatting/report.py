"""
Markdown Report Formatter

Renders a ReviewResult as a Markdown report for humans: verdict header,
summary, comments grouped by file, suggested fixes and code suggestions.
"""

import logging
from typing import Dict, List

from ..models.review import ReviewComment, ReviewResult, Severity, Verdict


logger = logging.getLogger(__name__)


class MarkdownFormatter:
    """
    Formats review results as Markdown.

    Files appear in the order they were first commented on; comments keep
    their original order within a file.
    """

    def __init__(self):
        self.severity_formats = {
            Severity.ERROR: {"icon": "🚨", "label": "Error"},
            Severity.WARNING: {"icon": "⚠️", "label": "Warning"},
            Severity.INFO: {"icon": "💡", "label": "Info"},
        }
        self.verdict_formats = {
            Verdict.APPROVE: "✅ Approved",
            Verdict.REQUEST_CHANGES: "❌ Changes Requested",
            Verdict.COMMENT: "💬 Commented",
        }

    def format(self, result: ReviewResult) -> str:
        """
        Render a review result.

        Args:
            result: ReviewResult to render

        Returns:
            Markdown document
        """
        parts = [f"# Code Review: {self.verdict_formats[result.verdict]}", ""]

        parts.append("## Summary")
        parts.append("")
        parts.append(result.summary or "_No summary provided._")
        parts.append("")

        if result.comments:
            parts.append(f"## Comments ({len(result.comments)})")
            parts.append("")
            for path, comments in self._group_by_file(result.comments).items():
                parts.append(f"### `{path}`")
                parts.append("")
                for comment in comments:
                    parts.extend(self._format_comment(comment))
                    parts.append("")

        fixes = [c for c in result.comments if c.suggestion is not None]
        if fixes:
            parts.append("## Suggested Fixes")
            parts.append("")
            for comment in fixes:
                parts.append(f"**{comment.path}:{comment.line}**")
                parts.append("```suggestion")
                parts.append(comment.suggestion)
                parts.append("```")
                parts.append("")

        if result.suggestions:
            parts.append(f"## Code Suggestions ({len(result.suggestions)})")
            parts.append("")
            for suggestion in result.suggestions:
                parts.append(f"**{suggestion.path}:{suggestion.line}**")
                if suggestion.description:
                    parts.append(suggestion.description)
                if suggestion.old_code:
                    parts.append("```diff")
                    parts.extend(f"-{line}" for line in suggestion.old_code.splitlines())
                    parts.extend(f"+{line}" for line in suggestion.new_code.splitlines())
                    parts.append("```")
                else:
                    parts.append("```")
                    parts.append(suggestion.new_code)
                    parts.append("```")
                parts.append("")

        parts.append(f"**Verdict:** {result.verdict.value}")

        logger.debug(f"Rendered markdown report with {len(result.comments)} comments")
        return "\n".join(parts)

    def _format_comment(self, comment: ReviewComment) -> List[str]:
        style = self.severity_formats[comment.severity]
        return [f"- {style['icon']} **Line {comment.line}** ({style['label']}): {comment.body}"]

    def _group_by_file(self, comments) -> Dict[str, List[ReviewComment]]:
        groups: Dict[str, List[ReviewComment]] = {}
        for comment in comments:
            groups.setdefault(comment.path, []).append(comment)
        return groups
