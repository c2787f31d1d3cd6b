"""
Response Extractor

Parses a model completion into a ReviewResult: summary, inline comments,
code suggestions and verdict. Extraction never fails; whatever cannot be
recognized falls back to defaults.
"""

import logging
import re
from typing import List, Optional, Tuple

from ..models.review import (
    Severity,
    Verdict,
    ReviewComment,
    CodeSuggestion,
    ReviewResult,
)


logger = logging.getLogger(__name__)


def _marker(name: str) -> "re.Pattern":
    # Matches "SUMMARY:", "## Summary:", "**VERDICT:**" and similar at line start
    return re.compile(
        rf'^[ \t]*(?:#+[ \t]*)?[*_]*{name}[*_]*[ \t]*:[*_]*',
        re.IGNORECASE | re.MULTILINE
    )


SUMMARY_MARKER = _marker('SUMMARY')
COMMENTS_MARKER = _marker('COMMENTS')
SUGGESTIONS_MARKER = _marker('SUGGESTIONS')
VERDICT_MARKER = _marker('VERDICT')

COMMENT_TAG = re.compile(r'\[File:\s*([^,\]]*?)\s*,\s*Line:\s*([^\]]*?)\s*\]', re.IGNORECASE)
SUGGESTION_TAG = re.compile(r'\[Suggestion:\s*([^,\]]*?)\s*,\s*Line:\s*([^\]]*?)\s*\]', re.IGNORECASE)


def _fence(label: str) -> "re.Pattern":
    return re.compile(rf'```{label}[ \t]*\n(.*?)\n?[ \t]*```', re.IGNORECASE | re.DOTALL)


SUGGESTION_FENCE = _fence('suggestion')
OLD_FENCE = _fence('old')
NEW_FENCE = _fence('new')

# Checked in order; the first hit wins, so error outranks warning
SEVERITY_KEYWORDS = (
    # Word starts, so inflections such as "critically" or "securityContext" count
    (Severity.ERROR, re.compile(r'\b(?:security|insecur|vulnerabilit|critical)\w*', re.IGNORECASE)),
    (Severity.WARNING, re.compile(r"\b(?:should(?:n't)?|consider\w*|might)\b", re.IGNORECASE)),
)
DEFAULT_SEVERITY = Severity.INFO

VERDICTS = {
    'approve': Verdict.APPROVE,
    'request_changes': Verdict.REQUEST_CHANGES,
    'comment': Verdict.COMMENT,
}
DEFAULT_VERDICT = Verdict.COMMENT

# Leading verdict token; any prose after it is ignored
VERDICT_TOKEN = re.compile(
    r'\s*[\[*`_]*\s*(request[\s_-]+changes|approve|comment)\b',
    re.IGNORECASE
)


def infer_severity(text: str) -> Severity:
    """Classify comment text by keyword; info when nothing matches."""
    for severity, pattern in SEVERITY_KEYWORDS:
        if pattern.search(text):
            return severity
    return DEFAULT_SEVERITY


def parse_verdict(token: str) -> Verdict:
    """Map a verdict token to a Verdict; comment when unrecognized."""
    normalized = token.strip().strip('[]*`.').strip().lower()
    normalized = re.sub(r'[\s-]+', '_', normalized)
    return VERDICTS.get(normalized, DEFAULT_VERDICT)


def _parse_line(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


class ResponseExtractor:
    """
    Extracts structured review output from completion text.

    Comments and suggestions that fail validation (empty path, non-positive
    line, empty body or missing new code) are dropped before the caps apply.
    """

    def __init__(
        self,
        max_comments: int = 20,
        max_suggestions: int = 10,
        summary_fallback_chars: int = 500
    ):
        """
        Initialize response extractor.

        Args:
            max_comments: Maximum number of comments kept
            max_suggestions: Maximum number of code suggestions kept
            summary_fallback_chars: Summary length used when the completion
                has no SUMMARY section
        """
        self.max_comments = max_comments
        self.max_suggestions = max_suggestions
        self.summary_fallback_chars = summary_fallback_chars

    def extract(self, text: str) -> ReviewResult:
        """
        Extract a review result from completion text.

        Args:
            text: Raw completion text

        Returns:
            ReviewResult with validated, capped comments and suggestions
        """
        text = text or ''

        summary = self.extract_summary(text)
        comments = self.extract_comments(text)
        suggestions = self.extract_suggestions(text)
        verdict = self.extract_verdict(text)

        if len(comments) > self.max_comments:
            logger.info(f"Keeping first {self.max_comments} of {len(comments)} comments")
            comments = comments[:self.max_comments]
        if len(suggestions) > self.max_suggestions:
            logger.info(f"Keeping first {self.max_suggestions} of {len(suggestions)} suggestions")
            suggestions = suggestions[:self.max_suggestions]

        logger.info(
            f"Extracted {len(comments)} comments, {len(suggestions)} suggestions, "
            f"verdict {verdict.value}"
        )
        return ReviewResult(
            summary=summary,
            comments=tuple(comments),
            suggestions=tuple(suggestions),
            verdict=verdict,
        )

    def extract_summary(self, text: str) -> str:
        match = SUMMARY_MARKER.search(text)
        if not match:
            return text[:self.summary_fallback_chars].strip()

        end = self._next_position(
            text,
            match.end(),
            (COMMENTS_MARKER, SUGGESTIONS_MARKER, VERDICT_MARKER)
        )
        return text[match.end():end].strip()

    def extract_comments(self, text: str) -> List[ReviewComment]:
        comments = []
        for match in COMMENT_TAG.finditer(text):
            end = self._next_position(
                text,
                match.end(),
                (COMMENT_TAG, SUGGESTION_TAG, SUGGESTIONS_MARKER, VERDICT_MARKER)
            )
            path = match.group(1).strip()
            line = _parse_line(match.group(2))
            body, suggestion = self._split_suggestion(text[match.end():end])

            if not path or line <= 0 or not body:
                logger.warning(f"Dropping invalid comment at '{path}':{match.group(2)}")
                continue

            comments.append(ReviewComment(
                path=path,
                line=line,
                body=body,
                severity=infer_severity(body),
                suggestion=suggestion,
            ))
        return comments

    def extract_suggestions(self, text: str) -> List[CodeSuggestion]:
        suggestions = []
        for match in SUGGESTION_TAG.finditer(text):
            end = self._next_position(
                text,
                match.end(),
                (SUGGESTION_TAG, COMMENT_TAG, COMMENTS_MARKER, VERDICT_MARKER)
            )
            path = match.group(1).strip()
            line = _parse_line(match.group(2))
            block = text[match.end():end]

            new_match = NEW_FENCE.search(block)
            if not path or line <= 0 or not new_match or not new_match.group(1).strip():
                logger.warning(f"Dropping invalid suggestion at '{path}':{match.group(2)}")
                continue

            old_match = OLD_FENCE.search(block)
            description = NEW_FENCE.sub('', OLD_FENCE.sub('', block)).strip()

            suggestions.append(CodeSuggestion(
                path=path,
                line=line,
                old_code=old_match.group(1) if old_match else '',
                new_code=new_match.group(1),
                description=description,
            ))
        return suggestions

    def extract_verdict(self, text: str) -> Verdict:
        matches = list(VERDICT_MARKER.finditer(text))
        if not matches:
            return DEFAULT_VERDICT

        token = VERDICT_TOKEN.match(text, matches[-1].end())
        if not token:
            return DEFAULT_VERDICT
        return parse_verdict(token.group(1))

    def _split_suggestion(self, block: str) -> Tuple[str, Optional[str]]:
        """Separate a suggestion fence from comment text."""
        match = SUGGESTION_FENCE.search(block)
        if not match:
            return block.strip(), None

        body = (block[:match.start()] + block[match.end():]).strip()
        return body, match.group(1)

    @staticmethod
    def _next_position(text: str, start: int, patterns) -> int:
        """Earliest match of any pattern at or after start, else end of text."""
        positions = [len(text)]
        for pattern in patterns:
            match = pattern.search(text, start)
            if match:
                positions.append(match.start())
        return min(positions)
