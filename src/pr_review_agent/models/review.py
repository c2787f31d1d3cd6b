"""
Review Data Models

Typed review results extracted from model completions, plus the
pydantic payloads used to serialize them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel, field_validator


class Severity(str, Enum):
    INFO = 'info'
    WARNING = 'warning'
    ERROR = 'error'


class Verdict(str, Enum):
    APPROVE = 'approve'
    REQUEST_CHANGES = 'request_changes'
    COMMENT = 'comment'


@dataclass(frozen=True)
class ReviewComment:
    """Inline review comment anchored to a file line"""
    path: str
    line: int
    body: str
    severity: Severity = Severity.INFO
    suggestion: Optional[str] = None

    def __post_init__(self):
        if not self.path.strip():
            raise ValueError("Comment path cannot be empty")
        if self.line <= 0:
            raise ValueError("Line number must be positive")
        if not self.body.strip():
            raise ValueError("Comment body cannot be empty")
        object.__setattr__(self, 'severity', Severity(self.severity))


@dataclass(frozen=True)
class CodeSuggestion:
    """Proposed replacement for a piece of code"""
    path: str
    line: int
    old_code: str
    new_code: str
    description: str

    def __post_init__(self):
        if not self.path.strip():
            raise ValueError("Suggestion path cannot be empty")
        if self.line <= 0:
            raise ValueError("Line number must be positive")


@dataclass(frozen=True)
class ReviewResult:
    """Summary, comments, suggestions and verdict of one review"""
    summary: str
    comments: Tuple[ReviewComment, ...] = ()
    suggestions: Tuple[CodeSuggestion, ...] = ()
    verdict: Verdict = Verdict.COMMENT

    def __post_init__(self):
        object.__setattr__(self, 'comments', tuple(self.comments))
        object.__setattr__(self, 'suggestions', tuple(self.suggestions))
        object.__setattr__(self, 'verdict', Verdict(self.verdict))

    @property
    def files_with_comments(self) -> List[str]:
        """Commented file paths in first-seen order"""
        seen = {}
        for comment in self.comments:
            seen.setdefault(comment.path, None)
        return list(seen)

    def get_comments_by_severity(self, severity: Severity) -> List[ReviewComment]:
        return [c for c in self.comments if c.severity == severity]


@dataclass(frozen=True)
class InlineCommentDirective:
    """Inline comment for the VCS collaborator to post"""
    path: str
    line: int
    body: str
    severity: Severity


# Pydantic models for structured output
class ReviewCommentPayload(BaseModel):
    path: str
    line: int
    body: str
    severity: Severity
    suggestion: Optional[str] = None

    @field_validator('line')
    @classmethod
    def validate_line(cls, v):
        if v <= 0:
            raise ValueError('Line number must be positive')
        return v

    @field_validator('path', 'body')
    @classmethod
    def validate_non_empty(cls, v):
        if not v.strip():
            raise ValueError('Field cannot be empty')
        return v


class CodeSuggestionPayload(BaseModel):
    path: str
    line: int
    old_code: str
    new_code: str
    description: str


class ReviewResultPayload(BaseModel):
    """Serialized form of a ReviewResult"""
    summary: str
    comments: List[ReviewCommentPayload] = []
    suggestions: List[CodeSuggestionPayload] = []
    verdict: Verdict = Verdict.COMMENT

    @classmethod
    def from_result(cls, result: ReviewResult) -> "ReviewResultPayload":
        return cls(
            summary=result.summary,
            comments=[
                ReviewCommentPayload(
                    path=c.path,
                    line=c.line,
                    body=c.body,
                    severity=c.severity,
                    suggestion=c.suggestion,
                )
                for c in result.comments
            ],
            suggestions=[
                CodeSuggestionPayload(
                    path=s.path,
                    line=s.line,
                    old_code=s.old_code,
                    new_code=s.new_code,
                    description=s.description,
                )
                for s in result.suggestions
            ],
            verdict=result.verdict,
        )

    def to_result(self) -> ReviewResult:
        return ReviewResult(
            summary=self.summary,
            comments=tuple(
                ReviewComment(
                    path=c.path,
                    line=c.line,
                    body=c.body,
                    severity=c.severity,
                    suggestion=c.suggestion,
                )
                for c in self.comments
            ),
            suggestions=tuple(
                CodeSuggestion(
                    path=s.path,
                    line=s.line,
                    old_code=s.old_code,
                    new_code=s.new_code,
                    description=s.description,
                )
                for s in self.suggestions
            ),
            verdict=self.verdict,
        )
