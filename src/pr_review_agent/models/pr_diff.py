"""
PR Diff Data Models

Pull request metadata and parsed diff structures.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


VALID_STATUSES = ('added', 'modified', 'deleted', 'renamed')


@dataclass(frozen=True)
class Author:
    """Pull request author"""
    id: str
    username: str
    email: Optional[str] = None


@dataclass(frozen=True)
class PullRequest:
    """Pull request identity and description"""
    id: str
    number: int
    title: str
    description: str
    author: Author
    source_branch: str
    target_branch: str
    url: str = ''
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.number <= 0:
            raise ValueError("PR number must be positive")


@dataclass(frozen=True)
class FileChange:
    """Per-file change metadata reported by the VCS host"""
    path: str
    status: str
    additions: int = 0
    deletions: int = 0
    previous_path: Optional[str] = None

    def __post_init__(self):
        if self.status not in VALID_STATUSES:
            raise ValueError(f"Invalid status: {self.status}")
        if self.additions < 0 or self.deletions < 0:
            raise ValueError("Addition and deletion counts must be non-negative")

    @property
    def is_rename(self) -> bool:
        return self.status == 'renamed' and bool(self.previous_path)


@dataclass(frozen=True)
class Hunk:
    """A contiguous changed region within a file diff"""
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    content: str

    def __post_init__(self):
        if self.old_start < 0 or self.new_start < 0:
            raise ValueError("Line numbers must be non-negative")
        if self.old_lines < 0 or self.new_lines < 0:
            raise ValueError("Line counts must be non-negative")

    @property
    def is_insertion(self) -> bool:
        """Zero old length means nothing was replaced"""
        return self.old_lines == 0

    @property
    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_lines} +{self.new_start},{self.new_lines} @@"


@dataclass(frozen=True)
class FileDiff:
    """One file change with its ordered hunks"""
    change: FileChange
    hunks: Tuple[Hunk, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'hunks', tuple(self.hunks))

    @property
    def path(self) -> str:
        return self.change.path

    @property
    def content_length(self) -> int:
        """Summed character length of all hunk contents"""
        return sum(len(hunk.content) for hunk in self.hunks)


@dataclass(frozen=True)
class Diff:
    """Ordered file diffs of a pull request"""
    files: Tuple[FileDiff, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'files', tuple(self.files))

    @property
    def additions(self) -> int:
        return sum(f.change.additions for f in self.files)

    @property
    def deletions(self) -> int:
        return sum(f.change.deletions for f in self.files)

    @property
    def changed_files(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> Tuple[str, ...]:
        return tuple(f.path for f in self.files)

    @property
    def content_length(self) -> int:
        return sum(f.content_length for f in self.files)
