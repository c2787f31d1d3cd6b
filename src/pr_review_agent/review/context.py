"""
Context Builder

Builds the review context handed to prompt rendering: filters ignored
paths, matches skills against the remaining files and keeps the diff
within the configured character budget.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import ReviewConfig
from ..models.pr_diff import PullRequest, Hunk, FileDiff, Diff
from ..models.skill import Skill
from ..models.ticket import Ticket
from .matcher import SkillMatcher, matches_any


logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "... [Truncated - file too large]"


def truncation_hunk() -> Hunk:
    """Sentinel hunk standing in for a file that did not fit the budget."""
    return Hunk(old_start=0, old_lines=0, new_start=0, new_lines=0, content=TRUNCATION_MARKER)


def is_truncation_hunk(hunk: Hunk) -> bool:
    return (
        hunk.content == TRUNCATION_MARKER
        and hunk.old_start == hunk.old_lines == hunk.new_start == hunk.new_lines == 0
    )


@dataclass(frozen=True)
class ReviewContext:
    """Everything a review prompt is rendered from."""
    pr: PullRequest
    diff: Diff
    skills: Tuple[Skill, ...]
    tickets: Tuple[Ticket, ...]
    config: ReviewConfig
    truncated: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'skills', tuple(self.skills))
        object.__setattr__(self, 'tickets', tuple(self.tickets))

    @property
    def file_paths(self) -> Tuple[str, ...]:
        return self.diff.paths


def truncate_diff(diff: Diff, max_budget: int) -> Diff:
    """
    Keep whole files while their summed hunk content fits the budget.

    The first file that would exceed the budget is replaced by a single
    sentinel hunk and every later file is dropped. Hunks are never split,
    so the emitted content is at most ``max_budget + len(TRUNCATION_MARKER)``.

    Args:
        diff: Diff to truncate
        max_budget: Maximum summed hunk content length in characters

    Returns:
        Possibly truncated Diff
    """
    if max_budget < 0:
        raise ValueError("max_budget must be non-negative")

    kept: List[FileDiff] = []
    total = 0

    for file_diff in diff.files:
        size = file_diff.content_length
        if total + size > max_budget:
            logger.info(
                f"Diff truncated at {file_diff.path}: {total + size} > {max_budget} characters, "
                f"{len(diff.files) - len(kept) - 1} later files dropped"
            )
            kept.append(FileDiff(change=file_diff.change, hunks=(truncation_hunk(),)))
            break
        kept.append(file_diff)
        total += size

    return Diff(files=tuple(kept))


def is_truncated(diff: Diff) -> bool:
    return any(is_truncation_hunk(h) for f in diff.files for h in f.hunks)


class ContextBuilder:
    """
    Builds review contexts.

    Ignored paths are removed before skill matching and truncation.
    Contexts are immutable; narrowing or re-prioritizing returns new copies.
    """

    def __init__(self, matcher: Optional[SkillMatcher] = None):
        """
        Initialize context builder.

        Args:
            matcher: SkillMatcher instance (a default one is created when None)
        """
        self.matcher = matcher or SkillMatcher()

    def build(
        self,
        pr: PullRequest,
        diff: Diff,
        skills: Sequence[Skill],
        config: ReviewConfig,
        tickets: Iterable[Ticket] = ()
    ) -> ReviewContext:
        """
        Build a review context.

        Args:
            pr: Pull request metadata
            diff: Parsed diff
            skills: All available skills
            config: Review configuration (budget, ignored globs, focus areas)
            tickets: Resolved linked tickets

        Returns:
            ReviewContext with filtered, truncated diff and matched skills
        """
        filtered = self.filter_ignored(diff, config.ignore_paths)
        matched = self.matcher.match(filtered.paths, skills)
        truncated = truncate_diff(filtered, config.max_diff_size)

        context = ReviewContext(
            pr=pr,
            diff=truncated,
            skills=tuple(matched),
            tickets=tuple(tickets),
            config=config,
            truncated=is_truncated(truncated),
        )
        logger.info(
            f"Built context for #{pr.number}: {truncated.changed_files} files, "
            f"{len(context.skills)} skills, {len(context.tickets)} tickets"
        )
        return context

    def filter_ignored(self, diff: Diff, ignore_paths: Iterable[str]) -> Diff:
        """Drop files whose path matches any ignored glob."""
        patterns = tuple(ignore_paths)
        if not patterns:
            return diff

        kept = tuple(f for f in diff.files if not matches_any(f.path, patterns))
        if len(kept) != len(diff.files):
            logger.debug(f"Ignored {len(diff.files) - len(kept)} files")
        return Diff(files=kept)

    def with_files(
        self,
        context: ReviewContext,
        paths: Iterable[str],
        skills: Optional[Sequence[Skill]] = None
    ) -> ReviewContext:
        """
        Derive a context restricted to the given file paths.

        Args:
            context: Source context
            paths: Paths to keep
            skills: Skills to re-match against the subset (defaults to the
                context's already matched skills)

        Returns:
            New ReviewContext
        """
        wanted = set(paths)
        subset = Diff(files=tuple(f for f in context.diff.files if f.path in wanted))
        candidates = context.skills if skills is None else skills
        return replace(
            context,
            diff=subset,
            skills=tuple(self.matcher.match(subset.paths, candidates)),
            truncated=is_truncated(subset),
        )

    def with_skill_first(
        self,
        context: ReviewContext,
        skill_name: str,
        available: Sequence[Skill] = ()
    ) -> ReviewContext:
        """
        Derive a context with the named skill moved to the front.

        Args:
            context: Source context
            skill_name: Skill name, compared case-insensitively
            available: Further skills to pull the named skill from when it
                was not matched by the changed paths

        Returns:
            New ReviewContext, or the source context if no skill has that name
        """
        wanted = skill_name.lower()
        for skill in tuple(context.skills) + tuple(available):
            if skill.name.lower() == wanted:
                rest = tuple(s for s in context.skills if s.name.lower() != wanted)
                return replace(context, skills=(skill,) + rest)

        logger.warning(f"Skill '{skill_name}' not found")
        return context
