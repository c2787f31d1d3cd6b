"""
Skill Matcher

Matches changed file paths against skill trigger globs and orders
the applicable skills by priority.
"""

import re
import logging
from functools import lru_cache
from typing import Iterable, List, Pattern, Sequence

from ..models.skill import Skill


logger = logging.getLogger(__name__)


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> Pattern:
    """
    Translate a glob pattern into an anchored regular expression.

    ``**`` matches across path separators (``**/`` may also match nothing),
    ``*`` matches within one path segment and ``?`` matches exactly one
    character, separators included. Everything else is literal.
    """
    parts = ['^']
    i = 0
    while i < len(pattern):
        if pattern.startswith('**/', i):
            parts.append('(?:.*/)?')
            i += 3
        elif pattern.startswith('**', i):
            parts.append('.*')
            i += 2
        elif pattern[i] == '*':
            parts.append('[^/]*')
            i += 1
        elif pattern[i] == '?':
            parts.append('.')
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    parts.append('$')
    return re.compile(''.join(parts), re.DOTALL)


def path_matches(path: str, pattern: str) -> bool:
    """Check whether the whole path satisfies a glob pattern."""
    return compile_glob(pattern).match(path) is not None


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(path_matches(path, pattern) for pattern in patterns)


class SkillMatcher:
    """
    Selects the skills whose triggers match at least one changed path.

    The matched set depends only on the inputs, never on their order.
    Matched skills come back sorted by priority (high first); skills of
    equal priority keep the order in which they were supplied.
    """

    def match(self, file_paths: Iterable[str], skills: Sequence[Skill]) -> List[Skill]:
        """
        Find skills applicable to a set of file paths.

        Args:
            file_paths: Changed file paths
            skills: Candidate skills in discovery order

        Returns:
            Deduplicated, priority-sorted list of matched skills
        """
        paths = list(dict.fromkeys(file_paths))

        matched = []
        seen = set()
        for skill in skills:
            if skill in seen:
                continue
            if self._skill_applies(skill, paths):
                matched.append(skill)
                seen.add(skill)

        ordered = sorted(matched, key=lambda s: s.priority.rank, reverse=True)
        logger.info(f"Matched {len(ordered)} of {len(skills)} skills against {len(paths)} paths")
        return ordered

    def _skill_applies(self, skill: Skill, paths: List[str]) -> bool:
        for trigger in skill.triggers:
            for path in paths:
                if path_matches(path, trigger):
                    logger.debug(f"Skill '{skill.name}' triggered by {path} ({trigger})")
                    return True
        return False
