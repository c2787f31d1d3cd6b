"""
Review Context Builder

This module provides skill matching and budget-bounded context
assembly for prompt rendering.
"""

from .matcher import SkillMatcher, compile_glob, path_matches
from .context import ContextBuilder, ReviewContext, truncate_diff, TRUNCATION_MARKER

__all__ = [
    'SkillMatcher',
    'compile_glob',
    'path_matches',
    'ContextBuilder',
    'ReviewContext',
    'truncate_diff',
    'TRUNCATION_MARKER',
]
