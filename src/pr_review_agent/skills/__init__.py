"""
Review Skills

Loading of skill definitions from disk.
"""

from .loader import SkillLoader

__all__ = ['SkillLoader']
