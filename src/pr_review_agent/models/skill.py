"""
Skill Data Models

Named bundles of review guidance activated by trigger patterns.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class SkillPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @classmethod
    def parse(cls, value, default: Optional["SkillPriority"] = None) -> "SkillPriority":
        """Map a raw front-matter value onto a priority, falling back to default."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return default or cls.MEDIUM


_PRIORITY_RANK = {
    SkillPriority.HIGH: 3,
    SkillPriority.MEDIUM: 2,
    SkillPriority.LOW: 1,
}


@dataclass(frozen=True)
class Skill:
    """Review guidance injected verbatim into prompts"""
    name: str
    description: str
    triggers: Tuple[str, ...]
    priority: SkillPriority
    content: str

    def __post_init__(self):
        if not self.name.strip():
            raise ValueError("Skill name cannot be empty")
        object.__setattr__(self, 'triggers', tuple(self.triggers))
        object.__setattr__(self, 'priority', SkillPriority.parse(self.priority))
