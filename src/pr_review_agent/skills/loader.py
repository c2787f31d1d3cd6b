"""
Skill Loader

Loads skill definitions from ``<skills_path>/<name>/SKILL.md`` files.
Each file carries a YAML front matter block followed by the body text
that is injected into review prompts.
"""

import re
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import yaml

from ..models.skill import Skill, SkillPriority


logger = logging.getLogger(__name__)

SKILL_FILE_NAME = 'SKILL.md'


class SkillLoader:
    """
    Reads skill definitions from a directory.

    Malformed front matter is recovered with defaults; a skill file
    that cannot be read at all is skipped.
    """

    def __init__(self, skills_path: str):
        """
        Initialize skill loader.

        Args:
            skills_path: Directory containing one sub-directory per skill
        """
        self.skills_path = Path(skills_path).expanduser()
        self.front_matter_pattern = re.compile(r'\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)', re.DOTALL)

    def load_skills(self) -> List[Skill]:
        """
        Load all skills, sorted by priority.

        Returns:
            Skills ordered high to low priority, directory name order within a priority
        """
        if not self.skills_path.is_dir():
            logger.info(f"Skills directory not found: {self.skills_path}")
            return []

        skills = []
        for skill_dir in sorted(p for p in self.skills_path.iterdir() if p.is_dir()):
            skill_file = skill_dir / SKILL_FILE_NAME
            if not skill_file.is_file():
                continue
            skill = self.load_skill(skill_dir.name, skill_file)
            if skill:
                skills.append(skill)

        skills.sort(key=lambda s: s.priority.rank, reverse=True)
        logger.info(f"Loaded {len(skills)} skills from {self.skills_path}")
        return skills

    def list_skills(self) -> List[Skill]:
        """List all available skills."""
        return self.load_skills()

    def load_skill(self, default_name: str, skill_file: Path) -> Optional[Skill]:
        """
        Load a single skill file.

        Args:
            default_name: Name used when the front matter has none
            skill_file: Path to the SKILL.md file

        Returns:
            Skill or None if the file cannot be read
        """
        try:
            text = skill_file.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to load skill {default_name}: {e}")
            return None

        return self.parse_skill(default_name, text)

    def parse_skill(self, default_name: str, text: str) -> Skill:
        """Build a Skill from raw SKILL.md text."""
        front_matter, body = self._split_front_matter(text)

        name = str(front_matter.get('name') or default_name).strip() or default_name
        return Skill(
            name=name,
            description=str(front_matter.get('description') or ''),
            triggers=self._parse_triggers(front_matter.get('trigger')),
            priority=SkillPriority.parse(front_matter.get('priority')),
            content=body,
        )

    def _split_front_matter(self, text: str) -> Tuple[Dict[str, Any], str]:
        match = self.front_matter_pattern.match(text)
        if not match:
            return {}, text.strip()

        body = text[match.end():].strip()
        try:
            data = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            # Unquoted globs such as `- **/*.py` are not valid YAML
            logger.debug(f"Front matter is not valid YAML, reading it line by line: {e}")
            data = self._parse_plain_front_matter(match.group(1))

        if not isinstance(data, dict):
            logger.warning("Skill front matter is not a mapping, using defaults")
            return {}, body
        return data, body

    def _parse_plain_front_matter(self, block: str) -> Dict[str, Any]:
        """Read `key: value` lines and `  - item` list entries."""
        result: Dict[str, Any] = {}
        current_key = None

        for line in block.splitlines():
            key_match = re.match(r'^(\w+):\s*(.*?)\s*$', line)
            if key_match:
                current_key, value = key_match.groups()
                result[current_key] = self._unquote(value) if value else []
            elif current_key and re.match(r'^\s+-\s+', line):
                if not isinstance(result[current_key], list):
                    result[current_key] = [result[current_key]]
                result[current_key].append(self._unquote(re.sub(r'^\s+-\s+', '', line).strip()))

        return result

    @staticmethod
    def _unquote(value: str) -> str:
        if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
            return value[1:-1]
        return value

    def _parse_triggers(self, value: Any) -> Tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,) if value.strip() else ()
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value if item is not None and str(item).strip())
        logger.warning(f"Ignoring unsupported trigger value: {value!r}")
        return ()
