"""
Configuration Management

Dataclass configuration sections loaded from YAML or environment variables.
"""

import os
import yaml
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple
from pathlib import Path


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".pr-review" / "config.yaml"
DEFAULT_SKILLS_PATH = Path.home() / ".pr-review" / "skills"
DEFAULT_IGNORE_PATHS = ("**/node_modules/**", "**/dist/**", "**/build/**", ".git/**")
KNOWN_TICKET_TRACKERS = {'github', 'jira', 'linear'}


class ConfigError(Exception):
    """Invalid or unreadable configuration"""


def _split_env_list(value: Optional[str], default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return default
    return tuple(item.strip() for item in value.split(',') if item.strip())


@dataclass(frozen=True)
class ReviewConfig:
    """Context assembly settings"""
    max_diff_size: int = 50000
    ignore_paths: Tuple[str, ...] = DEFAULT_IGNORE_PATHS
    focus_areas: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'ignore_paths', tuple(self.ignore_paths))
        object.__setattr__(self, 'focus_areas', tuple(self.focus_areas))


@dataclass
class ExtractionConfig:
    """Completion parsing limits"""
    max_comments: int = 20
    max_suggestions: int = 10
    summary_fallback_chars: int = 500


@dataclass
class SkillsConfig:
    """Skill definition location"""
    path: str = str(DEFAULT_SKILLS_PATH)
    default: str = "default"


@dataclass
class GitHubConfig:
    """GitHub API settings"""
    token: Optional[str] = None
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30


@dataclass
class TicketsConfig:
    """Enabled ticket trackers"""
    trackers: List[str] = field(default_factory=lambda: ['github'])


@dataclass
class LoggingConfig:
    """Logging settings"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class AppConfig:
    """Complete application configuration"""
    review: ReviewConfig = field(default_factory=ReviewConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    skills: SkillsConfig = field(default_factory=SkillsConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    tickets: TicketsConfig = field(default_factory=TicketsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables"""
        return cls(
            review=ReviewConfig(
                max_diff_size=int(os.getenv("PR_REVIEW_MAX_DIFF_SIZE", "50000")),
                ignore_paths=_split_env_list(os.getenv("PR_REVIEW_IGNORE_PATHS"), DEFAULT_IGNORE_PATHS),
                focus_areas=_split_env_list(os.getenv("PR_REVIEW_FOCUS_AREAS"), ()),
            ),
            extraction=ExtractionConfig(
                max_comments=int(os.getenv("PR_REVIEW_MAX_COMMENTS", "20")),
                max_suggestions=int(os.getenv("PR_REVIEW_MAX_SUGGESTIONS", "10")),
                summary_fallback_chars=int(os.getenv("PR_REVIEW_SUMMARY_FALLBACK_CHARS", "500")),
            ),
            skills=SkillsConfig(
                path=os.getenv("PR_REVIEW_SKILLS_PATH", str(DEFAULT_SKILLS_PATH)),
                default=os.getenv("PR_REVIEW_DEFAULT_SKILL", "default"),
            ),
            github=GitHubConfig(
                token=os.getenv("GITHUB_TOKEN"),
                api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
                timeout_seconds=int(os.getenv("GITHUB_TIMEOUT", "30")),
            ),
            tickets=TicketsConfig(
                trackers=list(_split_env_list(os.getenv("PR_REVIEW_TICKET_TRACKERS"), ('github',))),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """Load configuration from a YAML file"""
        config_file = Path(config_path).expanduser()
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Cannot parse config file {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "AppConfig":
        try:
            config = cls(
                review=ReviewConfig(**config_data.get('review', {})),
                extraction=ExtractionConfig(**config_data.get('extraction', {})),
                skills=SkillsConfig(**config_data.get('skills', {})),
                github=GitHubConfig(**config_data.get('github', {})),
                tickets=TicketsConfig(**config_data.get('tickets', {})),
                logging=LoggingConfig(**config_data.get('logging', {})),
                debug=config_data.get('debug', False),
            )
        except TypeError as e:
            raise ConfigError(f"Unknown configuration key: {e}") from e

        # The environment token wins over a token written to disk
        if os.getenv("GITHUB_TOKEN"):
            config.github.token = os.getenv("GITHUB_TOKEN")
        return config

    def validate(self) -> None:
        """Validate configuration values"""
        errors = []

        if self.review.max_diff_size < 0:
            errors.append("max_diff_size must be non-negative")

        if self.extraction.max_comments < 0 or self.extraction.max_suggestions < 0:
            errors.append("Comment and suggestion limits must be non-negative")

        if self.extraction.summary_fallback_chars <= 0:
            errors.append("summary_fallback_chars must be positive")

        if self.github.timeout_seconds <= 0:
            errors.append("GitHub timeout must be positive")

        unknown = set(self.tickets.trackers) - KNOWN_TICKET_TRACKERS
        if unknown:
            errors.append(f"Unknown ticket trackers: {', '.join(sorted(unknown))}")

        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain dictionary"""
        return {
            'review': {
                'max_diff_size': self.review.max_diff_size,
                'ignore_paths': list(self.review.ignore_paths),
                'focus_areas': list(self.review.focus_areas),
            },
            'extraction': {
                'max_comments': self.extraction.max_comments,
                'max_suggestions': self.extraction.max_suggestions,
                'summary_fallback_chars': self.extraction.summary_fallback_chars,
            },
            'skills': {
                'path': self.skills.path,
                'default': self.skills.default,
            },
            'github': {
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                # token excluded
            },
            'tickets': {
                'trackers': list(self.tickets.trackers),
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load configuration from a YAML file, falling back to environment defaults.

    Args:
        config_path: Path to the YAML file (default: ~/.pr-review/config.yaml)

    Returns:
        Validated AppConfig

    Raises:
        ConfigError: If the file exists but is invalid
    """
    path = Path(config_path).expanduser() if config_path else DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.warning(f"Config not found at {path}, using defaults")
        config = AppConfig.from_env()
    else:
        config = AppConfig.from_yaml(str(path))

    config.validate()
    return config


def setup_logging(logging_config: LoggingConfig, level: Optional[str] = None) -> None:
    """Configure root logging"""
    logging.basicConfig(
        level=getattr(logging, (level or logging_config.level).upper()),
        format=logging_config.format,
    )

    # Rotate when a log file is configured
    if logging_config.file_path:
        from logging.handlers import RotatingFileHandler

        handler = RotatingFileHandler(
            logging_config.file_path,
            maxBytes=logging_config.max_file_size,
            backupCount=logging_config.backup_count,
        )
        handler.setFormatter(logging.Formatter(logging_config.format))
        logging.getLogger().addHandler(handler)
