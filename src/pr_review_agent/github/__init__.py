"""
GitHub Integration Layer

This module provides GitHub API access and unified diff parsing.
"""

from .client import GitHubClient, GitHubAPIError
from .parser import PRDiffParser

__all__ = ['GitHubClient', 'GitHubAPIError', 'PRDiffParser']
