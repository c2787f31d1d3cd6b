"""
GitHub API Client

Thin wrapper over the GitHub REST API for fetching pull request data
and posting reviews.
"""

import logging
from typing import Dict, List, Optional
import requests

from ..models.review import InlineCommentDirective


logger = logging.getLogger(__name__)

DIFF_MEDIA_TYPE = 'application/vnd.github.v3.diff'


class GitHubAPIError(Exception):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class GitHubClient:
    """
    GitHub API client bound to one repository.

    Provides methods for:
    - PR metadata, raw diff and changed file retrieval
    - Issue lookup for linked tickets
    - Review submission with inline comments
    """

    def __init__(
        self,
        token: Optional[str],
        owner: str,
        repo: str,
        base_url: str = "https://api.github.com",
        timeout_seconds: int = 30
    ):
        """
        Initialize GitHub client.

        Args:
            token: GitHub access token (anonymous access when None)
            owner: Repository owner
            repo: Repository name
            base_url: GitHub API base URL
            timeout_seconds: Per-request timeout
        """
        self.token = token
        self.owner = owner
        self.repo = repo
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.session = self._create_session()

    @classmethod
    def for_repository(cls, repository: str, token: Optional[str], **kwargs) -> "GitHubClient":
        """Create a client from an 'owner/repo' string."""
        owner, _, repo = repository.partition('/')
        if not owner or not repo:
            raise ValueError("Repository must be in format 'owner/repo'")
        return cls(token, owner, repo, **kwargs)

    def _create_session(self) -> requests.Session:
        """Create requests session with default headers."""
        session = requests.Session()
        session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'PR-Review-Agent/0.1'
        })
        if self.token:
            session.headers['Authorization'] = f'token {self.token}'
        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make a request to the GitHub API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API and transport errors
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout_seconds)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}") from e

        if not response.ok:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    @property
    def _repo_path(self) -> str:
        return f'/repos/{self.owner}/{self.repo}'

    def get_pull_request(self, pr_number: int) -> Dict:
        """Get pull request information."""
        logger.info(f"Fetching PR {self.owner}/{self.repo}#{pr_number}")
        response = self._make_request('GET', f'{self._repo_path}/pulls/{pr_number}')
        return response.json()

    def get_pull_request_diff(self, pr_number: int) -> str:
        """Get the raw unified diff of a pull request."""
        logger.info(f"Fetching PR diff {self.owner}/{self.repo}#{pr_number}")
        response = self._make_request(
            'GET',
            f'{self._repo_path}/pulls/{pr_number}',
            headers={'Accept': DIFF_MEDIA_TYPE}
        )
        return response.text

    def get_pull_request_files(self, pr_number: int) -> List[Dict]:
        """
        Get files changed in a pull request.

        Args:
            pr_number: Pull request number

        Returns:
            List of file change data, in API order
        """
        logger.info(f"Fetching PR files for {self.owner}/{self.repo}#{pr_number}")

        files = []
        page = 1
        per_page = 100

        while True:
            response = self._make_request(
                'GET',
                f'{self._repo_path}/pulls/{pr_number}/files',
                params={'page': page, 'per_page': per_page}
            )

            page_files = response.json()
            if not page_files:
                break

            files.extend(page_files)

            if len(page_files) < per_page:
                break

            page += 1

        logger.info(f"Found {len(files)} changed files")
        return files

    def get_issue(self, issue_number: int) -> Optional[Dict]:
        """
        Get an issue, or None if it does not exist.

        Args:
            issue_number: Issue number

        Returns:
            Issue data or None if not found
        """
        try:
            response = self._make_request('GET', f'{self._repo_path}/issues/{issue_number}')
            return response.json()
        except GitHubAPIError as e:
            if e.status_code == 404:
                logger.warning(f"Issue not found: #{issue_number}")
                return None
            raise

    def create_review(
        self,
        pr_number: int,
        body: str,
        event: str,
        comments: List[InlineCommentDirective]
    ) -> Dict:
        """
        Submit a pull request review with inline comments.

        Args:
            pr_number: Pull request number
            body: Review summary
            event: APPROVE, REQUEST_CHANGES or COMMENT
            comments: Inline comments to attach

        Returns:
            Created review data
        """
        logger.info(f"Submitting {event} review with {len(comments)} comments to #{pr_number}")
        payload = {
            'body': body,
            'event': event,
            'comments': [
                {'path': c.path, 'line': c.line, 'side': 'RIGHT', 'body': c.body}
                for c in comments
            ],
        }
        response = self._make_request('POST', f'{self._repo_path}/pulls/{pr_number}/reviews', json=payload)
        return response.json()
