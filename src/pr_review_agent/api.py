"""
Review Agent API

Main interface that orchestrates a review: fetch the pull request,
assemble the context, render the prompt, extract a caller-supplied
completion and post the result back to GitHub.
"""

import asyncio
import logging
import os
from typing import Dict, List, Optional, Sequence

from .config import AppConfig, TicketsConfig
from .formatting import format_result, to_inline_comments, review_event
from .github.client import GitHubClient, GitHubAPIError
from .github.parser import PRDiffParser
from .llm.extractor import ResponseExtractor
from .llm.prompts import PromptBuilder
from .models.pr_diff import PullRequest
from .models.review import ReviewResult
from .models.ticket import Ticket, LookupStatus
from .review.context import ContextBuilder, ReviewContext
from .skills.loader import SkillLoader
from .tickets import (
    TicketAdapter,
    TicketLookupError,
    GitHubIssueAdapter,
    JiraAdapter,
    LinearAdapter,
    extract_ticket_references,
)


logger = logging.getLogger(__name__)


def create_ticket_adapters(
    tickets_config: TicketsConfig,
    client: Optional[GitHubClient] = None
) -> List[TicketAdapter]:
    """
    Create adapters for the enabled ticket trackers.

    Args:
        tickets_config: Enabled trackers
        client: GitHub client for issue lookups (GitHub issues are skipped without one)

    Returns:
        Adapters in configuration order
    """
    adapters: List[TicketAdapter] = []
    for tracker in tickets_config.trackers:
        if tracker == 'github':
            if client is not None:
                adapters.append(GitHubIssueAdapter(client))
        elif tracker == 'jira':
            adapters.append(JiraAdapter(os.getenv("JIRA_URL", ""), os.getenv("JIRA_TOKEN", "")))
        elif tracker == 'linear':
            adapters.append(LinearAdapter(os.getenv("LINEAR_API_KEY", "")))
        else:
            logger.warning(f"Unknown ticket tracker: {tracker}")
    return adapters


class ReviewAgent:
    """
    Main review agent interface.

    Orchestrates the review process:
    1. Fetch PR metadata, raw diff and changed files
    2. Resolve linked tickets and match skills
    3. Render the review prompt
    4. Extract a completion into a ReviewResult and post it
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        client: Optional[GitHubClient] = None,
        skill_loader: Optional[SkillLoader] = None,
        ticket_adapters: Optional[Sequence[TicketAdapter]] = None
    ):
        """
        Initialize review agent.

        Args:
            config: Application configuration (defaults when None)
            client: GitHub client bound to the reviewed repository; only
                offline operations are available without one
            skill_loader: Skill source (defaults to the configured skills path)
            ticket_adapters: Ticket trackers (defaults to the configured trackers)
        """
        self.config = config or AppConfig()
        self.client = client

        self.skill_loader = skill_loader or SkillLoader(self.config.skills.path)
        self.diff_parser = PRDiffParser()
        self.context_builder = ContextBuilder()
        self.prompt_builder = PromptBuilder()
        self.extractor = ResponseExtractor(
            max_comments=self.config.extraction.max_comments,
            max_suggestions=self.config.extraction.max_suggestions,
            summary_fallback_chars=self.config.extraction.summary_fallback_chars,
        )

        if ticket_adapters is None:
            ticket_adapters = create_ticket_adapters(self.config.tickets, client)
        self.ticket_adapters = list(ticket_adapters)

    @classmethod
    def for_repository(cls, repository: str, config: Optional[AppConfig] = None) -> "ReviewAgent":
        """Create an agent with a GitHub client for an 'owner/repo' string."""
        config = config or AppConfig()
        client = GitHubClient.for_repository(
            repository,
            config.github.token,
            base_url=config.github.api_base_url,
            timeout_seconds=config.github.timeout_seconds,
        )
        return cls(config=config, client=client)

    def _require_client(self) -> GitHubClient:
        if self.client is None:
            raise ValueError("A GitHub client is required for this operation")
        return self.client

    async def build_context(
        self,
        pr_number: int,
        file_paths: Optional[Sequence[str]] = None,
        skill_name: Optional[str] = None
    ) -> ReviewContext:
        """
        Fetch a pull request and build its review context.

        Args:
            pr_number: Pull request number
            file_paths: Restrict the review to these paths
            skill_name: Skill to put first

        Returns:
            ReviewContext ready for prompt rendering
        """
        client = self._require_client()
        logger.info(f"Collecting PR data for {client.owner}/{client.repo}#{pr_number}")

        pr_data, raw_diff, files_data = await asyncio.gather(
            asyncio.to_thread(client.get_pull_request, pr_number),
            asyncio.to_thread(client.get_pull_request_diff, pr_number),
            asyncio.to_thread(client.get_pull_request_files, pr_number),
        )

        pr = self.diff_parser.parse_pull_request(pr_data)
        changes = self.diff_parser.parse_file_changes(files_data)
        diff = self.diff_parser.parse_diff(raw_diff, changes)

        skills = self.skill_loader.load_skills()
        tickets = await self.resolve_tickets(pr)

        context = self.context_builder.build(pr, diff, skills, self.config.review, tickets)

        if file_paths:
            context = self.context_builder.with_files(context, file_paths, skills)
        if skill_name:
            context = self.context_builder.with_skill_first(context, skill_name, skills)

        return context

    async def resolve_tickets(self, pr: PullRequest) -> List[Ticket]:
        """
        Resolve tickets referenced in the PR title and description.

        Lookups that fail or find nothing are logged and skipped.
        """
        references = extract_ticket_references(f"{pr.title}\n{pr.description}")
        tickets = []

        for reference in references:
            adapter = next((a for a in self.ticket_adapters if a.supports(reference)), None)
            if adapter is None:
                logger.debug(f"No tracker handles {reference.key}")
                continue

            try:
                lookup = await asyncio.to_thread(adapter.lookup, reference)
            except (GitHubAPIError, TicketLookupError) as e:
                logger.warning(f"Ticket lookup failed for {reference.key}: {e}")
                continue

            if lookup.status == LookupStatus.FOUND:
                tickets.append(lookup.ticket)
            else:
                logger.warning(f"Ticket {reference.key} skipped ({lookup.status.value}): {lookup.reason}")

        logger.info(f"Resolved {len(tickets)} of {len(references)} linked tickets")
        return tickets

    def render_prompt(self, context: ReviewContext, summary: bool = False) -> str:
        """Render the review prompt, or the short summary prompt."""
        if summary:
            return self.prompt_builder.render_summary(context)
        return self.prompt_builder.render(context)

    async def prepare_review(self, pr_number: int) -> str:
        """Build the context for a pull request and render its review prompt."""
        context = await self.build_context(pr_number)
        return self.render_prompt(context)

    async def prepare_summary(self, pr_number: int) -> str:
        context = await self.build_context(pr_number)
        return self.render_prompt(context, summary=True)

    async def review_files(self, pr_number: int, file_paths: Sequence[str]) -> str:
        """Render a review prompt covering only the given files."""
        context = await self.build_context(pr_number, file_paths=file_paths)
        return self.render_prompt(context)

    async def review_with_skill(self, pr_number: int, skill_name: str) -> str:
        """Render a review prompt with the named skill first."""
        context = await self.build_context(pr_number, skill_name=skill_name)
        return self.render_prompt(context)

    def process_completion(self, completion: str) -> ReviewResult:
        """Extract a model completion into a ReviewResult."""
        return self.extractor.extract(completion)

    def format(self, result: ReviewResult, kind: str = 'markdown') -> str:
        return format_result(result, kind)

    async def post_review(self, pr_number: int, result: ReviewResult) -> Dict:
        """
        Post a review result to the pull request.

        Args:
            pr_number: Pull request number
            result: ReviewResult to post

        Returns:
            Created review data
        """
        client = self._require_client()
        event = review_event(result.verdict)
        comments = to_inline_comments(result)

        try:
            response = await asyncio.to_thread(
                client.create_review, pr_number, result.summary, event, comments
            )
        except GitHubAPIError as e:
            logger.error(f"Failed to post review to #{pr_number}: {e}")
            raise

        logger.info(f"Posted {event} review with {len(comments)} comments to #{pr_number}")
        return response
