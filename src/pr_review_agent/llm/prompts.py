"""
Prompt Builder

Renders a review context into the prompt handed to the model.
Rendering is deterministic: the same context always yields the same text.

The diff budget applied upstream is counted in characters, which only
approximates the model's token budget (roughly four characters per token).
"""

import logging
from typing import Dict, List

from ..models.pr_diff import FileDiff
from ..models.skill import Skill
from ..models.ticket import Ticket
from ..review.context import ReviewContext, is_truncation_hunk


logger = logging.getLogger(__name__)


class PromptBuilder:
    """
    Builds structured review prompts.

    Section order is fixed: role, pull request, linked tickets, changed
    files, diff, skills, focus areas, instructions and output format.
    """

    def __init__(self):
        self.templates = self._load_templates()

    def render(self, context: ReviewContext) -> str:
        """
        Build the full review prompt for a context.

        Args:
            context: ReviewContext to render

        Returns:
            Complete prompt string
        """
        logger.debug(f"Rendering review prompt for #{context.pr.number}")

        sections = [
            self.templates["system_prompt"],
            self._format_pull_request(context),
        ]

        if context.tickets:
            sections.append(
                f"{self.templates['tickets_header']}\n{self._format_tickets(context.tickets)}"
            )

        sections.append(
            f"{self.templates['files_header']}\n{self._format_file_summary(context)}"
        )
        sections.append(
            f"{self.templates['diff_header']}\n{self._format_diff(context)}"
        )

        if context.skills:
            sections.append(
                f"{self.templates['skills_header']}\n{self._format_skills(context.skills)}"
            )

        if context.config.focus_areas:
            focus = "\n".join(f"- {area}" for area in context.config.focus_areas)
            sections.append(f"{self.templates['focus_header']}\n{focus}")

        sections.append(self.templates["review_instructions"])
        sections.append(self.templates["output_format"])

        return "\n\n".join(sections)

    def render_summary(self, context: ReviewContext) -> str:
        """Build the short prompt asking for a 2-3 sentence summary."""
        sections = [
            self.templates["summary_prompt"],
            self._format_pull_request(context),
            f"{self.templates['files_header']}\n{self._format_file_summary(context)}",
            f"{self.templates['diff_header']}\n{self._format_diff(context)}",
            self.templates["summary_instructions"],
        ]
        return "\n\n".join(sections)

    def _format_pull_request(self, context: ReviewContext) -> str:
        pr = context.pr
        description = pr.description.strip() or "No description provided."
        lines = [
            f"## Pull Request #{pr.number}: {pr.title}",
            f"Author: {pr.author.username}",
            f"Branches: {pr.source_branch} -> {pr.target_branch}",
            "",
            "### Description",
            description,
        ]
        return "\n".join(lines)

    def _format_tickets(self, tickets: List[Ticket]) -> str:
        formatted = []
        for ticket in tickets:
            text = f"### {ticket.key}: {ticket.title}\nStatus: {ticket.status}, Type: {ticket.type}"
            if ticket.labels:
                text += f"\nLabels: {', '.join(ticket.labels)}"
            if ticket.description.strip():
                text += f"\n{ticket.description.strip()}"
            if ticket.acceptance_criteria:
                criteria = "\n".join(f"- {item}" for item in ticket.acceptance_criteria)
                text += f"\nAcceptance criteria:\n{criteria}"
            formatted.append(text)
        return "\n\n".join(formatted)

    def _format_file_summary(self, context: ReviewContext) -> str:
        if not context.diff.files:
            return "No files changed."

        lines = []
        for file_diff in context.diff.files:
            change = file_diff.change
            line = f"- {change.path} ({change.status}, +{change.additions}/-{change.deletions})"
            if change.is_rename:
                line += f" (renamed from {change.previous_path})"
            lines.append(line)
        return "\n".join(lines)

    def _format_diff(self, context: ReviewContext) -> str:
        blocks = [self._format_file_diff(f) for f in context.diff.files]
        return "\n\n".join(blocks) if blocks else "No diff available."

    def _format_file_diff(self, file_diff: FileDiff) -> str:
        change = file_diff.change
        old_path = change.previous_path if change.is_rename else change.path
        lines = [f"--- a/{old_path}", f"+++ b/{change.path}"]

        for hunk in file_diff.hunks:
            if is_truncation_hunk(hunk):
                lines.append(hunk.content)
                continue
            lines.append(hunk.header)
            if hunk.content:
                lines.append(hunk.content)

        return "\n".join(lines)

    def _format_skills(self, skills: List[Skill]) -> str:
        formatted = []
        for skill in skills:
            text = f"### {skill.name}"
            if skill.description:
                text += f"\n{skill.description}"
            if skill.content.strip():
                text += f"\n\n{skill.content.strip()}"
            formatted.append(text)
        return "\n\n".join(formatted)

    def _load_templates(self) -> Dict[str, str]:
        """Load prompt template fragments."""
        return {
            "system_prompt": """You are an experienced software engineer reviewing a pull request.
Give specific, actionable feedback grounded in the changed code and in the review guidelines provided below.""",

            "summary_prompt": "You are an experienced software engineer summarizing a pull request.",

            "tickets_header": "## Linked Tickets",

            "files_header": "## Changed Files",

            "diff_header": "## Diff",

            "skills_header": "## Review Guidelines",

            "focus_header": "## Focus Areas\nPay particular attention to:",

            "review_instructions": """## Review Instructions
1. Check the changes for correctness, security, performance and maintainability
2. Follow the review guidelines above where they apply
3. Comment only on lines that appear in the diff, using line numbers of the new file
4. Keep each comment focused on a single issue and explain how to fix it
5. Do not comment on code style that tooling already enforces""",

            "output_format": """## Output Format
Respond using exactly the following structure:

SUMMARY:
<a short overview of the change and its overall quality>

COMMENTS:
[File: <path>, Line: <number>]
<the comment>
```suggestion
<optional replacement code for the commented line>
```

SUGGESTIONS:
[Suggestion: <path>, Line: <number>]
<why the change helps>
```old
<current code>
```
```new
<proposed code>
```

VERDICT: approve|request_changes|comment

Leave COMMENTS and SUGGESTIONS empty when there is nothing to report.""",

            "summary_instructions": """## Instructions
Summarize this pull request in 2-3 sentences: what it changes and why.
Do not include review comments.""",
        }
