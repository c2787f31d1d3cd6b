#!/usr/bin/env python3
"""
Review Demo

Fetches a pull request, prints the assembled review prompt and, when a
completion file is given, the extracted review.

Usage:
    python examples/review_demo.py <owner/repo> <pr_number> [completion.txt]

Example:
    GITHUB_TOKEN=... python examples/review_demo.py octocat hello-world 42 reply.txt
"""

import asyncio
import os
import sys
import logging

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pr_review_agent import ReviewAgent, load_config
from pr_review_agent.config import setup_logging
from pr_review_agent.github.client import GitHubAPIError


SKILLS_DIR = os.path.join(os.path.dirname(__file__), 'skills')


def main():
    """Main demo function."""
    if len(sys.argv) not in (3, 4):
        print("Usage: python review_demo.py <owner/repo> <pr_number> [completion.txt]")
        sys.exit(1)

    repository = sys.argv[1]
    try:
        pr_number = int(sys.argv[2])
    except ValueError:
        print("Error: PR number must be an integer")
        sys.exit(1)

    config = load_config(os.getenv("PR_REVIEW_CONFIG"))
    config.skills.path = SKILLS_DIR
    setup_logging(config.logging)
    logger = logging.getLogger(__name__)

    try:
        agent = ReviewAgent.for_repository(repository, config)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    try:
        context = asyncio.run(agent.build_context(pr_number))
    except GitHubAPIError as e:
        logger.error(f"GitHub API error: {e}")
        print(f"Error: {e}")
        sys.exit(1)

    print(f"\n📋 PR #{context.pr.number}: {context.pr.title}")
    print(f"   Files: {len(context.file_paths)}")
    print(f"   Skills: {', '.join(s.name for s in context.skills) or 'none'}")
    print(f"   Tickets: {', '.join(t.key for t in context.tickets) or 'none'}")
    if context.truncated:
        print("   ⚠️  Diff truncated to fit the budget")

    print("\n" + "=" * 60)
    print(agent.render_prompt(context))
    print("=" * 60)

    if len(sys.argv) == 4:
        with open(sys.argv[3], encoding='utf-8') as f:
            result = agent.process_completion(f.read())
        print()
        print(agent.format(result, 'markdown'))


if __name__ == '__main__':
    main()
