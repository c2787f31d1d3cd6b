"""
Command Line Interface

``pr-review`` renders review prompts for pull requests, parses model
completions and posts the resulting reviews.
"""

import asyncio
import json
import logging
from typing import Optional, Tuple

import click

from .api import ReviewAgent
from .config import AppConfig, ConfigError, load_config, setup_logging
from .formatting import OutputFormat
from .github.client import GitHubAPIError
from .skills.loader import SkillLoader


logger = logging.getLogger(__name__)

OUTPUT_CHOICES = click.Choice([f.value for f in OutputFormat])


def _read_completion(completion) -> str:
    text = completion.read()
    if not text.strip():
        raise click.ClickException("Completion is empty")
    return text


def _agent_for(ctx, repo: str) -> ReviewAgent:
    config: AppConfig = ctx.obj['config']
    try:
        return ReviewAgent.for_repository(repo, config)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--repo")


@click.group()
@click.option(
    "-c", "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Path to the YAML configuration file",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, config_path: Optional[str], verbose: bool):
    """Prompt assembly and response extraction for pull request reviews."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    setup_logging(config.logging, level="DEBUG" if verbose or config.debug else None)
    ctx.obj = {'config': config}


@cli.command("prompt")
@click.option("--repo", required=True, help="Repository as owner/repo")
@click.option("--pr", "pr_number", required=True, type=click.IntRange(min=1), help="Pull request number")
@click.option("--file", "files", multiple=True, help="Only review this path (repeatable)")
@click.option("--skill", "skill_name", help="Put this skill first")
@click.option("--summary", is_flag=True, help="Render the short summary prompt instead")
@click.pass_context
def prompt(ctx, repo: str, pr_number: int, files: Tuple[str, ...], skill_name: Optional[str], summary: bool):
    """Fetch a pull request and print its review prompt."""
    agent = _agent_for(ctx, repo)

    try:
        context = asyncio.run(
            agent.build_context(pr_number, file_paths=files or None, skill_name=skill_name)
        )
    except GitHubAPIError as e:
        logger.error(f"GitHub request failed: {e}")
        raise click.ClickException(f"GitHub request failed: {e}")

    if context.truncated:
        click.secho("Diff was truncated to fit the configured budget", fg="yellow", err=True)

    click.echo(agent.render_prompt(context, summary=summary))


@cli.command("parse")
@click.option(
    "--completion",
    required=True,
    type=click.File("r", encoding="utf-8"),
    help="Completion text file, or - for stdin",
)
@click.option("--output", "output_format", type=OUTPUT_CHOICES, default="markdown", show_default=True)
@click.pass_context
def parse(ctx, completion, output_format: str):
    """Extract a completion offline and print the formatted result."""
    agent = ReviewAgent(config=ctx.obj['config'])
    result = agent.process_completion(_read_completion(completion))
    click.echo(agent.format(result, output_format))


@cli.command("review")
@click.option("--repo", required=True, help="Repository as owner/repo")
@click.option("--pr", "pr_number", required=True, type=click.IntRange(min=1), help="Pull request number")
@click.option(
    "--completion",
    required=True,
    type=click.File("r", encoding="utf-8"),
    help="Completion text file, or - for stdin",
)
@click.option("--output", "output_format", type=OUTPUT_CHOICES, default="markdown", show_default=True)
@click.option("--post/--dry-run", default=False, help="Post the review to GitHub")
@click.pass_context
def review(ctx, repo: str, pr_number: int, completion, output_format: str, post: bool):
    """Extract a completion and optionally post it as a pull request review."""
    agent = _agent_for(ctx, repo)
    result = agent.process_completion(_read_completion(completion))
    click.echo(agent.format(result, output_format))

    if not post:
        click.secho("Dry run: review not posted", fg="yellow", err=True)
        return

    try:
        asyncio.run(agent.post_review(pr_number, result))
    except GitHubAPIError as e:
        raise click.ClickException(f"Posting review failed: {e}")

    click.secho(f"Posted review to {repo}#{pr_number}", fg="green", err=True)


@cli.command("skills")
@click.option(
    "--path",
    "skills_path",
    type=click.Path(file_okay=False),
    help="Skills directory (defaults to the configured path)",
)
@click.pass_context
def skills(ctx, skills_path: Optional[str]):
    """List available review skills."""
    loader = SkillLoader(skills_path or ctx.obj['config'].skills.path)
    found = loader.list_skills()

    if not found:
        click.echo(f"No skills found in {loader.skills_path}")
        return

    for skill in found:
        triggers = ", ".join(skill.triggers) or "-"
        click.echo(f"{skill.name} [{skill.priority.value}] {skill.description}")
        click.echo(f"  triggers: {triggers}")


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Print the effective configuration (token omitted)."""
    click.echo(json.dumps(ctx.obj['config'].to_dict(), indent=2))


if __name__ == "__main__":
    cli()
