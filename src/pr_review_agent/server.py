"""
HTTP Server

Flask application exposing prompt rendering, completion parsing and
review submission over HTTP.
"""

import asyncio
import logging
from typing import Callable, Optional

from flask import Flask, request, jsonify
from flask_cors import CORS

from . import __version__
from .api import ReviewAgent
from .config import AppConfig
from .formatting import OutputFormat
from .github.client import GitHubAPIError
from .models.review import ReviewResultPayload


logger = logging.getLogger(__name__)


class RequestError(Exception):
    """Client request is missing or has invalid fields"""


def _require(data: dict, *fields):
    missing = [f for f in fields if data.get(f) in (None, '')]
    if missing:
        raise RequestError(f"Missing required fields: {', '.join(missing)}")


def _pr_number(data: dict) -> int:
    try:
        number = int(data['pr_number'])
    except (TypeError, ValueError):
        raise RequestError("pr_number must be an integer")
    if number <= 0:
        raise RequestError("pr_number must be positive")
    return number


def create_app(
    config: Optional[AppConfig] = None,
    agent_factory: Optional[Callable[[str], ReviewAgent]] = None
) -> Flask:
    """
    Create the Flask application.

    Args:
        config: Application configuration (defaults when None)
        agent_factory: Builds a ReviewAgent for an 'owner/repo' string

    Returns:
        Configured Flask app
    """
    config = config or AppConfig()
    if agent_factory is None:
        def agent_factory(repository: str) -> ReviewAgent:
            return ReviewAgent.for_repository(repository, config)

    app = Flask(__name__)
    CORS(app)

    @app.errorhandler(RequestError)
    def handle_request_error(e):
        return jsonify({'error': str(e), 'status': 'failed'}), 400

    @app.errorhandler(GitHubAPIError)
    def handle_github_error(e):
        logger.error(f"GitHub request failed: {e}")
        status = e.status_code if e.status_code and 400 <= e.status_code < 500 else 502
        return jsonify({'error': str(e), 'status': 'failed'}), status

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'service': 'pr-review-agent',
            'version': __version__
        })

    @app.route('/api/v1/reviews/parse', methods=['POST'])
    def parse_completion():
        """Extract a completion into a structured review."""
        data = request.get_json(silent=True) or {}
        _require(data, 'completion')

        output_format = data.get('output', OutputFormat.JSON.value)
        if output_format not in {f.value for f in OutputFormat}:
            raise RequestError(f"Unknown output format: {output_format}")

        agent = ReviewAgent(config=config, ticket_adapters=[])
        result = agent.process_completion(data['completion'])

        return jsonify({
            'status': 'completed',
            'result': ReviewResultPayload.from_result(result).model_dump(mode='json'),
            'formatted': agent.format(result, output_format),
        })

    @app.route('/api/v1/reviews/prompt', methods=['POST'])
    def render_prompt():
        """Fetch a pull request and render its review prompt."""
        data = request.get_json(silent=True) or {}
        _require(data, 'repository', 'pr_number')
        pr_number = _pr_number(data)

        try:
            agent = agent_factory(data['repository'])
        except ValueError as e:
            raise RequestError(str(e))

        context = asyncio.run(agent.build_context(
            pr_number,
            file_paths=data.get('files') or None,
            skill_name=data.get('skill'),
        ))

        return jsonify({
            'status': 'completed',
            'prompt': agent.render_prompt(context, summary=bool(data.get('summary'))),
            'truncated': context.truncated,
            'files': list(context.file_paths),
            'skills': [skill.name for skill in context.skills],
            'tickets': [ticket.key for ticket in context.tickets],
        })

    @app.route('/api/v1/reviews/submit', methods=['POST'])
    def submit_review():
        """Extract a completion and post it as a pull request review."""
        data = request.get_json(silent=True) or {}
        _require(data, 'repository', 'pr_number', 'completion')
        pr_number = _pr_number(data)

        try:
            agent = agent_factory(data['repository'])
        except ValueError as e:
            raise RequestError(str(e))

        result = agent.process_completion(data['completion'])
        response = {
            'status': 'completed',
            'result': ReviewResultPayload.from_result(result).model_dump(mode='json'),
            'posted': False,
        }

        if data.get('post', True):
            review = asyncio.run(agent.post_review(pr_number, result))
            response['posted'] = True
            response['review_id'] = review.get('id')

        return jsonify(response)

    return app
