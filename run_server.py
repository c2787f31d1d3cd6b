#!/usr/bin/env python3
"""
PR Review Agent Server

Runs the Flask HTTP server for the PR review agent.
"""

import os

from pr_review_agent.config import load_config, setup_logging
from pr_review_agent.server import create_app


config = load_config(os.getenv("PR_REVIEW_CONFIG"))
setup_logging(config.logging)

app = create_app(config)

if __name__ == '__main__':
    port = int(os.getenv("PORT", "8000"))

    print("🚀 Starting PR Review Agent Server...")
    print(f"📍 Server will be available at: http://localhost:{port}")
    print("📋 API Documentation:")
    print("   - Health Check: GET /api/v1/health")
    print("   - Parse Completion: POST /api/v1/reviews/parse")
    print("   - Render Prompt: POST /api/v1/reviews/prompt")
    print("   - Submit Review: POST /api/v1/reviews/submit")

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug
    )
