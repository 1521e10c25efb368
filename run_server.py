#!/usr/bin/env python3
"""
Ollama PR Reviewer Server

Runs the GitHub App webhook receiver.

Usage:
    python run_server.py [config.yaml]

Without a config file, settings come from the environment (and .env):
APP_ID, WEBHOOK_SECRET, PRIVATE_KEY_PATH, OLLAMA_URL, OLLAMA_MODEL, PORT, ...
"""

from ollama_pr_reviewer.server import main


if __name__ == '__main__':
    print("🚀 Starting Ollama PR Reviewer...")
    print("📋 Endpoints:")
    print("   - Health Check: GET /api/v1/health")
    print("   - GitHub Webhook: POST /api/webhook")

    main()
