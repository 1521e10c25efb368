"""
Shared test fixtures.
"""

import json
import pytest
from unittest.mock import Mock

from ollama_pr_reviewer.config import AppConfig, GitHubAppConfig


def build_response(status_code=200, json_data=None, text=None):
    """Create a Mock standing in for requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if text is None:
        text = json.dumps(json_data) if json_data is not None else ""
    response.text = text
    response.content = text.encode('utf-8')
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    response.headers = {}
    return response


@pytest.fixture
def fake_response():
    """Factory for fake HTTP responses."""
    return build_response


@pytest.fixture
def app_config():
    """Configuration with GitHub App values filled in."""
    return AppConfig(
        github=GitHubAppConfig(
            app_id="12345",
            webhook_secret="test-secret",
            private_key_path="unused.pem",
        )
    )


@pytest.fixture
def pr_payload():
    """Minimal pull_request.opened webhook payload."""
    return {
        'action': 'opened',
        'number': 42,
        'pull_request': {
            'number': 42,
            'body': 'fix bug',
            'title': 'Fix bug',
        },
        'repository': {
            'name': 'widgets',
            'full_name': 'acme/widgets',
            'owner': {'login': 'acme'},
        },
        'installation': {'id': 777},
    }
