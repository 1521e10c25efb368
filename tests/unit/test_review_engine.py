"""
Unit tests for the Ollama client and the review engine.
"""

import pytest
from unittest.mock import Mock
import requests

from ollama_pr_reviewer.errors import RemoteFetchFailure, FailureKind
from ollama_pr_reviewer.llm.client import OllamaClient
from ollama_pr_reviewer.llm.engine import ReviewEngine
from ollama_pr_reviewer.models.review import FALLBACK_REVIEW_TEXT, EMPTY_REVIEW_TEXT


def make_client():
    client = OllamaClient()
    client.session = Mock()
    return client


class TestOllamaClient:
    """Unit tests for OllamaClient."""

    def test_generate_request_body(self, fake_response):
        client = make_client()
        client.session.post.return_value = fake_response(200, {'response': 'LGTM'})

        assert client.generate("review this") == 'LGTM'

        args, kwargs = client.session.post.call_args
        assert args == ('http://localhost:11434/api/generate',)
        assert kwargs['json'] == {'model': 'gemma3n:latest', 'prompt': 'review this', 'stream': False}
        assert kwargs['timeout'] is None

    def test_error_status_carries_body(self, fake_response):
        client = make_client()
        client.session.post.return_value = fake_response(500, text='model "gemma3n:latest" not found')

        with pytest.raises(RemoteFetchFailure) as exc_info:
            client.generate("review this")

        assert exc_info.value.kind is FailureKind.HTTP_STATUS
        assert exc_info.value.status_code == 500
        assert 'not found' in exc_info.value.body

    def test_malformed_body_is_transport_failure(self, fake_response):
        client = make_client()
        client.session.post.return_value = fake_response(200, text='<html>oops</html>')

        with pytest.raises(RemoteFetchFailure) as exc_info:
            client.generate("review this")

        assert exc_info.value.kind is FailureKind.TRANSPORT

    def test_non_string_response_field_is_transport_failure(self, fake_response):
        client = make_client()
        client.session.post.return_value = fake_response(200, {'response': ['not', 'text']})

        with pytest.raises(RemoteFetchFailure) as exc_info:
            client.generate("review this")

        assert exc_info.value.kind is FailureKind.TRANSPORT
        assert "'response' is not a string" in exc_info.value.message


class TestReviewEngine:
    """Unit tests for ReviewEngine."""

    def test_successful_review(self, fake_response):
        client = make_client()
        client.session.post.return_value = fake_response(200, {'response': 'Looks fine. Good to Ship 🚀'})

        result = ReviewEngine(client).review("prompt")

        assert result.succeeded
        assert result.text == 'Looks fine. Good to Ship 🚀'

    def test_empty_response_field(self, fake_response):
        client = make_client()
        client.session.post.return_value = fake_response(200, {'response': ''})

        result = ReviewEngine(client).review("prompt")

        assert result.succeeded
        assert result.text == EMPTY_REVIEW_TEXT

    def test_non_string_response_returns_fallback(self, fake_response):
        client = make_client()
        client.session.post.return_value = fake_response(200, {'response': ['not', 'text']})

        result = ReviewEngine(client).review("prompt")

        assert not result.succeeded
        assert result.text == FALLBACK_REVIEW_TEXT

    def test_non_success_status_returns_fallback(self, fake_response):
        client = make_client()
        client.session.post.return_value = fake_response(503, text='busy')

        result = ReviewEngine(client).review("prompt")

        assert not result.succeeded
        assert result.text == FALLBACK_REVIEW_TEXT

    @pytest.mark.parametrize("error", [
        requests.ConnectionError("connection refused"),
        requests.Timeout("timed out"),
    ])
    def test_transport_error_returns_fallback(self, error):
        client = make_client()
        client.session.post.side_effect = error

        result = ReviewEngine(client).review("prompt")

        assert not result.succeeded
        assert result.text == FALLBACK_REVIEW_TEXT

    def test_unexpected_error_never_raises(self):
        client = Mock()
        client.generate.side_effect = RuntimeError("boom")

        result = ReviewEngine(client).review("prompt")

        assert result.text == FALLBACK_REVIEW_TEXT
