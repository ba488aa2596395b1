"""
Test Configuration and Fixtures
"""
from types import SimpleNamespace

import httpx
import openai
import pytest
from handwriting import create_app

GATEWAY_URL = "https://gateway.test/v1/chat/completions"


class FakeCompletions:
    """Stands in for client.chat.completions; answers with scripted outcomes in order."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def create(self, model, messages, **kwargs):
        image = messages[0]["content"][1]["image_url"]["url"]
        self.calls.append({"model": model, "image": image, "messages": messages})
        outcome = self.outcomes[len(self.calls) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        message = SimpleNamespace(content=outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeClient:
    def __init__(self, outcomes=()):
        self.completions = FakeCompletions(outcomes)
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls


def status_error(status, message="upstream failure"):
    """Build the openai SDK exception raised for a non-success HTTP status."""
    response = httpx.Response(status, request=httpx.Request("POST", GATEWAY_URL))
    if status == 429:
        return openai.RateLimitError(message, response=response, body=None)
    if status >= 500:
        return openai.InternalServerError(message, response=response, body=None)
    return openai.APIStatusError(message, response=response, body=None)


@pytest.fixture(scope='function')
def app():
    """Create application for testing"""
    app = create_app('testing')
    app.config['TESTING'] = True
    yield app


@pytest.fixture(scope='function')
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def upstream(monkeypatch):
    """Install a scripted upstream client: upstream("Hello", status_error(429), ...)"""
    from handwriting import api

    def install(*outcomes):
        fake = FakeClient(outcomes)
        monkeypatch.setattr(api, "get_client", lambda: fake)
        return fake

    return install
