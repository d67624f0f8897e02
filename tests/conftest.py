"""Shared test fixtures for Jira Test Readiness tests."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from google.genai import types

import jira_test_readiness.config as config_module
import jira_test_readiness.server as server_module
from jira_test_readiness.config import Settings
from jira_test_readiness.gemini import GeminiInvoker
from jira_test_readiness.jira import JiraClient
from jira_test_readiness.log import correlation_id
from jira_test_readiness.models import IssueRecord

JIRA_BASE_URL = "https://acme.atlassian.net"


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset global singletons after each test to prevent state leakage."""
    yield
    server_module._jira_client = None
    server_module._invoker = None
    server_module._shutdown_event.clear()
    config_module._settings = None
    correlation_id.set("")


@pytest.fixture
def settings():
    """Fully configured settings that never read the environment."""
    return Settings(
        _env_file=None,
        jira_url=JIRA_BASE_URL,
        jira_email="qa@acme.test",
        jira_api_token="jira-token",
        jira_project_key="proj",
        gemini_api_key="gemini-key",
    )


@pytest.fixture
def make_issue_payload():
    """Factory for Jira issue API responses."""

    def _make(key="PROJ-42", summary="Fix bug", description=None, comments=None):
        fields = {"summary": summary, "description": description}
        if comments is not None:
            fields["comment"] = {"comments": [{"body": body} for body in comments]}
        return {"key": key, "fields": fields}

    return _make


@pytest.fixture
def make_jira_client():
    """Factory for a JiraClient backed by httpx.MockTransport.

    The handler receives each httpx.Request and returns an httpx.Response;
    every request is recorded on the returned client's `requests` list.
    """

    def _make(handler, project_key="proj"):
        requests: list[httpx.Request] = []

        def _recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(_recording_handler))
        client = JiraClient(
            base_url=JIRA_BASE_URL,
            email="qa@acme.test",
            api_token="jira-token",
            project_key=project_key,
            http_client=http_client,
        )
        client.requests = requests
        return client

    return _make


@pytest.fixture
def make_gemini_response():
    """Factory for google-genai GenerateContentResponse objects."""

    def _make(text: str | None = None, block_reason=None, candidates=True):
        prompt_feedback = None
        if block_reason is not None:
            prompt_feedback = types.GenerateContentResponsePromptFeedback(
                block_reason=block_reason
            )
        candidate_list = None
        if candidates:
            candidate_list = [
                types.Candidate(
                    content=types.Content(role="model", parts=[types.Part(text=text)])
                )
            ]
        return types.GenerateContentResponse(
            candidates=candidate_list, prompt_feedback=prompt_feedback
        )

    return _make


@pytest.fixture
def mock_genai_client_factory(make_gemini_response):
    """Factory for a mock genai.Client whose async generate_content returns canned text."""

    def _make(text: str | None = None, **kwargs) -> MagicMock:
        mock_client = MagicMock()
        mock_client.aio.models.generate_content = AsyncMock(
            return_value=make_gemini_response(text, **kwargs)
        )
        return mock_client

    return _make


@pytest.fixture
def make_invoker(mock_genai_client_factory):
    """Factory for a GeminiInvoker over a mock client."""

    def _make(text: str | None = None, **kwargs) -> GeminiInvoker:
        return GeminiInvoker(client=mock_genai_client_factory(text, **kwargs), model="gemini-test")

    return _make


@pytest.fixture
def sample_issue():
    """Minimal valid IssueRecord."""
    return IssueRecord(
        id="PROJ-42",
        url=f"{JIRA_BASE_URL}/browse/PROJ-42",
        summary="Fix bug",
        description=None,
        comments=(),
    )
