"""Jira Test Readiness: MCP server turning Jira tickets into test plans and scripts."""

from jira_test_readiness.assembler import SOURCE_TAG, assemble_envelope
from jira_test_readiness.config import Settings, get_settings
from jira_test_readiness.errors import (
    AuthenticationFailedError,
    AuthorizationFailedError,
    ClientNotConfiguredError,
    ContentBlockedError,
    EmptyModelResponseError,
    GeminiError,
    InvalidIdentifierFormatError,
    InvalidModelOutputError,
    IssueNotFoundError,
    JiraError,
    ModelRequestFailedError,
    ReadinessError,
    UnexpectedFetchError,
    UpstreamRequestFailedError,
)
from jira_test_readiness.gemini import GeminiInvoker
from jira_test_readiness.jira import JiraClient, normalize_ticket_id
from jira_test_readiness.models import (
    IssueRecord,
    ReadinessContext,
    ReadinessEnvelope,
    TicketNumberInput,
)
from jira_test_readiness.prompts import (
    FALLBACK_MARKER,
    PROMPT_VERSION,
    build_test_readiness_prompt,
    is_fallback_result,
)

# Note: Server objects (app, get_test_readiness_per_jira) are intentionally NOT
# imported here to avoid double module initialization when server.py is run
# as __main__. Import from jira_test_readiness.server directly.

__all__ = [
    "FALLBACK_MARKER",
    "PROMPT_VERSION",
    "SOURCE_TAG",
    "AuthenticationFailedError",
    "AuthorizationFailedError",
    "ClientNotConfiguredError",
    "ContentBlockedError",
    "EmptyModelResponseError",
    "GeminiError",
    "GeminiInvoker",
    "InvalidIdentifierFormatError",
    "InvalidModelOutputError",
    "IssueNotFoundError",
    "IssueRecord",
    "JiraClient",
    "JiraError",
    "ModelRequestFailedError",
    "ReadinessContext",
    "ReadinessEnvelope",
    "ReadinessError",
    "Settings",
    "TicketNumberInput",
    "UnexpectedFetchError",
    "UpstreamRequestFailedError",
    "assemble_envelope",
    "build_test_readiness_prompt",
    "get_settings",
    "is_fallback_result",
    "normalize_ticket_id",
]
