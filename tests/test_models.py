import json

import pytest
from pydantic import ValidationError

from jira_test_readiness.models import (
    DEFAULT_SUMMARY,
    IssueRecord,
    ReadinessContext,
    ReadinessEnvelope,
    TicketNumberInput,
)


def _context(**overrides):
    data = {
        "jira_url": "https://acme.atlassian.net/browse/PROJ-42",
        "jira_summary": "Fix bug",
        "test_plan_and_script": "- [ ] Test X\n\n#!/bin/zsh\necho hi",
        "ai_result_status": "success",
    }
    data.update(overrides)
    return ReadinessContext(**data)


class TestTicketNumberInput:
    """Tests for tool input validation."""

    def test_accepts_positive_int(self):
        """Verify positive integers pass."""
        assert TicketNumberInput(ticket_number=42).ticket_number == 42

    def test_accepts_camel_case_alias(self):
        """Verify the wire name ticketNumber is accepted."""
        assert TicketNumberInput.model_validate({"ticketNumber": 7}).ticket_number == 7

    @pytest.mark.parametrize("value", [0, -1, 1.5, "42", True, None])
    def test_rejects_non_positive_or_non_int(self, value):
        """Verify zero, negatives, floats, strings, bools and None are rejected."""
        with pytest.raises(ValidationError):
            TicketNumberInput(ticket_number=value)


class TestIssueRecord:
    """Tests for the normalized issue record."""

    def test_defaults(self):
        """Verify summary and comments defaults."""
        issue = IssueRecord(id="PROJ-1", url="https://acme.atlassian.net/browse/PROJ-1")
        assert issue.summary == DEFAULT_SUMMARY
        assert issue.description is None
        assert issue.comments == ()

    def test_description_passes_through_structured_content(self):
        """Verify ADF content is kept as-is."""
        adf = {"type": "doc", "version": 1, "content": []}
        issue = IssueRecord(id="PROJ-1", url="u", description=adf, comments=[adf, "plain"])
        assert issue.description == adf
        assert issue.comments == (adf, "plain")

    def test_rejects_unnormalized_id(self):
        """Verify the id must be an uppercase PROJECT-NUMBER key."""
        with pytest.raises(ValidationError):
            IssueRecord(id="proj-1", url="u")

    def test_is_frozen(self):
        """Verify IssueRecord cannot be mutated after creation."""
        issue = IssueRecord(id="PROJ-1", url="u")
        with pytest.raises(ValidationError):
            issue.summary = "changed"


class TestReadinessEnvelope:
    """Tests for the output envelope schema."""

    def test_serializes_with_camel_case_keys(self):
        """Verify to_json emits the external camelCase field names."""
        envelope = ReadinessEnvelope(
            protocol_version="1.0",
            source="jira+gemini",
            identifier="PROJ-42",
            context=_context(),
        )

        data = json.loads(envelope.to_json())

        assert data == {
            "protocolVersion": "1.0",
            "source": "jira+gemini",
            "identifier": "PROJ-42",
            "context": {
                "jiraUrl": "https://acme.atlassian.net/browse/PROJ-42",
                "jiraSummary": "Fix bug",
                "testPlanAndScript": "- [ ] Test X\n\n#!/bin/zsh\necho hi",
                "aiResultStatus": "success",
            },
        }

    def test_to_json_is_indented(self):
        """Verify output is formatted for display."""
        envelope = ReadinessEnvelope(
            protocol_version="1.0", source="jira+gemini", identifier="PROJ-42", context=_context()
        )
        assert envelope.to_json().startswith('{\n  "protocolVersion"')

    def test_jira_url_kept_verbatim(self):
        """Verify URL validation does not normalize the string."""
        assert _context(jira_url="https://acme.atlassian.net/browse/PROJ-42").jira_url == (
            "https://acme.atlassian.net/browse/PROJ-42"
        )

    @pytest.mark.parametrize("url", ["not a url", "ftp://acme/browse/PROJ-1", ""])
    def test_rejects_malformed_url(self, url):
        """Verify jiraUrl must be a well-formed http(s) URL."""
        with pytest.raises(ValidationError):
            _context(jira_url=url)

    def test_rejects_unknown_status(self):
        """Verify aiResultStatus is limited to success and fallback."""
        with pytest.raises(ValidationError):
            _context(ai_result_status="partial")

    def test_rejects_bad_identifier(self):
        """Verify identifier must be a normalized key."""
        with pytest.raises(ValidationError):
            ReadinessEnvelope(
                protocol_version="1.0", source="jira+gemini", identifier="42", context=_context()
            )
