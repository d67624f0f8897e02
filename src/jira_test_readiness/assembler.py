"""Assembly of the test readiness envelope."""

import logging

from pydantic import ValidationError

from jira_test_readiness.models import IssueRecord, ReadinessEnvelope
from jira_test_readiness.prompts import is_fallback_result

logger = logging.getLogger("jira_test_readiness")

SOURCE_TAG = "jira+gemini"


def assemble_envelope(
    identifier: str,
    issue: IssueRecord,
    ai_text: str,
    protocol_version: str,
) -> ReadinessEnvelope:
    """Package issue metadata and generated text into a validated envelope.

    Every field is produced internally, so a schema failure here is a bug
    and is raised as RuntimeError instead of a tool error.
    """
    status = "fallback" if is_fallback_result(ai_text) else "success"
    payload = {
        "protocolVersion": protocol_version,
        "source": SOURCE_TAG,
        "identifier": identifier,
        "context": {
            "jiraUrl": issue.url,
            "jiraSummary": issue.summary,
            "testPlanAndScript": ai_text,
            "aiResultStatus": status,
        },
    }

    try:
        return ReadinessEnvelope.model_validate(payload)
    except ValidationError as e:
        logger.critical("Assembled envelope for %s failed validation: %s", identifier, e)
        raise RuntimeError(f"Assembled envelope failed validation: {e}") from e
