from typing import Any, Literal

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

ISSUE_ID_PATTERN = r"^[A-Z][A-Z0-9]+-\d+$"

DEFAULT_SUMMARY = "No summary provided."

_http_url = TypeAdapter(AnyHttpUrl)


class TicketNumberInput(BaseModel):
    """Validated input of the test readiness tool."""

    model_config = ConfigDict(populate_by_name=True)

    ticket_number: StrictInt = Field(
        ...,
        gt=0,
        alias="ticketNumber",
        description="Ticket number must be a positive integer",
    )


class IssueRecord(BaseModel):
    """A Jira issue reduced to the fields used for prompting.

    description and comment bodies are opaque: Atlassian Document Format
    nodes, plain text, or None.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., pattern=ISSUE_ID_PATTERN, description="Normalized issue key")
    url: str = Field(..., min_length=1, description="Browse URL of the issue")
    summary: str = Field(default=DEFAULT_SUMMARY, description="Issue summary")
    description: Any = Field(default=None, description="Issue description content")
    comments: tuple[Any, ...] = Field(
        default_factory=tuple, description="Comment bodies in Jira order"
    )


class ReadinessContext(BaseModel):
    """Issue metadata and AI output carried inside the envelope."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    jira_url: str = Field(..., description="Browse URL of the issue")
    jira_summary: str = Field(..., description="Issue summary")
    test_plan_and_script: str = Field(..., description="Checklist followed by the zsh script")
    ai_result_status: Literal["success", "fallback"] = Field(
        ..., description="fallback when the model reported insufficient information"
    )

    @field_validator("jira_url")
    @classmethod
    def validate_jira_url(cls, value: str) -> str:
        """Require a well-formed http(s) URL but keep the original string."""
        _http_url.validate_python(value)
        return value


class ReadinessEnvelope(BaseModel):
    """The single structured result of the test readiness tool."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    protocol_version: str = Field(..., min_length=1, description="Envelope protocol version")
    source: str = Field(..., min_length=1, description="Upstream systems combined")
    identifier: str = Field(..., pattern=ISSUE_ID_PATTERN, description="Normalized issue key")
    context: ReadinessContext

    def to_json(self) -> str:
        """Serialize with camelCase keys, formatted for display."""
        return self.model_dump_json(by_alias=True, indent=2)
