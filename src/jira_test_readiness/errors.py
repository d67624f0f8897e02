"""Error taxonomy for the Jira fetch and Gemini generation stages.

Every failure surfaced by a tool call is one of these (or a pydantic
ValidationError for malformed tool input).
"""


class ReadinessError(Exception):
    """Base class for all test readiness pipeline errors."""

    pass


# Jira


class JiraError(ReadinessError):
    """Base class for ticket normalization and Jira fetch errors."""

    pass


class InvalidIdentifierFormatError(JiraError):
    """Raised when a ticket reference is neither a number nor a PROJ-123 key."""

    def __init__(self, reference: object):
        super().__init__(
            f'Invalid Jira ticket ID format provided: "{reference}". '
            'Expected format like "PROJ-123" or just a number like "123".'
        )
        self.reference = reference


class IssueNotFoundError(JiraError):
    """Raised when Jira answers 404 for an issue."""

    def __init__(self, issue_id: str):
        super().__init__(f"Jira issue {issue_id} not found.")
        self.issue_id = issue_id


class AuthenticationFailedError(JiraError):
    """Raised when Jira rejects the configured credentials (401)."""

    def __init__(self, issue_id: str):
        super().__init__(
            "Jira authentication failed (401). Check JIRA_EMAIL and JIRA_API_TOKEN."
        )
        self.issue_id = issue_id


class AuthorizationFailedError(JiraError):
    """Raised when the account lacks permission for the issue (403)."""

    def __init__(self, issue_id: str, email: str):
        super().__init__(
            f"Jira authorization failed (403). The user '{email}' may lack "
            f"permissions for project/issue {issue_id}."
        )
        self.issue_id = issue_id
        self.email = email


class UpstreamRequestFailedError(JiraError):
    """Raised for any other non-2xx Jira response."""

    def __init__(self, issue_id: str, status_code: int, reason_phrase: str, body: str):
        super().__init__(
            f"Jira API request failed for {issue_id}. "
            f"Status: {status_code} {reason_phrase}. Body: {body}"
        )
        self.issue_id = issue_id
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        self.body = body


class UnexpectedFetchError(JiraError):
    """Raised when the fetch fails outside the known HTTP status cases."""

    def __init__(self, cause: str):
        super().__init__(f"An unexpected error occurred fetching Jira data: {cause}")
        self.cause = cause


# Gemini


class GeminiError(ReadinessError):
    """Base class for Gemini generation errors."""

    pass


class ClientNotConfiguredError(GeminiError):
    """Raised when generation is requested without a Gemini client."""

    def __init__(self):
        super().__init__("Gemini client not initialized. Check API Key configuration.")


class EmptyModelResponseError(GeminiError):
    """Raised when the response has no candidates."""

    def __init__(self):
        super().__init__("Gemini response contained no candidates.")


class ContentBlockedError(GeminiError):
    """Raised when the provider's safety system blocked the prompt."""

    def __init__(self, block_reason: str, feedback: str):
        super().__init__(
            f"Gemini response was blocked. Reason: {block_reason}. Details: {feedback}"
        )
        self.block_reason = block_reason
        self.feedback = feedback


class InvalidModelOutputError(GeminiError):
    """Raised when the first candidate carries no usable text."""

    def __init__(self):
        super().__init__("Extracted text from Gemini response was empty or invalid.")


class ModelRequestFailedError(GeminiError):
    """Raised when the Gemini call itself fails (transport or API error)."""

    def __init__(self, message: str, details: str = ""):
        text = f"Gemini API request failed: {message}"
        if details:
            text += f"\nDetails: {details}"
        super().__init__(text)
        self.details = details
