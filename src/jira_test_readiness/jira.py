"""Jira ticket normalization and issue fetching."""

import logging
import re
from typing import Any

import httpx

from jira_test_readiness.errors import (
    AuthenticationFailedError,
    AuthorizationFailedError,
    InvalidIdentifierFormatError,
    IssueNotFoundError,
    ReadinessError,
    UnexpectedFetchError,
    UpstreamRequestFailedError,
)
from jira_test_readiness.models import DEFAULT_SUMMARY, IssueRecord

logger = logging.getLogger("jira_test_readiness")

ISSUE_FIELDS = ("summary", "description", "comment")

_DIGITS_RE = re.compile(r"^\d+$")
_ISSUE_KEY_RE = re.compile(r"^[A-Z][A-Z0-9]+-\d+$", re.IGNORECASE)


def normalize_ticket_id(reference: str | int, project_key: str) -> str:
    """Canonicalize a ticket reference into PROJECT-NUMBER form.

    Bare numbers are prefixed with the (uppercased) project key; full keys are
    uppercased. Anything else raises InvalidIdentifierFormatError.
    """
    text = str(reference).strip()

    if _DIGITS_RE.match(text):
        return f"{project_key.upper()}-{text}"
    if _ISSUE_KEY_RE.match(text):
        return text.upper()
    raise InvalidIdentifierFormatError(reference)


class JiraClient:
    """Read-only Jira Cloud client for the fields used in test planning.

    One GET per fetch, authenticated with HTTP Basic auth (email + API token).
    """

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        project_key: str,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize Jira client.

        Args:
            base_url: Jira site URL (e.g., "https://yourcompany.atlassian.net")
            email: Account email for authentication
            api_token: Jira API token for authentication
            project_key: Project key used to expand bare ticket numbers
            timeout: Request timeout in seconds
            http_client: Shared client to use instead of one per fetch (not closed here)
        """
        self.base_url = base_url.rstrip("/")
        self.email = email
        self.project_key = project_key
        self.timeout = timeout
        self._auth = httpx.BasicAuth(email, api_token)
        self._http_client = http_client

    def issue_url(self, key: str) -> str:
        return f"{self.base_url}/browse/{key}"

    async def fetch_issue(self, reference: str | int) -> IssueRecord:
        """Fetch summary, description and comments for one issue.

        Raises:
            InvalidIdentifierFormatError: If the reference cannot be normalized.
            IssueNotFoundError, AuthenticationFailedError, AuthorizationFailedError,
            UpstreamRequestFailedError: For non-2xx Jira responses.
            UnexpectedFetchError: For transport failures or malformed payloads.
        """
        issue_id = normalize_ticket_id(reference, self.project_key)

        logger.info("Fetching Jira issue %s", issue_id)
        try:
            if self._http_client is not None:
                return await self._fetch(self._http_client, issue_id)
            async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout)) as client:
                return await self._fetch(client, issue_id)
        except ReadinessError:
            raise
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Unexpected error fetching Jira issue %s: %s", issue_id, e)
            raise UnexpectedFetchError(str(e)) from e

    async def _fetch(self, client: httpx.AsyncClient, issue_id: str) -> IssueRecord:
        response = await client.get(
            f"{self.base_url}/rest/api/3/issue/{issue_id}",
            params={"fields": ",".join(ISSUE_FIELDS)},
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            auth=self._auth,
            timeout=self.timeout,
        )

        if not response.is_success:
            self._raise_for_status(response, issue_id)

        record = self._to_issue_record(response.json())
        logger.info("Fetched Jira issue %s, comment_count=%d", record.id, len(record.comments))
        return record

    def _raise_for_status(self, response: httpx.Response, issue_id: str) -> None:
        status = response.status_code
        logger.warning("Jira returned %d for issue %s", status, issue_id)

        if status == 404:
            raise IssueNotFoundError(issue_id)
        if status == 401:
            raise AuthenticationFailedError(issue_id)
        if status == 403:
            raise AuthorizationFailedError(issue_id, self.email)

        try:
            body = response.text
        except (httpx.HTTPError, UnicodeDecodeError, LookupError) as e:
            logger.debug("Could not read Jira error body for %s: %s", issue_id, e)
            body = ""
        raise UpstreamRequestFailedError(
            issue_id, status, response.reason_phrase, body or "(could not read body)"
        )

    def _to_issue_record(self, data: dict[str, Any]) -> IssueRecord:
        key = data["key"]
        fields = data.get("fields") or {}
        comment_page = fields.get("comment") or {}
        comments = comment_page.get("comments") or []

        return IssueRecord(
            id=key,
            url=self.issue_url(key),
            summary=fields.get("summary") or DEFAULT_SUMMARY,
            description=fields.get("description"),
            comments=tuple(comment.get("body") for comment in comments),
        )
