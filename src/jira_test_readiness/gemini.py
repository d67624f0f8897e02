"""Gemini invocation for test checklist and script generation."""

import json
import logging
import time
import traceback

from google import genai
from google.genai import types

from jira_test_readiness.config import Settings
from jira_test_readiness.errors import (
    ClientNotConfiguredError,
    ContentBlockedError,
    EmptyModelResponseError,
    InvalidModelOutputError,
    ModelRequestFailedError,
)
from jira_test_readiness.models import IssueRecord
from jira_test_readiness.prompts import build_test_readiness_prompt

logger = logging.getLogger("jira_test_readiness")


def build_genai_client(settings: Settings) -> genai.Client | None:
    """Create a Gemini client, or None when no API key is configured."""
    if settings.gemini_api_key is None or not settings.gemini_api_key.get_secret_value():
        logger.warning("GEMINI_API_KEY not set, Gemini client not initialized")
        return None
    return genai.Client(
        api_key=settings.gemini_api_key.get_secret_value(),
        # HttpOptions.timeout is in milliseconds
        http_options=types.HttpOptions(timeout=int(settings.gemini_timeout * 1000)),
    )


def _describe_feedback(feedback: types.GenerateContentResponsePromptFeedback) -> str:
    return json.dumps(feedback.model_dump(mode="json", exclude_none=True))


def extract_text(response: types.GenerateContentResponse) -> str:
    """Return the first text part of the first candidate, trimmed.

    Raises:
        ContentBlockedError: If the prompt was blocked by safety filters.
        EmptyModelResponseError: If the response has no candidates.
        InvalidModelOutputError: If the first part carries no text.
    """
    feedback = response.prompt_feedback
    if feedback is not None and feedback.block_reason:
        reason = getattr(feedback.block_reason, "value", feedback.block_reason)
        raise ContentBlockedError(str(reason), _describe_feedback(feedback))

    if not response.candidates:
        raise EmptyModelResponseError()

    content = response.candidates[0].content
    parts = content.parts if content is not None else None
    text = parts[0].text if parts else None

    if not isinstance(text, str) or not text.strip():
        raise InvalidModelOutputError()

    return text.strip()


class GeminiInvoker:
    """Sends the test readiness prompt for an issue to Gemini.

    The client is optional so a missing API key surfaces as
    ClientNotConfiguredError on use rather than at construction.
    """

    def __init__(
        self,
        client: genai.Client | None,
        model: str,
        temperature: float | None = None,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    async def generate(self, issue: IssueRecord) -> str:
        """Generate the checklist and zsh script for an issue.

        The returned text is trimmed but otherwise verbatim; markdown fences
        the model adds despite instructions are not stripped.
        """
        if self.client is None:
            raise ClientNotConfiguredError()

        prompt = build_test_readiness_prompt(issue)
        config = None
        if self.temperature is not None:
            config = types.GenerateContentConfig(temperature=self.temperature)

        logger.info(
            "Requesting Gemini generation for %s, model=%s, prompt_length=%d",
            issue.id, self.model, len(prompt),
        )
        start_time = time.monotonic()
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            # Transport may be httpx or aiohttp depending on installed extras
            elapsed = time.monotonic() - start_time
            logger.error("Gemini request for %s failed after %.2fs: %s", issue.id, elapsed, e)
            raise ModelRequestFailedError(
                str(e) or type(e).__name__, "".join(traceback.format_exception(e)).rstrip()
            ) from e

        elapsed = time.monotonic() - start_time
        text = extract_text(response)
        logger.info(
            "Gemini generation complete for %s, output_length=%d, elapsed=%.2fs",
            issue.id, len(text), elapsed,
        )
        return text
