"""MCP server exposing Jira-driven test readiness generation."""

import atexit
import logging
import signal
import sys
import threading
import time
import uuid
from typing import Annotated

from arcade_mcp_server import MCPApp

from jira_test_readiness.assembler import assemble_envelope
from jira_test_readiness.config import Settings, get_settings
from jira_test_readiness.gemini import GeminiInvoker, build_genai_client
from jira_test_readiness.jira import JiraClient, normalize_ticket_id
from jira_test_readiness.log import correlation_id, setup_logging
from jira_test_readiness.models import TicketNumberInput

# Lazy logging initialization to avoid freezing env config at import time
_logging_initialized = False
_logging_lock = threading.Lock()


def _ensure_logging_initialized() -> None:
    """Initialize logging lazily on first use."""
    global _logging_initialized
    if _logging_initialized:
        return
    with _logging_lock:
        if not _logging_initialized:
            setup_logging(get_settings())
            _logging_initialized = True


logger = logging.getLogger("jira_test_readiness")

app = MCPApp(name="jira_test_readiness", version="0.1.0")

# Collaborators are built lazily so importing the module needs no credentials
_jira_client: JiraClient | None = None
_jira_client_lock = threading.Lock()
_invoker: GeminiInvoker | None = None
_invoker_lock = threading.Lock()

# Graceful shutdown handling
_shutdown_event = threading.Event()


def _shutdown_handler(signum: int, frame: object) -> None:
    """Flag shutdown and unwind the transport loop."""
    sig_name = signal.Signals(signum).name
    logger.info("Received %s, shutting down MCP server...", sig_name)
    _shutdown_event.set()
    raise SystemExit(0)


def _cleanup() -> None:
    """Cleanup resources on exit."""
    # Reset global singletons - no logging here as stream may be closed
    global _jira_client, _invoker
    _jira_client = None
    _invoker = None


def _install_signal_handlers() -> None:
    signal.signal(signal.SIGTERM, _shutdown_handler)
    signal.signal(signal.SIGINT, _shutdown_handler)
    atexit.register(_cleanup)


def is_shutting_down() -> bool:
    """Check if server is shutting down. New requests are refused once set."""
    return _shutdown_event.is_set()


def get_jira_client(settings: Settings | None = None) -> JiraClient:
    """Get or create the JiraClient built from settings."""
    global _jira_client
    if _jira_client is None:
        with _jira_client_lock:
            if _jira_client is None:
                settings = settings or get_settings()
                missing = [name for name in settings.missing_required() if name.startswith("JIRA_")]
                if missing:
                    raise RuntimeError(f"Jira is not configured, missing: {', '.join(missing)}")
                assert settings.jira_api_token is not None
                _jira_client = JiraClient(
                    base_url=settings.jira_url,
                    email=settings.jira_email,
                    api_token=settings.jira_api_token.get_secret_value(),
                    project_key=settings.jira_project_key,
                    timeout=settings.jira_timeout,
                )
    return _jira_client


def get_invoker(settings: Settings | None = None) -> GeminiInvoker:
    """Get or create the GeminiInvoker (unconfigured when no API key is set)."""
    global _invoker
    if _invoker is None:
        with _invoker_lock:
            if _invoker is None:
                settings = settings or get_settings()
                _invoker = GeminiInvoker(
                    client=build_genai_client(settings),
                    model=settings.gemini_model,
                    temperature=settings.gemini_temperature,
                )
    return _invoker


async def _get_test_readiness_impl(
    ticket_number: int,
    settings: Settings | None = None,
    jira_client: JiraClient | None = None,
    invoker: GeminiInvoker | None = None,
) -> str:
    """Internal implementation of get_test_readiness_per_jira with DI support.

    Returns the envelope as indented JSON with camelCase keys.

    Raises:
        pydantic.ValidationError: If ticket_number is not a positive integer.
        ReadinessError: Any normalization, Jira or Gemini failure, unchanged.
    """
    # Reject bad input before touching configuration or the network
    validated = TicketNumberInput(ticket_number=ticket_number)

    _ensure_logging_initialized()

    if is_shutting_down():
        raise RuntimeError("Server is shutting down, refusing new request")

    settings = settings or get_settings()
    jira_client = jira_client or get_jira_client(settings)
    invoker = invoker or get_invoker(settings)

    # Set correlation ID for this request
    request_id = str(uuid.uuid4())[:8]
    correlation_id.set(request_id)

    logger.info("Starting test readiness generation, ticket_number=%d", validated.ticket_number)

    identifier = ""
    start_time = time.monotonic()
    try:
        identifier = normalize_ticket_id(validated.ticket_number, jira_client.project_key)
        issue = await jira_client.fetch_issue(identifier)
        ai_text = await invoker.generate(issue)
    except Exception as e:
        elapsed = time.monotonic() - start_time
        logger.error(
            "Test readiness generation failed for ticket_number=%d (id=%s) after %.2fs: %s",
            validated.ticket_number, identifier or "N/A", elapsed, e,
        )
        raise

    envelope = assemble_envelope(identifier, issue, ai_text, settings.protocol_version)

    logger.info(
        "Test readiness generation complete for %s, status=%s, elapsed=%.2fs",
        identifier, envelope.context.ai_result_status, time.monotonic() - start_time,
    )

    return envelope.to_json()


@app.tool
async def get_test_readiness_per_jira(
    ticket_number: Annotated[int, "Jira ticket number in the configured project (positive integer)"],
) -> str:
    """Accepts a Jira ticket number, fetches details, generates a test checklist and Zsh script using AI.

    Returns a JSON envelope with the issue URL, summary, the generated
    checklist followed by the script, and whether the model fell back to its
    insufficient-information answer. The input is named ticket_number
    (not ticketNumber).
    """
    return await _get_test_readiness_impl(ticket_number)


def main() -> None:
    """Validate configuration and run the MCP server."""
    settings = get_settings()
    _ensure_logging_initialized()

    missing = settings.missing_required()
    if missing:
        logger.critical(
            "Configuration incomplete, missing environment variables: %s", ", ".join(missing)
        )
        sys.exit(1)

    _install_signal_handlers()
    logger.info("Starting MCP server, transport=%s", settings.transport)
    app.run(transport=settings.transport, port=settings.port)


if __name__ == "__main__":
    main()
