"""Error taxonomy for the Consumption API adapter.

Architectural role:
    Every failure raised by this package derives from `ConsumptionError`, so
    callers can catch the whole family in one place or branch on the concrete
    kind.

Failure model:
    All errors are terminal. Nothing in this package retries, falls back to a
    different endpoint, or synthesizes a default result.

    - `ConfigurationError`: a setting is missing or malformed. Raised before
      any network call is made.
    - `UpstreamError`: the upstream answered with a non-success status.
    - `MalformedResponseError`: the upstream answered successfully but the body
      cannot be parsed or lacks the required fields.

`raise_for_upstream_status` turns a non-2xx response into `UpstreamError`. It
lives here so the core never depends on the transport package.

Transport failures (DNS, connection reset, timeouts) are raised by `requests`
and propagate unwrapped.
"""

from __future__ import annotations

import logging


logger = logging.getLogger(__name__)


class ConsumptionError(RuntimeError):
    """Base exception for Consumption API adapter failures."""


class ConfigurationError(ConsumptionError):
    """Required setting missing or present but malformed."""


class UpstreamError(ConsumptionError):
    """Non-success HTTP status returned by the Consumption API.

    Args:
        status_code: Numeric HTTP status.
        status_text: Reason phrase sent by the upstream (may be empty).
        body: Best-effort response body text, or `None` when it was not
            captured.
    """

    def __init__(self, status_code: int, status_text: str = "", body: str | None = None) -> None:
        message = f"Consumption API error {status_code} {status_text}".rstrip()
        if body:
            message = f"{message}: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
        self.body = body

    @property
    def is_client_error(self) -> bool:
        """True for 4xx statuses."""
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        """True for 5xx statuses."""
        return self.status_code >= 500


class MalformedResponseError(ConsumptionError):
    """Success status, but the body could not be turned into a result."""


# Content types whose bodies are worth attaching to an `UpstreamError`.
_ERROR_BODY_CONTENT_TYPES = ("application/json", "text/")


def _read_error_body(response) -> str | None:
    content_type = (response.headers.get("content-type") or "").lower()
    if not any(marker in content_type for marker in _ERROR_BODY_CONTENT_TYPES):
        return None
    try:
        return response.text
    except Exception:
        # Body capture must never mask the status error.
        logger.debug("Failed to read upstream error body", exc_info=True)
        return None


def raise_for_upstream_status(response) -> None:
    """Raise `UpstreamError` unless `response` has a 2xx status.

    The body is captured best-effort, and only for JSON or text content types.
    """
    if 200 <= response.status_code < 300:
        return

    error = UpstreamError(
        response.status_code,
        response.reason or "",
        _read_error_body(response),
    )
    logger.warning("Consumption API returned %s %s", error.status_code, error.status_text)
    raise error
