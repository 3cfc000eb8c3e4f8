"""Response-shape dispatch for chat/steps responses.

Architectural role:
    Decides whether a successful chat/steps response is handed to the caller as
    an unread byte stream or parsed as JSON, and wraps the outcome in a
    `ChatResult` variant.

Decision order:
    1. Non-success status -> `UpstreamError` (no shape classification).
    2. No body (no raw body, or a 204/205 status) -> JSON path (parsing an
       absent body fails loudly).
    3. Content-type contains a streaming marker -> `ChatStream`.
    4. Anything else -> `ChatJson`.

Content-type sniffing:
    Plain case-insensitive substring match against `STREAMING_CONTENT_TYPES`,
    no MIME parameter parsing. `text/event-stream; charset=utf-8` therefore
    matches `text/event-stream`.

Body consumption:
    The body is consumed exactly once. On the stream path it is handed off
    without reading, buffering, or framing and is then read incrementally as the
    caller iterates; on the JSON path it is fully drained. Framing is the
    caller's concern (see `consumption.core.framing`).
"""

from __future__ import annotations

import logging
from typing import Iterator

import requests
from urllib3.exceptions import DecodeError, ProtocolError, ReadTimeoutError
from urllib3.exceptions import SSLError as Urllib3SSLError

from consumption.core.errors import MalformedResponseError, raise_for_upstream_status
from consumption.core.result_types import ChatJson, ChatResult, ChatStream


logger = logging.getLogger(__name__)

STREAMING_CONTENT_TYPES = (
    "text/event-stream",
    "application/x-ndjson",
    "text/plain",
)

# Success statuses that never carry a body.
NO_BODY_STATUSES = (204, 205)

STREAM_READ_SIZE = 8192


def is_streaming_content_type(content_type: str | None) -> bool:
    """Return True when `content_type` names one of the streamed body formats."""
    if not content_type:
        return False
    lowered = content_type.lower()
    return any(marker in lowered for marker in STREAMING_CONTENT_TYPES)


def has_body(response: requests.Response) -> bool:
    return response.raw is not None and response.status_code not in NO_BODY_STATUSES


def iter_raw_body(raw, read_size: int = STREAM_READ_SIZE) -> Iterator[bytes]:
    """Yield body bytes as soon as the transport delivers them.

    `read1` returns whatever is already available instead of waiting for
    `read_size` bytes or EOF, so bodies delimited by connection close still
    arrive incrementally. urllib3 errors are translated the same way
    `requests.Response.iter_content` translates them.
    """
    try:
        while True:
            chunk = raw.read1(read_size, decode_content=True)
            if not chunk:
                return
            yield chunk
    except ProtocolError as exc:
        raise requests.exceptions.ChunkedEncodingError(exc) from exc
    except DecodeError as exc:
        raise requests.exceptions.ContentDecodingError(exc) from exc
    except ReadTimeoutError as exc:
        raise requests.exceptions.ConnectionError(exc) from exc
    except Urllib3SSLError as exc:
        raise requests.exceptions.SSLError(exc) from exc


def parse_json_body(response: requests.Response):
    """Drain and parse the response body as JSON.

    Raises:
        MalformedResponseError: If the body is absent or not valid JSON.
    """
    try:
        return response.json()
    except ValueError as exc:
        raise MalformedResponseError(
            f"Consumption API returned invalid JSON (status {response.status_code})"
        ) from exc


def classify_chat_response(response: requests.Response) -> ChatResult:
    """Classify a chat/steps response as stream-passthrough or parsed JSON.

    Args:
        response: Response issued with `stream=True` so its body is still unread.

    Returns:
        `ChatStream` for streaming content types, `ChatJson` otherwise.

    Raises:
        UpstreamError: Non-success HTTP status.
        MalformedResponseError: JSON path taken but the body does not parse.
    """
    raise_for_upstream_status(response)

    content_type = response.headers.get("content-type") or None

    if has_body(response) and is_streaming_content_type(content_type):
        logger.debug("Passing through streamed chat response (%s)", content_type)
        return ChatStream(
            stream=iter_raw_body(response.raw),
            content_type=content_type,
            closer=response.close,
        )

    logger.debug("Parsing chat response as JSON (%s)", content_type)
    return ChatJson(parse_json_body(response))
