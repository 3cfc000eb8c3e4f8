"""HTTP transport for Consumption API requests.

Architectural role:
    Builds outbound headers and issues POST requests through `requests`.
    Non-success statuses are turned into `UpstreamError` by
    `raise_for_upstream_status`, re-exported here from `consumption.core.errors`.
    Response-shape decisions live in `consumption.core.dispatcher`; this module
    never inspects success bodies.

Request flow:
    `service.consumption_*` -> `post_json(config, path, body, stream)` ->
    `raise_for_upstream_status(response)` (directly or via the dispatcher).

Retry behavior:
    No retry loop is implemented. Each call is attempted once with the configured
    timeout. Transport exceptions from `requests` propagate unwrapped.

Security considerations:
    Request headers (including the bearer credential) are never logged. Upstream
    error bodies are attached to `UpstreamError` and may contain provider text.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests.structures import CaseInsensitiveDict

from consumption.core.errors import UpstreamError, raise_for_upstream_status
from consumption.upstream.provider_config import EndpointConfig


logger = logging.getLogger(__name__)

__all__ = ["UpstreamError", "build_headers", "post_json", "raise_for_upstream_status"]


def build_headers(config: EndpointConfig) -> CaseInsensitiveDict:
    """Return request headers for `config`.

    Extra headers are merged last and override defaults regardless of casing.
    """
    headers = CaseInsensitiveDict()
    headers["Content-Type"] = "application/json"
    if config.api_key:
        headers["Authorization"] = f"Bearer {config.api_key}"
    if config.extra_headers:
        for name, value in config.extra_headers.items():
            headers[name] = value
    return headers


def post_json(
    config: EndpointConfig,
    path: str,
    body: dict[str, Any],
    stream: bool = False,
) -> requests.Response:
    """POST a JSON body to `path` under the configured base URL.

    Args:
        config: Resolved endpoint config.
        path: Operation path (leading slash optional).
        body: JSON-serializable request body.
        stream: When true the response body is left unread for the caller.

    Returns:
        The raw `requests.Response`; status is not checked here.
    """
    url = config.url_for(path)
    logger.debug("POST %s (stream=%s)", url, stream)
    return requests.post(
        url,
        headers=build_headers(config),
        json=body,
        stream=stream,
        timeout=config.timeout_seconds,
    )
