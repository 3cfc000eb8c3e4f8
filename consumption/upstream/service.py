"""Operation entrypoints for the Consumption API.

Architectural role:
    Canonical entrypoints used by callers. Each call resolves a fresh
    `EndpointConfig`, builds the operation payload, sends it through
    `consumption.upstream.client`, and hands the response to the core
    dispatch/normalization logic.

Call flow:
    chat:     payload -> `post_json(stream=True)` -> `classify_chat_response`
    classify: payload -> `post_json` -> status check -> JSON parse ->
              `normalize_classify_response`

Payload construction:
    `metadata=None` is omitted from the request body.

Failure scenarios:
    - `ConfigurationError` before any network call.
    - `UpstreamError` on non-success status.
    - `MalformedResponseError` on unusable success bodies.
    - `requests.RequestException` on transport failures (unwrapped).
    None of these are retried.
"""

from __future__ import annotations

from typing import Any, Mapping

from consumption.core.dispatcher import classify_chat_response, parse_json_body
from consumption.core.normalizer import normalize_classify_response
from consumption.core.result_types import ChatJson, ChatResult, ClassifyResult
from consumption.upstream.client import post_json, raise_for_upstream_status
from consumption.upstream.provider_config import load_endpoint_config


def _payload(metadata: Mapping[str, Any] | None, **fields: Any) -> dict[str, Any]:
    payload = dict(fields)
    if metadata is not None:
        payload["metadata"] = dict(metadata)
    return payload


def consumption_chat_steps(
    messages: Any,
    metadata: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ChatResult:
    """Call the chat/steps endpoint.

    Args:
        messages: Chat messages, forwarded as-is.
        metadata: Optional request metadata.
        environ: Settings source override; defaults to `os.environ`.

    Returns:
        `ChatStream` when the upstream streams, `ChatJson` otherwise. A
        `ChatStream` keeps the HTTP response open until it is consumed or
        closed by the caller.
    """
    config = load_endpoint_config(environ)
    response = post_json(
        config,
        config.chat_path,
        _payload(metadata, messages=messages),
        stream=True,
    )

    try:
        result = classify_chat_response(response)
    except Exception:
        response.close()
        raise

    if isinstance(result, ChatJson):
        response.close()
    return result


def consumption_classify_project(
    prompt: str,
    metadata: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ClassifyResult:
    """Call the project/classify endpoint and normalize its answer.

    Args:
        prompt: Project description to classify.
        metadata: Optional request metadata.
        environ: Settings source override; defaults to `os.environ`.

    Returns:
        `ClassifyResult` with a guaranteed `template`.
    """
    config = load_endpoint_config(environ)
    response = post_json(
        config,
        config.classify_path,
        _payload(metadata, prompt=prompt),
    )

    raise_for_upstream_status(response)
    return normalize_classify_response(parse_json_body(response))
