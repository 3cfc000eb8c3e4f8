"""Consumption API client adapter.

Public API re-exports for consumer convenience.

Package split:
    - `upstream`: endpoint configuration, HTTP transport, operation entrypoints.
    - `core`: response-shape dispatch, classify normalization, result and error
      types, optional stream framing helpers.
"""

from consumption.core.dispatcher import classify_chat_response
from consumption.core.errors import (
    ConfigurationError,
    ConsumptionError,
    MalformedResponseError,
    UpstreamError,
)
from consumption.core.normalizer import normalize_classify_response
from consumption.core.result_types import ChatJson, ChatResult, ChatStream, ClassifyResult
from consumption.upstream.provider_config import EndpointConfig, load_endpoint_config
from consumption.upstream.service import consumption_chat_steps, consumption_classify_project

__all__ = [
    "ChatJson",
    "ChatResult",
    "ChatStream",
    "ClassifyResult",
    "ConfigurationError",
    "ConsumptionError",
    "EndpointConfig",
    "MalformedResponseError",
    "UpstreamError",
    "classify_chat_response",
    "consumption_chat_steps",
    "consumption_classify_project",
    "load_endpoint_config",
    "normalize_classify_response",
]
