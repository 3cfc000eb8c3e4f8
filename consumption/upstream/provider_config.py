"""Endpoint configuration for the Consumption API.

Architectural role:
    Resolves the immutable `EndpointConfig` consumed by `consumption.upstream.client`
    and `consumption.upstream.service`. A fresh config is built on every call; there
    is no process-wide cached instance.

Relevant environment variables:
    - `CONSUMPTION_API_BASE_URL` (required)
    - `CONSUMPTION_API_KEY`
    - `CONSUMPTION_API_CHAT_PATH` (default `/chat/steps`)
    - `CONSUMPTION_API_PROJECT_CLASSIFY_PATH` (default `/project/classify`)
    - `CONSUMPTION_API_HEADERS_JSON` (JSON object of string headers)
    - `CONSUMPTION_API_TIMEOUT_SECONDS` (default `120`)

Determinism:
    Deterministic for a fixed environment. `.env` files are loaded at import time
    via `load_dotenv()` and never override variables that are already set.

Failure behavior:
    Missing or malformed settings raise `ConfigurationError` naming the setting.
    Empty strings count as unset.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

from consumption.core.errors import ConfigurationError

load_dotenv()

BASE_URL_ENV = "CONSUMPTION_API_BASE_URL"
API_KEY_ENV = "CONSUMPTION_API_KEY"
CHAT_PATH_ENV = "CONSUMPTION_API_CHAT_PATH"
CLASSIFY_PATH_ENV = "CONSUMPTION_API_PROJECT_CLASSIFY_PATH"
HEADERS_JSON_ENV = "CONSUMPTION_API_HEADERS_JSON"
TIMEOUT_ENV = "CONSUMPTION_API_TIMEOUT_SECONDS"

DEFAULT_CHAT_PATH = "/chat/steps"
DEFAULT_CLASSIFY_PATH = "/project/classify"
DEFAULT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class EndpointConfig:
    """Resolved Consumption API endpoint descriptor.

    `base_url` never ends with `/`. Paths may be given with or without a leading
    slash; `url_for` always joins them with exactly one.
    """

    base_url: str
    api_key: str | None = None
    chat_path: str = DEFAULT_CHAT_PATH
    classify_path: str = DEFAULT_CLASSIFY_PATH
    extra_headers: dict[str, str] | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @property
    def chat_url(self) -> str:
        return self.url_for(self.chat_path)

    @property
    def classify_url(self) -> str:
        return self.url_for(self.classify_path)


def _required(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if not value:
        raise ConfigurationError(f"{name} is not configured")
    return value


def parse_extra_headers(raw: str | None, setting_name: str = HEADERS_JSON_ENV) -> dict[str, str] | None:
    """Decode a JSON-encoded header map.

    Args:
        raw: Raw setting value; `None` or empty means "no extra headers".
        setting_name: Setting label used in the error message.

    Returns:
        Header mapping with non-string values dropped, or `None` when unset.

    Raises:
        ConfigurationError: If `raw` is not valid JSON or does not decode to an
            object.
    """
    if not raw:
        return None

    error = ConfigurationError(f"{setting_name} must be valid JSON object of string:string headers")
    try:
        parsed = json.loads(raw)
    except ValueError as exc:
        raise error from exc

    if not isinstance(parsed, dict):
        raise error

    # Non-string values are silently skipped.
    return {key: value for key, value in parsed.items() if isinstance(value, str)}


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{TIMEOUT_ENV} must be a positive number of seconds") from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigurationError(f"{TIMEOUT_ENV} must be a positive number of seconds")
    return timeout


def load_endpoint_config(environ: Mapping[str, str] | None = None) -> EndpointConfig:
    """Build an `EndpointConfig` from environment settings.

    Args:
        environ: Settings source; defaults to `os.environ`.

    Returns:
        Freshly constructed, immutable endpoint config.

    Raises:
        ConfigurationError: Base URL missing, header JSON malformed, or timeout
            not a positive number.
    """
    if environ is None:
        environ = os.environ

    base_url = _required(environ, BASE_URL_ENV).rstrip("/")
    if not base_url:
        raise ConfigurationError(f"{BASE_URL_ENV} is not configured")

    return EndpointConfig(
        base_url=base_url,
        api_key=environ.get(API_KEY_ENV) or None,
        chat_path=environ.get(CHAT_PATH_ENV) or DEFAULT_CHAT_PATH,
        classify_path=environ.get(CLASSIFY_PATH_ENV) or DEFAULT_CLASSIFY_PATH,
        extra_headers=parse_extra_headers(environ.get(HEADERS_JSON_ENV)),
        timeout_seconds=_parse_timeout(environ.get(TIMEOUT_ENV)),
    )
