"""Normalization of project-classify responses.

Accepted wire shapes:
    - `{"template": ..., "title": ...}`
    - `{"data": {"template": ..., "title": ...}}`

Field source selection:
    Shape matchers run in fixed order and the first one that yields a candidate
    object wins. A nested `data` object is the field source whenever it is a
    dict, even if the top level also carries `template`; the top level is used
    only when `data` is missing or not an object. There is no fallback back to
    the top level once `data` has been selected.

Failure behavior:
    A selected source without a string `template` is a hard failure. `template`
    is never defaulted. `title` is dropped (not an error) unless it is a string.
"""

from __future__ import annotations

from typing import Any, Callable

from consumption.core.errors import MalformedResponseError
from consumption.core.result_types import ClassifyResult


MALFORMED_CLASSIFY_MESSAGE = "Consumption API classify response missing {template,title}"


def _nested_data(payload: Any) -> dict | None:
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return None


def _top_level(payload: Any) -> dict | None:
    if isinstance(payload, dict):
        return payload
    return None


SHAPE_MATCHERS: tuple[Callable[[Any], dict | None], ...] = (
    _nested_data,
    _top_level,
)


def select_source(payload: Any) -> dict | None:
    """Return the object the classify fields are read from, or `None`."""
    for matcher in SHAPE_MATCHERS:
        source = matcher(payload)
        if source is not None:
            return source
    return None


def normalize_classify_response(payload: Any) -> ClassifyResult:
    """Coerce a decoded classify body into a `ClassifyResult`.

    Args:
        payload: Decoded JSON value of unknown shape.

    Returns:
        `ClassifyResult` with the selected source's `template` and `title`.

    Raises:
        MalformedResponseError: No candidate object, or its `template` is not a
            string.
    """
    source = select_source(payload)
    if source is None or not isinstance(source.get("template"), str):
        raise MalformedResponseError(MALFORMED_CLASSIFY_MESSAGE)

    title = source.get("title")
    return ClassifyResult(
        template=source["template"],
        title=title if isinstance(title, str) else None,
    )
