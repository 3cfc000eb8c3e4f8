"""Caller-side framing for streamed chat/steps bodies.

Architectural role:
    `consumption.core.dispatcher` hands streamed bodies over unread and
    unframed. These helpers are optional conveniences for callers that want
    lines, server-sent-event payloads, or NDJSON values instead of raw bytes.

Streaming behavior:
    All helpers are generators over the byte-chunk iterator and never buffer
    more than one incomplete line. Iteration stops when the underlying stream
    ends; the SSE helper also stops at a `[DONE]` payload.

Failure handling:
    Malformed NDJSON lines raise `MalformedResponseError`. Undecodable bytes
    are replaced rather than raised.
"""

from __future__ import annotations

import codecs
import json
from typing import Any, Iterable, Iterator

from consumption.core.errors import MalformedResponseError
from consumption.core.result_types import ChatStream


SSE_DONE_SENTINEL = "[DONE]"


def iter_lines(chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield decoded lines from byte chunks, tolerating splits across chunks."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    pending = ""

    for chunk in chunks:
        pending += decoder.decode(chunk)
        *lines, pending = pending.split("\n")
        for line in lines:
            yield line.rstrip("\r")

    pending += decoder.decode(b"", final=True)
    if pending:
        yield pending.rstrip("\r")


def iter_sse_data(chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield the `data` payload of each server-sent event.

    Multiple `data:` lines in one event are joined with newlines. Comment lines
    and other fields (`event:`, `id:`, `retry:`) are ignored.
    """
    data_lines: list[str] = []

    for line in iter_lines(chunks):
        if not line:
            if data_lines:
                payload = "\n".join(data_lines)
                data_lines = []
                if payload.strip() == SSE_DONE_SENTINEL:
                    return
                yield payload
            continue

        if line.startswith(":"):
            continue

        field, _, value = line.partition(":")
        if field == "data":
            data_lines.append(value[1:] if value.startswith(" ") else value)

    if data_lines:
        payload = "\n".join(data_lines)
        if payload.strip() != SSE_DONE_SENTINEL:
            yield payload


def iter_ndjson(chunks: Iterable[bytes]) -> Iterator[Any]:
    """Yield one decoded JSON value per non-empty line."""
    for line in iter_lines(chunks):
        if not line.strip():
            continue
        try:
            yield json.loads(line)
        except ValueError as exc:
            raise MalformedResponseError(f"Invalid NDJSON line: {line[:200]!r}") from exc


def iter_text(chunks: Iterable[bytes]) -> Iterator[str]:
    """Yield decoded text chunks as they arrive."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    for chunk in chunks:
        text = decoder.decode(chunk)
        if text:
            yield text
    tail = decoder.decode(b"", final=True)
    if tail:
        yield tail


def iter_stream(result: ChatStream) -> Iterator[Any]:
    """Frame a `ChatStream` according to its declared content type.

    - `text/event-stream`: SSE data payloads (str)
    - `application/x-ndjson`: decoded JSON values
    - anything else: decoded text chunks
    """
    content_type = (result.content_type or "").lower()
    if "text/event-stream" in content_type:
        return iter_sse_data(result.stream)
    if "application/x-ndjson" in content_type:
        return iter_ndjson(result.stream)
    return iter_text(result.stream)
