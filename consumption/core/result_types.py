"""Result contracts returned by the Consumption API adapter.

Architectural role:
    Defines the value objects handed back to callers by
    `consumption.upstream.service`. They are transient, per-call objects and are
    never persisted or shared across calls.

Chat results:
    `ChatResult` is a two-variant union. `ChatStream` carries the untouched
    response body as a lazy byte iterator; `ChatJson` carries the parsed JSON
    document. Callers branch on `result.kind` (or `isinstance`).

Classify results:
    `ClassifyResult` always has a `template`; `title` is optional.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Iterator, Union


@dataclass(frozen=True)
class ChatStream:
    """Stream-passthrough variant of a chat/steps response.

    Attributes:
        stream: Lazy iterator over raw body bytes. It can be consumed once.
        content_type: Content-type header exactly as declared upstream.
    """

    kind: ClassVar[str] = "stream"

    stream: Iterator[bytes]
    content_type: str | None = None
    closer: Callable[[], None] | None = field(default=None, repr=False, compare=False)

    def __iter__(self) -> Iterator[bytes]:
        return self.stream

    def close(self) -> None:
        """Release the underlying HTTP response, e.g. when abandoning the stream."""
        if self.closer is not None:
            self.closer()


@dataclass(frozen=True)
class ChatJson:
    """Parsed-JSON variant of a chat/steps response."""

    kind: ClassVar[str] = "json"

    data: Any


ChatResult = Union[ChatStream, ChatJson]


@dataclass(frozen=True)
class ClassifyResult:
    """Normalized project-classification answer.

    Attributes:
        template: Template identifier. Always present on success.
        title: Optional human-readable project title.
    """

    template: str
    title: str | None = None

    def to_dict(self) -> dict:
        """Return the wire shape `{template, title?}`; `title` omitted when absent."""
        result = {"template": self.template}
        if self.title is not None:
            result["title"] = self.title
        return result
