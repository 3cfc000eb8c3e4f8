"""Tests for caller-side framing of streamed chat bodies."""

import pytest

from consumption.core.errors import MalformedResponseError
from consumption.core.framing import iter_lines, iter_ndjson, iter_sse_data, iter_stream, iter_text
from consumption.core.result_types import ChatStream


def test_iter_lines_joins_lines_split_across_chunks():
    chunks = [b"first li", b"ne\r\nsecond\n", b"tail"]

    assert list(iter_lines(chunks)) == ["first line", "second", "tail"]


def test_iter_lines_handles_multibyte_characters_split_across_chunks():
    encoded = "grüße\n".encode("utf-8")

    assert list(iter_lines([encoded[:3], encoded[3:]])) == ["grüße"]


def test_iter_sse_data_yields_event_payloads():
    chunks = [
        b": keep-alive\n\n",
        b"event: step\ndata: {\"n\": 1}\n\n",
        b"data: line one\ndata: line two\n\n",
        b"data: [DONE]\n\n",
        b"data: never\n\n",
    ]

    assert list(iter_sse_data(chunks)) == ['{"n": 1}', "line one\nline two"]


def test_iter_sse_data_flushes_unterminated_event():
    assert list(iter_sse_data([b"data:last"])) == ["last"]


def test_iter_ndjson_decodes_each_line():
    chunks = [b'{"step": 1}\n\n{"st', b'ep": 2}\n']

    assert list(iter_ndjson(chunks)) == [{"step": 1}, {"step": 2}]


def test_iter_ndjson_rejects_malformed_line():
    with pytest.raises(MalformedResponseError):
        list(iter_ndjson([b'{"ok": true}\n{oops\n']))


def test_iter_text_decodes_chunks():
    assert "".join(iter_text([b"hel", b"lo"])) == "hello"


@pytest.mark.parametrize(
    ("content_type", "chunks", "expected"),
    [
        ("text/event-stream; charset=utf-8", [b"data: a\n\n"], ["a"]),
        ("application/x-ndjson", [b"[1]\n"], [[1]]),
        ("text/plain", [b"raw"], ["raw"]),
    ],
)
def test_iter_stream_picks_framing_from_content_type(content_type, chunks, expected):
    result = ChatStream(stream=iter(chunks), content_type=content_type)

    assert list(iter_stream(result)) == expected
