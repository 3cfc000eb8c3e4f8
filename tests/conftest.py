"""Shared fixtures for building in-memory `requests.Response` objects."""

import io

import pytest
import requests


class BodyStream(io.BytesIO):
    """In-memory stand-in for a urllib3 response body, `read1` included."""

    def read1(self, size=-1, decode_content=None):
        return super().read1(size)


class OneShotBody(BodyStream):
    """Raw body that records reads and refuses to be drained twice."""

    def __init__(self, data: bytes):
        super().__init__(data)
        self.read_calls = 0
        self.drained = False

    def _track(self, chunk):
        if not chunk:
            self.drained = True
        return chunk

    def read(self, size=-1):
        if self.drained:
            raise RuntimeError("body already consumed")
        self.read_calls += 1
        return self._track(super().read(size))

    def read1(self, size=-1, decode_content=None):
        if self.drained:
            raise RuntimeError("body already consumed")
        self.read_calls += 1
        return self._track(super().read1(size))


class TrickleBody(BodyStream):
    """Body that hands out at most `step` bytes per `read1`, like a slow socket."""

    def __init__(self, data: bytes, step: int):
        super().__init__(data)
        self.step = step

    def read1(self, size=-1, decode_content=None):
        return super().read1(self.step)


def build_response(status=200, content_type=None, body=b"", reason=None, raw=None):
    response = requests.Response()
    response.status_code = status
    response.reason = reason if reason is not None else ("OK" if status < 400 else "Error")
    if content_type is not None:
        response.headers["Content-Type"] = content_type
    if raw is not None:
        response.raw = raw
    elif body is not None:
        response.raw = BodyStream(body)
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def env():
    return {"CONSUMPTION_API_BASE_URL": "https://consumption.example.com/"}
