import asyncio
import json

import httpx
import pytest

from ollama_cli.core.endpoint import parse_endpoint
from ollama_cli.core.errors import PagerError


def ndjson(*objects) -> bytes:
    return b"".join(json.dumps(o).encode() + b"\n" for o in objects)


SCENARIO = ndjson(
    {"response": "Hi", "done": False},
    {"response": "!", "done": True},
)


class ScriptedStream(httpx.AsyncByteStream):
    """Response body served piece by piece, optionally dropping the connection at the end."""

    def __init__(self, parts, drop=False, gate: asyncio.Event | None = None):
        self.parts = list(parts)
        self.drop = drop
        self.gate = gate
        self.closed = False

    async def __aiter__(self):
        for i, part in enumerate(self.parts):
            if i == 1 and self.gate is not None:
                await self.gate.wait()
            yield part
        if self.drop:
            raise httpx.RemoteProtocolError("peer closed connection without sending complete message body")

    async def aclose(self):
        self.closed = True


class RecordingPager:
    def __init__(self):
        self.shown = []

    async def show(self, text):
        self.shown.append(text)
        return 0


class BrokenPager:
    async def show(self, text):
        raise PagerError("cannot start pager 'nope'")


def mock_http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def serve(body: bytes, status: int = 200, requests=None):
    def handler(request: httpx.Request):
        if requests is not None:
            requests.append(request)
        return httpx.Response(status, content=body)
    return handler


async def collect(chunks):
    return [c async for c in chunks]


@pytest.fixture
def endpoint():
    return parse_endpoint("http://ollama.test:11434")


@pytest.fixture
def pager():
    return RecordingPager()
