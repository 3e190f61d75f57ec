import asyncio
import io

import pytest

from conftest import BrokenPager, RecordingPager
from ollama_cli.core.domain import DisplayMode
from ollama_cli.core.errors import DecodeError, TransportError
from ollama_cli.core.router import ResponseRouter
from ollama_cli.models import Turn


class SpyOut(io.StringIO):
    def __init__(self):
        super().__init__()
        self.writes = []

    def write(self, s):
        self.writes.append(s)
        return super().write(s)


async def chunks_of(*chunks, fail=None):
    for c in chunks:
        yield c
    if fail is not None:
        raise fail


def route(mode, chunks, pager=None, out=None):
    router = ResponseRouter(pager or RecordingPager(), out=out or SpyOut())
    return asyncio.run(router.route(mode, chunks))


def test_streaming_writes_each_chunk_as_it_arrives():
    out = SpyOut()
    pager = RecordingPager()

    result = route(DisplayMode.STREAMING, chunks_of("Hi", "!"), pager, out)

    assert result == "Hi!"
    assert out.writes == ["Hi", "!", "\n"]
    assert pager.shown == []


def test_paged_buffers_then_shows_once():
    out = SpyOut()
    pager = RecordingPager()

    result = route(DisplayMode.PAGED, chunks_of("# Title", "\n\nbody"), pager, out)

    assert result == "# Title\n\nbody"
    assert out.writes == []
    assert pager.shown == ["# Title\n\nbody"]


def test_same_chunks_same_result_in_both_modes():
    chunks = ("a", "b", "c")
    assert route(DisplayMode.STREAMING, chunks_of(*chunks)) == route(DisplayMode.PAGED, chunks_of(*chunks))


def test_streaming_failure_keeps_printed_text():
    out = SpyOut()
    with pytest.raises(TransportError):
        route(DisplayMode.STREAMING, chunks_of("Hi", fail=TransportError("dropped")), out=out)
    assert out.getvalue() == "Hi\n"


def test_streaming_failure_before_any_chunk_prints_nothing():
    out = SpyOut()
    with pytest.raises(DecodeError):
        route(DisplayMode.STREAMING, chunks_of(fail=DecodeError("bad", "x")), out=out)
    assert out.getvalue() == ""


def test_paged_failure_shows_nothing():
    out = SpyOut()
    pager = RecordingPager()
    with pytest.raises(TransportError):
        route(DisplayMode.PAGED, chunks_of("Hi", fail=TransportError("dropped")), pager, out)
    assert out.getvalue() == ""
    assert pager.shown == []


def test_pager_failure_falls_back_to_raw_text():
    out = SpyOut()
    result = route(DisplayMode.PAGED, chunks_of("**bold**"), BrokenPager(), out)
    assert result == "**bold**"
    assert out.getvalue() == "**bold**\n"


def test_turn_receives_the_response():
    turn = Turn(turn_id=3, mode=DisplayMode.STREAMING)
    router = ResponseRouter(RecordingPager(), out=SpyOut())
    asyncio.run(router.route(DisplayMode.STREAMING, chunks_of("x", "y"), turn))
    assert turn.assistant_buffer == "xy"
    assert turn.status == "streaming"
