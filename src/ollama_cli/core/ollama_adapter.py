import json
import logging
from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from ollama_cli.core.domain import StreamLine
from ollama_cli.core.errors import DecodeError, ServerError, TransportError

logger = logging.getLogger(__name__)


def _extract_text(data: Mapping[str, Any]) -> str:
    text = data.get('response')
    if isinstance(text, str):
        return text

    msg = data.get('message')
    if isinstance(msg, Mapping):
        content = msg.get('content')
        if isinstance(content, str):
            return content

    return ''


def _parse_line(line: str) -> StreamLine:
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"malformed JSON in stream ({exc.msg})", line) from exc

    if not isinstance(data, dict):
        raise DecodeError("stream line is not a JSON object", line)
    return data


def _error_message(body: bytes) -> Optional[str]:
    try:
        data = json.loads(body)
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get('error'), str):
        return data['error']
    return None


async def decode_lines(lines: AsyncIterator[str]) -> AsyncIterator[str]:
    """
    Turn newline-delimited JSON into text chunks.

    Each line is parsed on its own as soon as it arrives. The sequence ends at
    the first object with `done: true`; a body that ends before that is a
    dropped connection.
    """
    async for line in lines:
        if not line.strip():
            continue

        data = _parse_line(line)
        if 'error' in data:
            raise ServerError(str(data['error']))

        text = _extract_text(data)
        if data.get('done'):
            if text:
                yield text
            return

        yield text

    raise TransportError("connection closed before the server finished the response")


async def stream_chunks(
    client: httpx.AsyncClient, url: str, payload: Mapping[str, Any]
) -> AsyncIterator[str]:
    """
    POST `payload` to `url` with streaming enabled and yield decoded chunks.

    The connection is closed when the sequence is exhausted, fails, or is
    closed early by the consumer.
    """
    logger.debug("POST %s model=%s", url, payload.get('model'))
    try:
        async with client.stream('POST', url, json=dict(payload)) as response:
            if response.is_error:
                body = await response.aread()
                message = _error_message(body) or f"HTTP {response.status_code} from {url}"
                raise ServerError(message, status_code=response.status_code)

            async for chunk in decode_lines(response.aiter_lines()):
                yield chunk
    except httpx.RequestError as exc:
        reason = str(exc) or type(exc).__name__
        raise TransportError(f"lost connection to {url}: {reason}") from exc
