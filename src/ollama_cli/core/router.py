import logging
import sys
from contextlib import aclosing
from typing import AsyncGenerator, Optional, TextIO

from ollama_cli.core.domain import DisplayMode
from ollama_cli.core.errors import OllamaCliError, PagerError
from ollama_cli.core.pager import PagerBridge
from ollama_cli.models import Turn

logger = logging.getLogger(__name__)


class ResponseRouter:
    """
    Sends one turn's chunks either straight to the terminal or, buffered, to the pager.
    """

    def __init__(self, pager: PagerBridge, out: Optional[TextIO] = None) -> None:
        self.pager = pager
        self.out = out if out is not None else sys.stdout

    def _write(self, text: str) -> None:
        self.out.write(text)
        self.out.flush()

    async def route(
        self,
        mode: DisplayMode,
        chunks: AsyncGenerator[str, None],
        turn: Optional[Turn] = None,
    ) -> str:
        turn = turn or Turn(turn_id=0, mode=mode)
        async with aclosing(chunks):
            if mode is DisplayMode.PAGED:
                return await self._paged(chunks, turn)
            return await self._streaming(chunks, turn)

    async def _streaming(self, chunks: AsyncGenerator[str, None], turn: Turn) -> str:
        turn.status = 'streaming'
        try:
            async for chunk in chunks:
                self._write(chunk)
                turn.append(chunk)
        except OllamaCliError:
            # end the partial line so the error report starts on its own
            if turn.assistant_buffer:
                self._write("\n")
            raise
        self._write("\n")
        return turn.assistant_buffer

    async def _paged(self, chunks: AsyncGenerator[str, None], turn: Turn) -> str:
        turn.status = 'buffering'
        buffer: list[str] = []
        async for chunk in chunks:
            buffer.append(chunk)
        turn.assistant_buffer = "".join(buffer)

        try:
            await self.pager.show(turn.assistant_buffer)
        except PagerError as exc:
            logger.warning("%s, printing the response instead", exc)
            self._write(turn.assistant_buffer + "\n")
        return turn.assistant_buffer
