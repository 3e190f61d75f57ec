import asyncio
import logging
import shlex
import sys
from typing import Optional, Sequence

from ollama_cli.core.errors import ConfigError, PagerError

logger = logging.getLogger(__name__)

DEFAULT_PAGER = (sys.executable, "-m", "ollama_cli.pager")


def parse_pager_command(value: Optional[str]) -> tuple[str, ...]:
    """Split a pager command line such as `glow -p -` or `less -R`."""
    if not value or not value.strip():
        return DEFAULT_PAGER
    try:
        return tuple(shlex.split(value))
    except ValueError as exc:
        raise ConfigError(f"cannot parse pager command {value!r}: {exc}") from exc


class PagerBridge:
    """
    Hands a complete markdown document to an external pager.

    The pager inherits the terminal and reads the document from its stdin;
    control returns once it exits.
    """

    def __init__(self, command: Sequence[str] = DEFAULT_PAGER) -> None:
        self.command = tuple(command)

    async def show(self, text: str) -> int:
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command, stdin=asyncio.subprocess.PIPE
            )
        except OSError as exc:
            raise PagerError(f"cannot start pager {self.command[0]!r}: {exc}") from exc

        # a pager that quits before reading everything is not an error
        await proc.communicate(text.encode("utf-8"))
        if proc.returncode:
            logger.warning("pager %r exited with status %s", self.command[0], proc.returncode)
        return proc.returncode
