import logging
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from ollama_cli.core.client import OllamaClient
from ollama_cli.core.domain import DisplayMode, SessionState, parse_command
from ollama_cli.core.errors import OllamaCliError
from ollama_cli.core.router import ResponseRouter
from ollama_cli.models import Turn

logger = logging.getLogger(__name__)

EXIT_COMMANDS = {"/bye", "exit", "quit"}
USER_PROMPT = "\n[bold blue]User:[/bold blue] "
ASSISTANT_PROMPT = "\n[bold red]Assistant:[/bold red] "


class Orchestrator:
    """
    Runs the session: read a line, stream the reply, show it, repeat.

    Only one request is in flight at a time; the next line is not read until
    the current turn has been displayed or has failed.
    """

    def __init__(
        self,
        client: OllamaClient,
        router: ResponseRouter,
        console: Optional[Console] = None,
        read_line: Optional[Callable[[str], str]] = None,
        force_md: bool = False,
    ):
        self.client = client
        self.router = router
        self.console = console or Console(highlight=False)
        self.read_line = read_line or self.console.input
        self.force_md = force_md

        self.state = SessionState.AWAITING_INPUT
        self.next_turn_id = 1
        self.current_turn: Optional[Turn] = None

    def _report(self, turn: Turn, exc: OllamaCliError) -> None:
        turn.status = 'failed'
        turn.error = str(exc)
        logger.debug("turn %s failed", turn.turn_id, exc_info=True)
        self.console.print(f"[bold red]{type(exc).__name__}:[/bold red] {escape(str(exc))}")

    async def handle(self, line: str) -> Turn:
        """Run one turn for a non-empty user line and return it, finished or failed."""
        command = parse_command(line)
        mode = DisplayMode.PAGED if self.force_md else command.mode

        turn_id = self.next_turn_id
        self.next_turn_id += 1
        turn = Turn(turn_id=turn_id, user_text=line, prompt=command.text, mode=mode, status='requesting')
        self.current_turn = turn

        self.state = SessionState.REQUESTING
        if mode is DisplayMode.STREAMING:
            self.console.print(ASSISTANT_PROMPT, end="")
        try:
            chunks = self.client.stream(turn.prompt)
            self.state = SessionState.DISPLAYING
            response = await self.router.route(mode, chunks, turn)
        except OllamaCliError as exc:
            self.client.finish_turn(None)
            self._report(turn, exc)
        else:
            self.client.finish_turn(response)
            turn.status = 'final'
        finally:
            self.state = SessionState.AWAITING_INPUT
        return turn

    async def run_once(self, line: str) -> bool:
        turn = await self.handle(line)
        return turn.status == 'final'

    async def run(self) -> None:
        while self.state is not SessionState.EXIT:
            try:
                line = self.read_line(USER_PROMPT)
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                self.state = SessionState.EXIT
                break

            text = line.strip()
            if not text:
                continue
            if text in EXIT_COMMANDS:
                self.state = SessionState.EXIT
                break

            await self.handle(text)
