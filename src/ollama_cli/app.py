"""
Ollama CLI
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape

from ollama_cli import __version__
from ollama_cli.config import Settings, load_settings
from ollama_cli.core.client import API_MODES, OllamaClient
from ollama_cli.core.errors import ConfigError, OllamaCliError
from ollama_cli.core.orchestrator import Orchestrator
from ollama_cli.core.pager import PagerBridge, parse_pager_command
from ollama_cli.core.router import ResponseRouter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ollama-cli",
        description="Chat with an Ollama server. Start a line with '!' to read the reply in a markdown pager.",
    )
    parser.add_argument("-m", "--model", help="model to be used")
    parser.add_argument("-f", "--force-md", action="store_true", help="show every reply in the markdown pager")
    parser.add_argument("-l", "--list-models", action="store_true", help="list available models and exit")
    parser.add_argument("--api", choices=API_MODES, help="use /api/generate or /api/chat (keeps session history)")
    parser.add_argument("--pager", help="pager command reading markdown on stdin, e.g. 'glow -p -'")
    parser.add_argument("-v", "--verbose", action="store_true", help="log requests to stderr")
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("prompt", nargs="*", help="single prompt, answered then exit")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


async def run(args: argparse.Namespace, settings: Settings, console: Console) -> int:
    pager = parse_pager_command(args.pager) if args.pager else settings.pager
    client = OllamaClient(
        settings.endpoint,
        api=args.api or settings.api,
        connect_timeout=settings.connect_timeout,
    )
    try:
        if args.list_models:
            for model in await client.list_models():
                console.print(model.describe(), markup=False)
            return 0

        await client.select_model(args.model or settings.model)
        orchestrator = Orchestrator(
            client,
            ResponseRouter(PagerBridge(pager)),
            console=console,
            force_md=args.force_md,
        )

        prompt = " ".join(args.prompt).strip()
        if prompt:
            return 0 if await orchestrator.run_once(prompt) else 1

        await orchestrator.run()
        return 0
    finally:
        await client.close()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    console = Console(highlight=False)

    try:
        settings = load_settings()
    except ConfigError as exc:
        console.print(f"[bold red]ConfigError:[/bold red] {escape(str(exc))}")
        return 2

    configure_logging("DEBUG" if args.verbose else settings.log_level)
    logger.info("Connecting to %s", settings.endpoint)

    try:
        return asyncio.run(run(args, settings, console))
    except KeyboardInterrupt:
        console.print()
        return 130
    except ConfigError as exc:
        console.print(f"[bold red]ConfigError:[/bold red] {escape(str(exc))}")
        return 2
    except OllamaCliError as exc:
        console.print(f"[bold red]{type(exc).__name__}:[/bold red] {escape(str(exc))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
