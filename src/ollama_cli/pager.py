"""
Markdown pager used for `!` prompts.

Usage:
    some-command | python -m ollama_cli.pager
"""
import logging
import os
import sys

from ollama_cli.screens import MarkdownPagerApp

logger = logging.getLogger(__name__)


def _attach_terminal() -> bool:
    """Point stdin back at the controlling terminal once the document has been read."""
    if sys.stdin.isatty():
        return True
    try:
        fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError:
        return False
    os.dup2(fd, sys.stdin.fileno())
    os.close(fd)
    return True


def main() -> int:
    markdown = sys.stdin.read()

    if not sys.stdout.isatty() or not _attach_terminal():
        logger.debug("no terminal available, writing markdown as-is")
        sys.stdout.write(markdown)
        sys.stdout.flush()
        return 0

    MarkdownPagerApp(markdown).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
