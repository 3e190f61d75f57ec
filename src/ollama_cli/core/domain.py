"""
Values shared between the session loop, the decoder and the router.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypedDict, Union

PAGED_SENTINEL = "!"


class DisplayMode(Enum):
    STREAMING = "streaming"
    PAGED = "paged"


class SessionState(Enum):
    AWAITING_INPUT = "awaiting_input"
    REQUESTING = "requesting"
    DISPLAYING = "displaying"
    EXIT = "exit"


class ChatMessage(TypedDict):
    role: str
    content: str


class GenerateLine(TypedDict, total=False):
    """One NDJSON object streamed by /api/generate."""
    model: str
    created_at: str
    response: str
    done: bool
    error: str


class ChatLine(TypedDict, total=False):
    """One NDJSON object streamed by /api/chat."""
    model: str
    created_at: str
    message: ChatMessage
    done: bool
    error: str
    eval_count: int
    total_duration: int


StreamLine = Union[GenerateLine, ChatLine, dict[str, Any]]


@dataclass(frozen=True)
class Chat:
    text: str

    @property
    def mode(self) -> DisplayMode:
        return DisplayMode.STREAMING


@dataclass(frozen=True)
class PagedChat:
    text: str

    @property
    def mode(self) -> DisplayMode:
        return DisplayMode.PAGED


ParsedCommand = Union[Chat, PagedChat]


def parse_command(line: str) -> ParsedCommand:
    """
    Split the paged-output sentinel off a user line.

    `!summarize x` becomes PagedChat("summarize x"); anything else is a Chat
    carrying the line unchanged.
    """
    if line.startswith(PAGED_SENTINEL):
        return PagedChat(line[len(PAGED_SENTINEL):])
    return Chat(line)
