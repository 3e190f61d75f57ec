"""
Data models for the Ollama terminal client.
"""
from dataclasses import dataclass
from typing import Optional

from ollama_cli.core.domain import DisplayMode


@dataclass
class Turn:
    """
    One user prompt and the response accumulated for it.
    """
    turn_id: int
    user_text: str = ""
    prompt: str = ""
    mode: DisplayMode = DisplayMode.STREAMING
    assistant_buffer: str = ""
    status: str = 'idle'
    error: Optional[str] = None

    def append(self, chunk: str) -> None:
        self.assistant_buffer += chunk
