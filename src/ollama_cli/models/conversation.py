from dataclasses import dataclass, field

from ollama_cli.core.domain import ChatMessage


@dataclass
class Conversation:
    """
    Messages exchanged during this session, sent with every /api/chat request.

    Lives only as long as the process.
    """
    messages: list[ChatMessage] = field(default_factory=list)

    def add_prompt(self, prompt: str) -> None:
        self.messages.append({'role': 'user', 'content': prompt})

    def add_response(self, response: str) -> None:
        self.messages.append({'role': 'assistant', 'content': response})

    def drop_pending_prompt(self) -> None:
        """Forget a user message whose request failed."""
        if self.messages and self.messages[-1]['role'] == 'user':
            self.messages.pop()

    def response(self) -> str | None:
        for msg in reversed(self.messages):
            if msg['role'] == 'assistant':
                return msg['content']
        return None
