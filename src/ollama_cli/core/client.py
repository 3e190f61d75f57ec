"""Client for the Ollama HTTP API."""
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ollama_cli.core.endpoint import Endpoint
from ollama_cli.core.errors import ConfigError, ServerError, TransportError
from ollama_cli.core.ollama_adapter import stream_chunks
from ollama_cli.models import Conversation

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3.1:latest"
API_MODES = ("generate", "chat")


@dataclass(frozen=True)
class ModelInfo:
    name: str
    family: str = ""
    parameter_size: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ModelInfo":
        details = data.get('details') or {}
        return cls(
            name=data.get('name') or data.get('model') or '',
            family=details.get('family') or '',
            parameter_size=details.get('parameter_size') or '',
        )

    def describe(self) -> str:
        return f"- {self.name} {self.family} {self.parameter_size}".rstrip()


class OllamaClient:
    """HTTP client for streamed Ollama completions."""

    def __init__(
        self,
        endpoint: Endpoint,
        model: str = DEFAULT_MODEL,
        api: str = "generate",
        connect_timeout: float = 10.0,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if api not in API_MODES:
            raise ConfigError(f"unknown API mode {api!r}, expected one of {', '.join(API_MODES)}")
        self.endpoint = endpoint
        self.model = model
        self.api = api
        self.conversation = Conversation()
        # no read timeout: a slow model keeps the session waiting
        self._http = http or httpx.AsyncClient(timeout=httpx.Timeout(None, connect=connect_timeout))

    async def _get_models(self, path: str) -> list[ModelInfo]:
        url = self.endpoint.join(path)
        try:
            resp = await self._http.get(url)
        except httpx.RequestError as exc:
            raise TransportError(f"cannot reach {url}: {str(exc) or type(exc).__name__}") from exc
        if resp.is_error:
            raise ServerError(f"HTTP {resp.status_code} from {url}", status_code=resp.status_code)
        try:
            models = resp.json().get('models') or []
        except (ValueError, AttributeError) as exc:
            raise ServerError(f"unexpected model list from {url}") from exc
        return [ModelInfo.from_api(m) for m in models if isinstance(m, dict)]

    async def list_models(self) -> list[ModelInfo]:
        return await self._get_models("api/tags")

    async def loaded_models(self) -> list[ModelInfo]:
        return await self._get_models("api/ps")

    async def select_model(self, requested: Optional[str] = None) -> str:
        """
        Pick the model used for every turn.

        A requested model must exist on the server, either as given or with
        ":latest" appended. Without one, prefer a model already loaded in
        memory, then the first installed one, then DEFAULT_MODEL. When the
        server cannot be reached the choice is made without it.
        """
        try:
            available = await self.list_models()
            loaded = [] if requested else await self.loaded_models()
        except TransportError as exc:
            self.model = requested or DEFAULT_MODEL
            logger.warning("Could not list models (%s), using '%s'", exc, self.model)
            return self.model

        names = [m.name for m in available]
        if requested:
            if available and requested not in names:
                if f"{requested}:latest" not in names:
                    raise ConfigError(
                        f"Cannot load model '{requested}', available models are {names}"
                    )
                requested = f"{requested}:latest"
            self.model = requested
        elif loaded:
            self.model = loaded[0].name
            logger.info("Using loaded model '%s'", self.model)
        elif available:
            self.model = available[0].name
            logger.info("Using first available model '%s'", self.model)
        else:
            self.model = DEFAULT_MODEL
            logger.info("Using default model '%s'", self.model)
        return self.model

    def build_request(self, prompt: str) -> tuple[str, Dict[str, Any]]:
        if self.api == "chat":
            payload = {
                'model': self.model,
                'messages': list(self.conversation.messages),
                'stream': True,
            }
            return self.endpoint.join("api/chat"), payload

        payload = {'model': self.model, 'prompt': prompt, 'stream': True}
        return self.endpoint.join("api/generate"), payload

    def stream(self, prompt: str) -> AsyncIterator[str]:
        """
        Start one streamed completion.

        In chat mode the prompt is recorded in the conversation first; call
        `finish_turn` once the sequence has been consumed.
        """
        if self.api == "chat":
            self.conversation.add_prompt(prompt)
        url, payload = self.build_request(prompt)
        return stream_chunks(self._http, url, payload)

    def finish_turn(self, response: Optional[str]) -> None:
        """Record the reply in chat mode, or forget the prompt when the turn failed."""
        if self.api != "chat":
            return
        if response is None:
            self.conversation.drop_pending_prompt()
        else:
            self.conversation.add_response(response)

    async def close(self) -> None:
        await self._http.aclose()
