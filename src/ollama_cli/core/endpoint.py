"""
Where the Ollama server lives.
"""
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

import httpx

from ollama_cli.core.errors import ConfigError

logger = logging.getLogger(__name__)

HOST_ENV = "OLLAMA_HOST"
DEFAULT_HOST = "http://localhost:11434"

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class Endpoint:
    """
    Base URL of the inference server.

    `url` keeps the configured string verbatim so that str(endpoint) round-trips.
    """
    url: str
    scheme: str
    host: str
    port: int

    def __str__(self) -> str:
        return self.url

    def join(self, path: str) -> str:
        return self.url.rstrip("/") + "/" + path.lstrip("/")


def parse_endpoint(raw: str) -> Endpoint:
    try:
        parsed = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"{HOST_ENV} is not a valid URL: {raw!r} ({exc})") from exc

    if parsed.scheme not in _DEFAULT_PORTS:
        raise ConfigError(f"{HOST_ENV} must start with http:// or https://, got {raw!r}")
    if not parsed.host:
        raise ConfigError(f"{HOST_ENV} has no host: {raw!r}")
    if any(c.isspace() for c in raw) or "%" in parsed.host:
        raise ConfigError(f"{HOST_ENV} has an invalid host: {raw!r}")
    if parsed.port is not None and not 0 < parsed.port <= 65535:
        raise ConfigError(f"{HOST_ENV} port must be 1-65535, got {parsed.port}")

    port = parsed.port or _DEFAULT_PORTS[parsed.scheme]
    return Endpoint(url=raw, scheme=parsed.scheme, host=parsed.host, port=port)


def resolve_endpoint(environ: Optional[Mapping[str, str]] = None) -> Endpoint:
    """Read OLLAMA_HOST, falling back to the server's default port on localhost."""
    env = os.environ if environ is None else environ
    raw = (env.get(HOST_ENV) or "").strip()
    endpoint = parse_endpoint(raw) if raw else parse_endpoint(DEFAULT_HOST)
    logger.info("Endpoint is %s", endpoint)
    return endpoint
