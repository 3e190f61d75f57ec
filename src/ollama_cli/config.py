"""
Settings read from the environment (and a .env file, via python-dotenv).
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from ollama_cli.core.client import API_MODES
from ollama_cli.core.endpoint import Endpoint, resolve_endpoint
from ollama_cli.core.errors import ConfigError
from ollama_cli.core.pager import parse_pager_command


@dataclass(frozen=True)
class Settings:
    endpoint: Endpoint
    model: Optional[str] = None
    api: str = "generate"
    pager: tuple[str, ...] = ()
    connect_timeout: float = 10.0
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        api = (env.get("OLLAMA_API") or "generate").strip().lower()
        if api not in API_MODES:
            raise ConfigError(f"OLLAMA_API must be one of {', '.join(API_MODES)}, got {api!r}")

        raw_timeout = env.get("OLLAMA_CONNECT_TIMEOUT") or "10"
        try:
            connect_timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigError(f"OLLAMA_CONNECT_TIMEOUT is not a number: {raw_timeout!r}") from exc

        return cls(
            endpoint=resolve_endpoint(env),
            model=(env.get("OLLAMA_MODEL") or "").strip() or None,
            api=api,
            pager=parse_pager_command(env.get("OLLAMA_PAGER")),
            connect_timeout=connect_timeout,
            log_level=(env.get("OLLAMA_CLI_LOG") or "WARNING").upper(),
        )


def load_settings() -> Settings:
    load_dotenv()
    return Settings.from_env()
