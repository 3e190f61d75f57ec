import asyncio

import httpx
import pytest

from conftest import mock_http
from ollama_cli.core.client import DEFAULT_MODEL, ModelInfo, OllamaClient
from ollama_cli.core.errors import ConfigError, TransportError

TAGS = {
    "models": [
        {"name": "mistral:latest", "details": {"family": "llama", "parameter_size": "7.2B"}},
        {"name": "codellama:13b", "details": {"family": "llama", "families": None, "parameter_size": "13B"}},
    ]
}


def server(tags=TAGS, ps=None):
    def handler(request):
        if request.url.path == "/api/tags":
            return httpx.Response(200, json=tags)
        if request.url.path == "/api/ps":
            return httpx.Response(200, json=ps or {"models": []})
        return httpx.Response(404)
    return handler


def select(endpoint, handler, requested=None):
    client = OllamaClient(endpoint, http=mock_http(handler))
    return asyncio.run(client.select_model(requested))


def test_list_models(endpoint):
    client = OllamaClient(endpoint, http=mock_http(server()))
    models = asyncio.run(client.list_models())
    assert [m.describe() for m in models] == ["- mistral:latest llama 7.2B", "- codellama:13b llama 13B"]


def test_requested_model_gets_latest_suffix(endpoint):
    assert select(endpoint, server(), "mistral") == "mistral:latest"
    assert select(endpoint, server(), "codellama:13b") == "codellama:13b"


def test_unknown_model_is_config_error(endpoint):
    with pytest.raises(ConfigError, match="available models"):
        select(endpoint, server(), "ghost")


def test_loaded_model_is_preferred(endpoint):
    ps = {"models": [{"name": "codellama:13b", "model": "codellama:13b", "details": {"family": "llama"}}]}
    assert select(endpoint, server(ps=ps)) == "codellama:13b"


def test_first_available_then_default(endpoint):
    assert select(endpoint, server()) == "mistral:latest"
    assert select(endpoint, server(tags={"models": []})) == DEFAULT_MODEL


def test_unreachable_server_falls_back(endpoint):
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    assert select(endpoint, refuse) == DEFAULT_MODEL
    assert select(endpoint, refuse, "ghost") == "ghost"


def test_list_models_unreachable_is_transport_error(endpoint):
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    client = OllamaClient(endpoint, http=mock_http(refuse))
    with pytest.raises(TransportError):
        asyncio.run(client.list_models())


def test_generate_and_chat_requests(endpoint):
    generate = OllamaClient(endpoint, model="m", http=mock_http(server()))
    assert generate.build_request("hi") == (
        "http://ollama.test:11434/api/generate",
        {"model": "m", "prompt": "hi", "stream": True},
    )

    chat = OllamaClient(endpoint, model="m", api="chat", http=mock_http(server()))
    chat.conversation.add_prompt("hi")
    url, payload = chat.build_request("hi")
    assert url == "http://ollama.test:11434/api/chat"
    assert payload == {"model": "m", "messages": [{"role": "user", "content": "hi"}], "stream": True}


def test_unknown_api_mode(endpoint):
    with pytest.raises(ConfigError):
        OllamaClient(endpoint, api="completions")


def test_model_info_from_api_tolerates_missing_details():
    assert ModelInfo.from_api({"model": "x"}) == ModelInfo(name="x")
