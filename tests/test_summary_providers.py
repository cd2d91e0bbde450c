"""Tests for the OpenAI and Ollama summary providers and their factory."""

import json

import httpx
import pytest

from clarvis.config import LLMConfig
from clarvis.errors import ConfigurationError, ProviderError
from clarvis.events.types import Context
from clarvis.summarizer.ollama_client import OllamaProvider
from clarvis.summarizer.openai_client import OpenAIProvider
from clarvis.summarizer.provider import SummaryProvider, topic_line
from clarvis.summarizer.provider_factory import create_summary_provider


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _Recorder:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, status_code: int = 200, body=None, raise_exc=None) -> None:
        self.requests: list[httpx.Request] = []
        self._status_code = status_code
        self._body = body
        self._raise_exc = raise_exc

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._raise_exc is not None:
            raise self._raise_exc(f"cannot reach {request.url}", request=request)
        if isinstance(self._body, (dict, list)):
            return httpx.Response(self._status_code, json=self._body)
        return httpx.Response(self._status_code, text=self._body or "")

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def _openai(recorder: _Recorder, api_key: str = "sk-test-secret") -> OpenAIProvider:
    return OpenAIProvider(
        api_key=api_key,
        model="gpt-4o-mini",
        transport=httpx.MockTransport(recorder),
    )


def _ollama(recorder: _Recorder) -> OllamaProvider:
    return OllamaProvider(model="llama3.2", transport=httpx.MockTransport(recorder))


def _chat_body(content) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


# ---------------------------------------------------------------------------
# topic_line
# ---------------------------------------------------------------------------


class TestTopicLine:
    def test_development_uses_project_label(self):
        assert topic_line("auth", Context.DEVELOPMENT) == "Project: auth"

    @pytest.mark.parametrize(
        "context", [Context.ASSISTANT, Context.EXPLORATION, Context.WRITING]
    )
    def test_other_contexts_use_topic_label(self, context):
        assert topic_line("none", context) == "Topic: none"

    def test_accepts_plain_strings(self):
        assert topic_line("auth", "development") == "Project: auth"


# ---------------------------------------------------------------------------
# OpenAIProvider
# ---------------------------------------------------------------------------


class TestOpenAIProvider:
    async def test_request_shape(self):
        recorder = _Recorder(body=_chat_body("Auth is done, sir."))
        provider = _openai(recorder)

        result = await provider.generate(
            "JWT work is done.", "Be terse.", "auth", Context.DEVELOPMENT
        )

        assert result == "Auth is done, sir."
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test-secret"
        body = recorder.last_json
        assert body["model"] == "gpt-4o-mini"
        assert body["messages"][0] == {"role": "system", "content": "Be terse."}
        assert body["messages"][1] == {
            "role": "user",
            "content": "Project: auth\n\nJWT work is done.",
        }

    async def test_custom_endpoint(self):
        recorder = _Recorder(body=_chat_body("ok"))
        provider = OpenAIProvider(
            api_key="sk-test-secret",
            model="m",
            endpoint="http://localhost:8080/v1/chat/completions",
            transport=httpx.MockTransport(recorder),
        )
        await provider.generate("t", "i", "none", Context.ASSISTANT)
        assert recorder.requests[0].url.host == "localhost"

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"choices": []},
            {"choices": None},
            {"choices": [{}]},
            {"choices": [{"message": None}]},
            _chat_body(None),
            [],
            "not json at all",
        ],
    )
    async def test_missing_fields_read_as_empty(self, body):
        provider = _openai(_Recorder(body=body))
        assert await provider.generate("t", "i", "none", Context.ASSISTANT) == ""

    @pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
    async def test_non_2xx_raises_with_status(self, status):
        provider = _openai(_Recorder(status_code=status, body={"error": "nope"}))

        with pytest.raises(ProviderError) as excinfo:
            await provider.generate("t", "i", "none", Context.ASSISTANT)

        assert excinfo.value.status_code == status
        assert str(status) in str(excinfo.value)
        assert "sk-test-secret" not in str(excinfo.value)

    @pytest.mark.parametrize("exc", [httpx.ConnectError, httpx.ReadTimeout])
    async def test_transport_failure_raises(self, exc):
        provider = _openai(_Recorder(raise_exc=exc))

        with pytest.raises(ProviderError) as excinfo:
            await provider.generate("t", "i", "none", Context.ASSISTANT)

        assert excinfo.value.status_code is None
        assert exc.__name__ in str(excinfo.value)
        assert "sk-test-secret" not in str(excinfo.value)

    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            OpenAIProvider(api_key="", model="gpt-4o-mini")

    def test_provider_name(self):
        assert _openai(_Recorder()).provider_name == "openai"


# ---------------------------------------------------------------------------
# OllamaProvider
# ---------------------------------------------------------------------------


class TestOllamaProvider:
    async def test_request_shape(self):
        recorder = _Recorder(body={"response": "All good, sir."})
        provider = _ollama(recorder)

        result = await provider.generate(
            "Here is what I found.", "Be brief.", "none", Context.EXPLORATION
        )

        assert result == "All good, sir."
        request = recorder.requests[0]
        assert str(request.url) == "http://localhost:11434/api/generate"
        assert "Authorization" not in request.headers
        assert recorder.last_json == {
            "model": "llama3.2",
            "prompt": "Be brief.\n\nTopic: none\n\nHere is what I found.",
            "stream": False,
        }

    @pytest.mark.parametrize("body", [{}, {"response": None}, {"response": 7}, [1]])
    async def test_missing_response_reads_as_empty(self, body):
        provider = _ollama(_Recorder(body=body))
        assert await provider.generate("t", "i", "none", Context.ASSISTANT) == ""

    async def test_non_2xx_raises_with_status(self):
        provider = _ollama(_Recorder(status_code=404, body={"error": "model not found"}))

        with pytest.raises(ProviderError) as excinfo:
            await provider.generate("t", "i", "none", Context.ASSISTANT)

        assert excinfo.value.status_code == 404
        assert excinfo.value.provider == "Ollama"

    async def test_connection_refused(self):
        provider = _ollama(_Recorder(raise_exc=httpx.ConnectError))

        with pytest.raises(ProviderError, match="ConnectError"):
            await provider.generate("t", "i", "none", Context.ASSISTANT)

    def test_provider_name(self):
        assert _ollama(_Recorder()).provider_name == "ollama"


# ---------------------------------------------------------------------------
# create_summary_provider
# ---------------------------------------------------------------------------


class TestProviderFactory:
    def test_openai(self):
        config = LLMConfig(provider="openai", api_key="sk-x", model="gpt-4o-mini")
        provider = create_summary_provider(config)
        assert isinstance(provider, OpenAIProvider)
        assert isinstance(provider, SummaryProvider)

    def test_ollama(self):
        provider = create_summary_provider(LLMConfig(provider="ollama", model="llama3.2"))
        assert isinstance(provider, OllamaProvider)

    def test_case_insensitive(self):
        provider = create_summary_provider(LLMConfig(provider="Ollama", model="llama3.2"))
        assert isinstance(provider, OllamaProvider)

    @pytest.mark.parametrize("name", ["anthropic", "", "open-ai", "gpt"])
    def test_unknown_provider_is_fatal(self, name):
        with pytest.raises(ConfigurationError, match="Unsupported LLM provider"):
            create_summary_provider(LLMConfig(provider=name, model="m"))

    def test_openai_without_key_is_fatal(self):
        with pytest.raises(ConfigurationError):
            create_summary_provider(LLMConfig(provider="openai", model="gpt-4o-mini"))

    async def test_transport_is_passed_through(self):
        recorder = _Recorder(body={"response": "ok"})
        provider = create_summary_provider(
            LLMConfig(provider="ollama", model="llama3.2", endpoint="http://gpu-box:11434/api/generate"),
            transport=httpx.MockTransport(recorder),
        )
        await provider.generate("t", "i", "none", Context.ASSISTANT)
        assert recorder.requests[0].url.host == "gpu-box"
