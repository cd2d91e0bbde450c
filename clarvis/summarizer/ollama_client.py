"""Ollama summarization provider.

Calls a locally hosted Ollama ``/api/generate`` endpoint with the whole
prompt in a single non-streaming request.
"""

import logging

import httpx

from clarvis.config import LLM_TIMEOUT, OLLAMA_ENDPOINT, LLMConfig
from clarvis.errors import ProviderError
from clarvis.events.types import Context
from clarvis.summarizer.provider import SummaryProvider, topic_line

logger = logging.getLogger(__name__)


class OllamaProvider(SummaryProvider):
    """Local generation API client. No credentials required."""

    def __init__(
        self,
        model: str,
        endpoint: str | None = None,
        timeout: float = LLM_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._model = model
        self._endpoint = endpoint or OLLAMA_ENDPOINT
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(
        cls, config: LLMConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> "OllamaProvider":
        return cls(model=config.model, endpoint=config.endpoint, transport=transport)

    @property
    def provider_name(self) -> str:
        return "ollama"

    async def generate(
        self,
        text: str,
        instruction: str,
        topic_label: str,
        context: Context | str,
    ) -> str:
        prompt = f"{instruction}\n\n{topic_line(topic_label, context)}\n\n{text}"

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._endpoint,
                    json={"model": self._model, "prompt": prompt, "stream": False},
                )
        except httpx.HTTPError as exc:
            raise ProviderError("Ollama", reason=type(exc).__name__) from None

        if not response.is_success:
            logger.warning(
                "Ollama returned status %d at %s (model: %s)",
                response.status_code,
                self._endpoint,
                self._model,
            )
            raise ProviderError(
                "Ollama", status_code=response.status_code, reason=response.reason_phrase
            )

        try:
            data = response.json()
        except ValueError:
            logger.warning("Ollama response body is not JSON")
            return ""
        if not isinstance(data, dict):
            return ""
        summary = data.get("response")
        return summary if isinstance(summary, str) else ""
