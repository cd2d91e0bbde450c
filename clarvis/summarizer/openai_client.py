"""OpenAI chat-completions summarization provider.

Sends the composed instruction as the system message and the topic line
plus assistant text as the user message, and returns the first choice's
content.
"""

import logging

import httpx

from clarvis.config import LLM_TIMEOUT, OPENAI_ENDPOINT, LLMConfig
from clarvis.errors import ConfigurationError, ProviderError
from clarvis.events.types import Context
from clarvis.summarizer.provider import SummaryProvider, topic_line

logger = logging.getLogger(__name__)


class OpenAIProvider(SummaryProvider):
    """Hosted chat-completion API client."""

    def __init__(
        self,
        api_key: str,
        model: str,
        endpoint: str | None = None,
        timeout: float = LLM_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("OpenAI provider requires api_key in [llm]")
        self._api_key = api_key
        self._model = model
        self._endpoint = endpoint or OPENAI_ENDPOINT
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(
        cls, config: LLMConfig, transport: httpx.AsyncBaseTransport | None = None
    ) -> "OpenAIProvider":
        return cls(
            api_key=config.api_key or "",
            model=config.model,
            endpoint=config.endpoint,
            transport=transport,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    async def generate(
        self,
        text: str,
        instruction: str,
        topic_label: str,
        context: Context | str,
    ) -> str:
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": instruction},
                {"role": "user", "content": f"{topic_line(topic_label, context)}\n\n{text}"},
            ],
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self._endpoint,
                    json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
        except httpx.HTTPError as exc:
            # The exception text can echo request details; keep only its kind.
            raise ProviderError("OpenAI", reason=type(exc).__name__) from None

        if not response.is_success:
            logger.warning(
                "OpenAI returned status %d (model: %s)",
                response.status_code,
                self._model,
            )
            raise ProviderError(
                "OpenAI", status_code=response.status_code, reason=response.reason_phrase
            )

        return _first_choice_content(response)


def _first_choice_content(response: httpx.Response) -> str:
    """Return ``choices[0].message.content``, or ``""`` if any part is missing."""
    try:
        data = response.json()
    except ValueError:
        logger.warning("OpenAI response body is not JSON")
        return ""

    if not isinstance(data, dict):
        return ""
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0]
    if not isinstance(first, dict):
        return ""
    message = first.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    return content if isinstance(content, str) else ""
