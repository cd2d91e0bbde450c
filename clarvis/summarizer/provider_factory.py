"""Summary provider factory: selects and instantiates the configured provider."""

import logging
from collections.abc import Callable

import httpx

from clarvis.config import LLMConfig
from clarvis.errors import ConfigurationError
from clarvis.summarizer.ollama_client import OllamaProvider
from clarvis.summarizer.openai_client import OpenAIProvider
from clarvis.summarizer.provider import SummaryProvider

logger = logging.getLogger(__name__)

ProviderBuilder = Callable[[LLMConfig, httpx.AsyncBaseTransport | None], SummaryProvider]

PROVIDERS: dict[str, ProviderBuilder] = {
    "openai": OpenAIProvider.from_config,
    "ollama": OllamaProvider.from_config,
}


def create_summary_provider(
    config: LLMConfig, transport: httpx.AsyncBaseTransport | None = None
) -> SummaryProvider:
    """Create the provider named by ``[llm] provider``.

    Raises ``ConfigurationError`` for an unknown provider name or when the
    provider's own requirements (such as an API key) are not met.
    """
    name = config.provider.lower()
    builder = PROVIDERS.get(name)
    if builder is None:
        raise ConfigurationError(
            f"Unsupported LLM provider: {config.provider!r} "
            f"(expected one of: {', '.join(sorted(PROVIDERS))})"
        )

    logger.debug("Creating %s summary provider (model: %s)", name, config.model)
    return builder(config, transport)
