"""Abstract base class for summarization providers.

All providers implement this interface. The Summarizer uses it to turn
assistant text into speakable prose without knowing which backend is
configured.
"""

from abc import ABC, abstractmethod

from clarvis.events.types import Context


def topic_line(topic_label: str, context: Context | str) -> str:
    """Return the ``Project: x`` / ``Topic: x`` line sent with the text.

    Development work is framed around a project; everything else around
    a topic.
    """
    label = "Project" if context == Context.DEVELOPMENT else "Topic"
    return f"{label}: {topic_label}"


class SummaryProvider(ABC):
    """Abstract base class for summarization providers.

    ``generate`` returns the provider's raw text, or ``""`` when the
    response carries no text. It raises ``ProviderError`` on a non-2xx
    status or a transport failure; it never retries.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Configuration name of the provider (``openai``, ``ollama``)."""

    @abstractmethod
    async def generate(
        self,
        text: str,
        instruction: str,
        topic_label: str,
        context: Context | str,
    ) -> str:
        """Summarize *text* following *instruction*."""
