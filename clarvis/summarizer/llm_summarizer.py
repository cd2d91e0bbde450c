"""Style-driven summarization of assistant messages into speakable sentences.

The configured provider rewrites the message according to a per-style
template; the result is split into sentences so each can be spoken (and
cached by the speech service) on its own. The ``bypass`` style skips the
provider entirely and speaks the message verbatim.
"""

import logging

import httpx

from clarvis.config import LLMConfig
from clarvis.errors import ConfigurationError
from clarvis.events.types import Context, Intent, Style
from clarvis.summarizer.provider import SummaryProvider
from clarvis.summarizer.provider_factory import create_summary_provider
from clarvis.summarizer.segmenter import split_sentences

NO_PROJECT = "none"


def build_instruction(
    template: str,
    context: Context,
    intent: Intent,
    project: str | None = None,
    base_instruction: str | None = None,
) -> str:
    """Compose the full provider instruction.

    The classification block states context, intent, and project
    explicitly so the model does not have to infer them from the text.
    """
    classification = "\n".join(
        [
            "[MESSAGE CLASSIFICATION]",
            f"context: {context.value}",
            f"intent: {intent.value}",
            f"project: {project or NO_PROJECT}",
        ]
    )
    parts = [base_instruction, classification, template]
    return "\n\n".join(part for part in parts if part)


class Summarizer:
    """Turn assistant text into a sequence of sentences for the speaker.

    The provider is created on first use, so ``bypass`` never touches the
    provider configuration or the network.
    """

    def __init__(
        self,
        config: LLMConfig,
        provider: SummaryProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._provider = provider
        self._transport = transport
        self._logger = logger or logging.getLogger(__name__)

    @property
    def provider(self) -> SummaryProvider:
        """The configured provider, created on first access."""
        if self._provider is None:
            self._provider = create_summary_provider(self._config, self._transport)
        return self._provider

    async def summarize(
        self,
        text: str,
        style: Style | str,
        context: Context | str = Context.ASSISTANT,
        intent: Intent | str = Intent.DISCUSSION,
        project: str | None = None,
    ) -> list[str]:
        """Summarize *text* in the given *style*.

        Raises ``ConfigurationError`` when no template exists for *style*;
        provider failures propagate unchanged.
        """
        if style == Style.BYPASS:
            self._logger.debug("Bypass style — passing %d chars through", len(text))
            return [text]

        template = self._template_for(style)
        instruction = build_instruction(
            template,
            Context(context),
            Intent(intent),
            project,
            self._config.base_instruction,
        )

        self._logger.debug(
            "Summarizing %d chars: style=%s context=%s intent=%s project=%s",
            len(text),
            style,
            context,
            intent,
            project,
        )
        raw = await self.provider.generate(
            text, instruction, project or NO_PROJECT, Context(context)
        )

        sentences = split_sentences(raw)
        self._logger.debug("Provider returned %d sentence(s)", len(sentences))
        return sentences

    def _template_for(self, style: Style | str) -> str:
        try:
            resolved = Style(style)
        except ValueError:
            raise ConfigurationError(f"No prompt configured for style: {style}") from None

        template = self._config.prompts.for_style(resolved)
        if not template:
            raise ConfigurationError(f"No prompt configured for style: {resolved.value}")
        return template
