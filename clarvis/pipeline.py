"""The hook-to-speech pipeline.

One Claude Code ``Stop`` hook invocation runs exactly one pass:

    hook stdin -> transcript -> control tag -> summarizer -> speaker

Each stage either hands a result to the next or ends the run quietly
("nothing to do"). Configuration problems and provider or speech failures
raise; ``run_hook`` is the only place they are caught.
"""

import logging
from collections.abc import Callable
from typing import TextIO

import httpx

from clarvis.config import (
    FALLBACK_UTTERANCE,
    ClarvisConfig,
    StyleConfig,
    VoiceConfig,
    is_voice_disabled,
    load_config,
)
from clarvis.errors import ConfigurationError
from clarvis.events.types import Context, Intent, Style
from clarvis.interceptors.hook_handler import read_hook_event
from clarvis.interceptors.transcript_reader import TranscriptReader
from clarvis.logging_setup import configure_logging
from clarvis.summarizer.llm_summarizer import Summarizer
from clarvis.tts.speaker import Speaker

_DEFAULT_CONTEXT = Context.ASSISTANT
_DEFAULT_INTENT = Intent.DISCUSSION


def resolve_style(config: ClarvisConfig, context: Context) -> StyleConfig:
    """Return the style for *context*, falling back to the assistant context."""
    style = config.contexts.get(context.value) or config.contexts.get(
        _DEFAULT_CONTEXT.value
    )
    if style is None:
        raise ConfigurationError(
            f"No configuration found for context '{context.value}' "
            f"and no '{_DEFAULT_CONTEXT.value}' context configured"
        )
    return style


def require_voice(config: ClarvisConfig) -> VoiceConfig:
    """Return ``[voice]``, checking provider credentials it depends on."""
    if config.voice is None:
        raise ConfigurationError("Voice configuration missing from config.toml")
    if config.voice.provider == "elevenlabs" and not config.voice.api_key:
        raise ConfigurationError(
            "ElevenLabs API key required when using elevenlabs provider"
        )
    return config.voice


class HookPipeline:
    """Runs the stages for one hook event, strictly in sequence.

    Collaborators are injectable: *config_loader* supplies the parsed
    config.toml, *transport* is handed to the summary provider's HTTP
    client, and *logger* replaces the module loggers of every stage.
    """

    def __init__(
        self,
        config_loader: Callable[[], ClarvisConfig] = load_config,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config_loader = config_loader
        self._transport = transport
        self._logger = logger or logging.getLogger(__name__)

    async def run(self, stream: TextIO | None = None) -> None:
        """Process one hook event. Raises on configuration or service failure."""
        event = await read_hook_event(stream, logger=self._logger)
        if event is None:
            return
        if event.already_handled:
            self._logger.debug("stop_hook_active set — skipping")
            return

        config = self._load_config()
        self._logger.info(
            "Hook event received: name=%s session=%s",
            event.event_name,
            event.session_id,
        )

        message = TranscriptReader(logger=self._logger).read_last_message(
            event.transcript_path
        )
        if not message.text:
            self._logger.debug("No assistant text to speak")
            return

        context = message.tag.context if message.tag else _DEFAULT_CONTEXT
        intent = message.tag.intent if message.tag else _DEFAULT_INTENT
        project = message.tag.project if message.tag else None
        self._logger.debug(
            "Resolved classification: context=%s intent=%s project=%s (tagged=%s)",
            context.value,
            intent.value,
            project,
            message.tag is not None,
        )

        style_config = resolve_style(config, context)
        if style_config.style is Style.SILENT:
            self._logger.debug("Silent style for context %s", context.value)
            return

        summarizer = Summarizer(
            config.llm, transport=self._transport, logger=self._logger
        )
        sentences = await summarizer.summarize(
            message.text, style_config.style, context, intent, project
        )
        sentences = [s for s in sentences if s.strip()]
        if not sentences:
            self._logger.debug("Summarizer produced nothing to speak")
            return

        speaker = Speaker(require_voice(config), logger=self._logger)
        await speaker.speak(sentences, style_config.style, style_config.cache)
        self._logger.info("Spoke %d sentence(s)", len(sentences))

    def _load_config(self) -> ClarvisConfig:
        config = self._config_loader()
        # Configure only when using the module loggers; an injected logger
        # belongs to the caller.
        if self._logger is logging.getLogger(__name__):
            configure_logging(config.debug)
        return config


async def speak_fallback(logger: logging.Logger | None = None) -> None:
    """Speak the fixed failure notice with the system voice. Never raises."""
    log = logger or logging.getLogger(__name__)
    try:
        await Speaker(VoiceConfig(provider="system"), logger=log).speak(
            [FALLBACK_UTTERANCE], Style.TERSE
        )
    except Exception:
        log.debug("Fallback utterance failed", exc_info=True)


async def run_hook(
    stream: TextIO | None = None,
    config_loader: Callable[[], ClarvisConfig] = load_config,
    transport: httpx.AsyncBaseTransport | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Top-level boundary for one hook invocation. Never raises.

    Failures are logged in full, then the user hears a fixed, detail-free
    notice so a broken setup is never silent.
    """
    log = logger or logging.getLogger(__name__)

    if is_voice_disabled():
        return

    try:
        await HookPipeline(config_loader, transport, logger).run(stream)
    except Exception:
        log.exception("clarvis hook processing failed")
        await speak_fallback(log)
