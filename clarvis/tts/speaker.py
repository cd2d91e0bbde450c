"""Speak sentences through the ``lspeak`` command-line speech service.

lspeak owns synthesis, playback, and its own phrase cache; clarvis only
decides whether the cache should be used and feeds it one sentence at a
time. Sentences are model-generated, so they are passed as a discrete
argv element after ``--`` and never through a shell.
"""

import asyncio
import logging
import os

from clarvis.config import LSPEAK_BINARY, VoiceConfig
from clarvis.errors import SpeechError
from clarvis.events.types import Style

_SYSTEM_PROVIDER = "system"
_ELEVENLABS_PROVIDER = "elevenlabs"


def should_cache(style: Style | str, use_cache: bool | None = None) -> bool:
    """Return whether lspeak's cache applies to this utterance.

    An explicit *use_cache* wins. Otherwise everything is cached except
    ``bypass`` output, which is verbatim text unlikely to repeat.
    """
    if use_cache is not None:
        return use_cache
    return style != Style.BYPASS


class Speaker:
    """Sequential sentence dispatcher for lspeak.

    Usage::

        speaker = Speaker(config.voice)
        await speaker.speak(["Build passed.", "Two warnings."], Style.TERSE)
    """

    def __init__(
        self,
        voice: VoiceConfig,
        binary: str = LSPEAK_BINARY,
        logger: logging.Logger | None = None,
    ) -> None:
        self._voice = voice
        self._binary = binary
        self._logger = logger or logging.getLogger(__name__)

    def build_command(self, sentence: str, use_cache: bool) -> list[str]:
        """Return the lspeak argv for one sentence."""
        args = [self._binary]

        if not use_cache:
            args.append("--no-cache")

        if self._voice.provider:
            args += ["--provider", self._voice.provider]

        # The system provider always uses the OS default voice.
        if self._voice.voice_id and self._voice.provider != _SYSTEM_PROVIDER:
            args += ["--voice", self._voice.voice_id]

        if self._voice.cache_threshold is not None:
            args += ["--cache-threshold", str(self._voice.cache_threshold)]

        args += ["--", sentence]
        return args

    def build_env(self) -> dict[str, str] | None:
        """Return the child environment, or ``None`` to inherit ours."""
        if self._voice.provider == _ELEVENLABS_PROVIDER and self._voice.api_key:
            return {**os.environ, "ELEVENLABS_API_KEY": self._voice.api_key}
        return None

    async def speak(
        self,
        sentences: list[str],
        style: Style | str,
        use_cache: bool | None = None,
    ) -> None:
        """Speak *sentences* in order, each finishing before the next starts.

        Raises ``SpeechError`` on the first sentence lspeak fails to speak;
        the remaining sentences are not attempted.
        """
        cache = should_cache(style, use_cache)
        env = self.build_env()

        self._logger.debug(
            "Speaking %d sentence(s): style=%s cache=%s provider=%s",
            len(sentences),
            style,
            cache,
            self._voice.provider,
        )

        for index, sentence in enumerate(sentences):
            await self._speak_one(self.build_command(sentence, cache), env)
            self._logger.debug("Spoke sentence %d/%d", index + 1, len(sentences))

    async def _speak_one(self, argv: list[str], env: dict[str, str] | None) -> None:
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except OSError as exc:
            raise SpeechError(reason=f"cannot run {self._binary}: {exc.strerror or exc}") from exc

        _, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip() if stderr else ""
            self._logger.warning("lspeak failed (status %s): %s", proc.returncode, detail)
            raise SpeechError(returncode=proc.returncode, reason=detail[:200])
