"""Shared fixtures for clarvis tests."""

import asyncio
import logging
from pathlib import Path

import pytest

from clarvis.config import (
    ClarvisConfig,
    LLMConfig,
    PromptConfig,
    StyleConfig,
    VoiceConfig,
)
from clarvis.events.types import Style
from helpers import dump_records


# ---------------------------------------------------------------------------
# Fake lspeak subprocess
# ---------------------------------------------------------------------------


class FakeProcess:
    """Stand-in for ``asyncio.subprocess.Process`` returned by the recorder."""

    def __init__(self, recorder: "LspeakRecorder", returncode: int) -> None:
        self._recorder = recorder
        self.returncode: int | None = None
        self._final_returncode = returncode

    async def communicate(self) -> tuple[bytes, bytes]:
        # Simulate playback time so overlapping dispatch would be observable.
        await asyncio.sleep(0.01)
        self._recorder.active -= 1
        self.returncode = self._final_returncode
        stderr = b"" if self._final_returncode == 0 else b"playback device busy"
        return b"", stderr


class LspeakRecorder:
    """Records every lspeak invocation instead of running it."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.envs: list[dict | None] = []
        self.active = 0
        self.max_active = 0
        self.fail_on_call: int | None = None
        self.missing_binary = False

    async def create_subprocess_exec(self, *argv, stdout=None, stderr=None, env=None):
        if self.missing_binary:
            raise FileNotFoundError(2, "No such file or directory", argv[0])
        self.calls.append(list(argv))
        self.envs.append(env)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        failing = self.fail_on_call is not None and len(self.calls) - 1 == self.fail_on_call
        return FakeProcess(self, 1 if failing else 0)

    @property
    def sentences(self) -> list[str]:
        """The sentence argument of each call (always the last argv element)."""
        return [argv[-1] for argv in self.calls]


@pytest.fixture
def lspeak(monkeypatch) -> LspeakRecorder:
    """Patch subprocess creation in the speaker with a recorder."""
    recorder = LspeakRecorder()
    monkeypatch.setattr(
        "clarvis.tts.speaker.asyncio.create_subprocess_exec",
        recorder.create_subprocess_exec,
    )
    return recorder


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig(
        provider="openai",
        api_key="sk-test-secret",
        model="gpt-4o-mini",
        base_instruction="You are JARVIS. Address the user as sir.",
        prompts=PromptConfig(
            terse="Reply in one short sentence.",
            brief="Reply in two sentences.",
            normal="Reply in a short paragraph.",
            full="Rewrite everything for speech.",
        ),
    )


@pytest.fixture
def clarvis_config(llm_config: LLMConfig) -> ClarvisConfig:
    """A complete config: every context mapped to a different style."""
    return ClarvisConfig(
        contexts={
            "assistant": StyleConfig(style=Style.BRIEF),
            "development": StyleConfig(style=Style.TERSE),
            "writing": StyleConfig(style=Style.SILENT),
            "exploration": StyleConfig(style=Style.BYPASS),
        },
        llm=llm_config,
        voice=VoiceConfig(
            provider="elevenlabs",
            voice_id="voice-123",
            api_key="el-test-secret",
            cache_threshold=0.9,
        ),
    )


# ---------------------------------------------------------------------------
# Transcripts
# ---------------------------------------------------------------------------


@pytest.fixture
def write_transcript(tmp_path: Path):
    """Return a helper writing records (or raw text) to a transcript file."""

    def _write(content: list[dict] | str, raw_newlines: bool = False) -> Path:
        path = tmp_path / "transcript.jsonl"
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(dump_records(content, raw_newlines), encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Environment hygiene
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Keep the developer's own clarvis settings out of the tests."""
    monkeypatch.delenv("CLARVIS_VOICE", raising=False)
    monkeypatch.delenv("CLARVIS_CONFIG", raising=False)
    yield
    package_logger = logging.getLogger("clarvis")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
