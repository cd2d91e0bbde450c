"""Recover the most recent assistant message from a Claude Code transcript.

Claude Code stores each session as a JSONL file. Each record looks like::

    {
        "type": "assistant",
        "message": {
            "role": "assistant",
            "content": [
                {"type": "text", "text": "..."},
                {"type": "tool_use", ...}
            ]
        },
        ...
    }

Physical lines do not always line up with records: a text field can
carry raw newlines, and the session may still be appending when the hook
fires. ``iter_records`` walks the file once with a JSON decoder cursor,
so multi-line records cost nothing extra and a broken line only loses
that line.
"""

from __future__ import annotations

import json
import logging
import re
from collections import deque
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from clarvis.config import TRANSCRIPT_SCAN_DEPTH
from clarvis.events.types import AssistantMessage
from clarvis.interceptors.control_tag import find_control_tag

# strict=False lets raw control characters (newlines) live inside strings.
_DECODER = json.JSONDecoder(strict=False)

_WHITESPACE = re.compile(r"\s*")

# At most one blank-line separator in front of a trailing tag.
_TRAILING_SEPARATOR = re.compile(r"\n\n?\Z")


# ---------------------------------------------------------------------------
# Record scanning
# ---------------------------------------------------------------------------


def iter_records(
    content: str, logger: logging.Logger | None = None
) -> Iterator[Any]:
    """Yield every complete JSON value in *content*, oldest first.

    A value that fails to decode is skipped up to the next line break and
    scanning resumes there. A value cut off by the end of the content is
    dropped silently: the writer is most likely still appending it.
    """
    log = logger or logging.getLogger(__name__)
    pos = _WHITESPACE.match(content, 0).end()
    end = len(content)

    while pos < end:
        try:
            record, next_pos = _DECODER.raw_decode(content, pos)
        except json.JSONDecodeError as exc:
            newline = content.find("\n", pos)
            if newline == -1:
                log.debug("Incomplete trailing transcript record at offset %d", pos)
                return
            log.debug(
                "Skipping malformed transcript line at offset %d: %s", pos, exc.msg
            )
            pos = _WHITESPACE.match(content, newline).end()
            continue

        yield record
        pos = _WHITESPACE.match(content, next_pos).end()


def extract_assistant_text(record: Any) -> str | None:
    """Return the first non-empty text segment of an assistant record.

    Returns ``None`` for anything that is not an assistant turn with text,
    including records that are not JSON objects at all.
    """
    if not isinstance(record, dict):
        return None

    message = record.get("message")
    if not isinstance(message, dict) or message.get("role") != "assistant":
        return None

    content = message.get("content")
    if not isinstance(content, list):
        return None

    for block in content:
        if isinstance(block, dict) and block.get("type") == "text":
            text = block.get("text")
            if isinstance(text, str) and text:
                return text
    return None


def strip_control_tag(text: str, span: tuple[int, int]) -> str:
    """Remove the tag at *span* from *text*.

    A trailing tag also takes at most one blank-line separator with it; a
    leading tag takes the whitespace that follows it.
    """
    start, end = span
    before, after = text[:start], text[end:]

    if not after.strip():
        return _TRAILING_SEPARATOR.sub("", before, count=1)
    if not before.strip():
        return after.lstrip()
    return before.rstrip(" \t") + " " + after.lstrip(" \t")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class TranscriptReader:
    """Find the last assistant message (and its control tag) in a transcript.

    Usage::

        reader = TranscriptReader()
        message = reader.read_last_message(hook_event.transcript_path)
        if message.text:
            ...
    """

    def __init__(
        self,
        scan_depth: int = TRANSCRIPT_SCAN_DEPTH,
        logger: logging.Logger | None = None,
    ) -> None:
        self._scan_depth = scan_depth
        self._logger = logger or logging.getLogger(__name__)

    def read_last_message(self, path: str | Path) -> AssistantMessage:
        """Return the latest assistant message in the transcript at *path*.

        Never raises: unreadable files and transcripts without an
        assistant text turn both produce an empty message.
        """
        try:
            content = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.warning("Cannot read transcript %s: %s", path, exc)
            return AssistantMessage()

        if not content.strip():
            self._logger.debug("Transcript %s is empty", path)
            return AssistantMessage()

        return self.find_last_message(content)

    def find_last_message(self, content: str) -> AssistantMessage:
        """Search already-loaded transcript *content*, newest record first."""
        recent = deque(iter_records(content, self._logger), maxlen=self._scan_depth)

        for record in reversed(recent):
            text = extract_assistant_text(record)
            if text is None:
                continue

            found = find_control_tag(text)
            if found is None:
                self._logger.debug("Found assistant message without control tag")
                return AssistantMessage(text=text)

            tag, span = found
            self._logger.debug(
                "Found assistant message: context=%s intent=%s project=%s",
                tag.context.value,
                tag.intent.value,
                tag.project,
            )
            return AssistantMessage(text=strip_control_tag(text, span), tag=tag)

        self._logger.debug(
            "No assistant text in the last %d transcript records", len(recent)
        )
        return AssistantMessage()
