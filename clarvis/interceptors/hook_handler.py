"""Read the Claude Code hook descriptor from stdin into a HookEvent.

Claude Code invokes the hook command with a JSON object on stdin and
kills it if it takes longer than its own deadline. Reading is therefore
bounded by ``HOOK_INPUT_TIMEOUT`` and every failure mode collapses to
``None``: a timeout, a broken stream, empty input, or a payload that is
not a complete descriptor.
"""

import asyncio
import logging
import sys
import threading
from typing import TextIO

from pydantic import ValidationError

from clarvis.config import HOOK_INPUT_TIMEOUT
from clarvis.events.types import HookEvent


async def read_hook_event(
    stream: TextIO | None = None,
    timeout: float = HOOK_INPUT_TIMEOUT,
    logger: logging.Logger | None = None,
) -> HookEvent | None:
    """Consume *stream* (stdin by default) and parse it as a HookEvent.

    Never raises. Returns ``None`` on timeout, stream error, empty input,
    or an invalid descriptor.
    """
    log = logger or logging.getLogger(__name__)
    source = stream if stream is not None else sys.stdin

    try:
        raw = await asyncio.wait_for(_read_all(source), timeout)
    except asyncio.TimeoutError:
        log.warning("Timed out after %.1fs waiting for hook input", timeout)
        return None
    except Exception as exc:
        log.warning(
            "Could not read hook input: %s: %s", type(exc).__name__, exc, exc_info=True
        )
        return None

    return parse_hook_event(raw, logger=log)


def parse_hook_event(
    raw: str | None, logger: logging.Logger | None = None
) -> HookEvent | None:
    """Validate raw hook JSON text into a HookEvent, or return ``None``."""
    log = logger or logging.getLogger(__name__)
    if raw is None or not raw.strip():
        log.debug("Empty hook input")
        return None

    try:
        event = HookEvent.model_validate_json(raw.strip())
    except ValidationError as exc:
        log.warning(
            "Invalid hook descriptor (%d error(s)): %s",
            exc.error_count(),
            raw[:120],
        )
        return None

    log.debug(
        "Parsed hook event: name=%s session_id=%s",
        event.event_name,
        event.session_id,
    )
    return event


async def _read_all(stream: TextIO) -> str:
    """Read *stream* to EOF on a daemon thread.

    A daemon thread is used instead of the loop's default executor so an
    abandoned read (stdin never closed) cannot block interpreter shutdown.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[str] = loop.create_future()

    def _settle(data: str | None, exc: BaseException | None) -> None:
        if future.done():
            return
        if exc is not None:
            future.set_exception(exc)
        else:
            future.set_result(data or "")

    def _reader() -> None:
        data: str | None = None
        error: BaseException | None = None
        try:
            data = stream.read()
        except Exception as exc:  # delivered to the awaiting coroutine
            error = exc
        try:
            loop.call_soon_threadsafe(_settle, data, error)
        except RuntimeError:
            # Loop already closed: the read was abandoned after a timeout.
            pass

    threading.Thread(target=_reader, name="hook-input-reader", daemon=True).start()
    return await future
