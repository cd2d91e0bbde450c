"""Parse the inline ``clarvis:[...]`` control tag out of assistant text.

The assistant is asked to end its messages with a line such as::

    clarvis:[context:development intent:completion project:auth]

The grammar is deliberately strict. Anything that is not exactly a set of
whitespace-separated ``key:value`` pairs with known keys and known values
is rejected as a whole; a misread tag would route the message through
the wrong summarization style without anyone noticing.
"""

import logging
import re

from clarvis.events.types import Context, ControlTag, Intent

logger = logging.getLogger(__name__)

_MARKER = "clarvis"
_OPENER = _MARKER + ":["

# Marker followed by a bracketed block, matched only at the first opener.
# The body is checked separately so a wrong delimiter inside the block
# fails the whole tag.
_TAG_BLOCK = re.compile(re.escape(_OPENER) + r"([^\[\]\n]*)\]")

_PAIR = re.compile(r"([a-z]+):(\S+)", re.ASCII)

_WORD_VALUE = re.compile(r"\w+", re.ASCII)
_PROJECT_VALUE = re.compile(r"[\w-]+", re.ASCII)

_REQUIRED_KEYS = frozenset({"context", "intent"})
_KNOWN_KEYS = _REQUIRED_KEYS | {"project"}

_CONTEXTS = {c.value: c for c in Context}
_INTENTS = {i.value: i for i in Intent}


def extract_control_tag(text: str) -> ControlTag | None:
    """Return the control tag embedded in *text*, or ``None``."""
    found = find_control_tag(text)
    return found[0] if found else None


def find_control_tag(text: str) -> tuple[ControlTag, tuple[int, int]] | None:
    """Return the control tag and its ``(start, end)`` span within *text*.

    Only the first ``clarvis:[`` opener is considered; a later block never
    rescues a malformed first one. Returns ``None`` when there is no opener
    or the block it starts does not satisfy the grammar.
    """
    if not text:
        return None

    start = text.find(_OPENER)
    if start == -1:
        return None

    match = _TAG_BLOCK.match(text, start)
    if match is None:
        logger.debug("Rejected unterminated control tag at offset %d", start)
        return None

    fields = _parse_fields(match.group(1))
    if fields is None:
        logger.debug("Rejected malformed control tag: %r", match.group(0))
        return None

    context = _CONTEXTS.get(fields["context"])
    intent = _INTENTS.get(fields["intent"])
    if context is None or intent is None:
        logger.debug(
            "Rejected control tag with unknown values: context=%r intent=%r",
            fields["context"],
            fields["intent"],
        )
        return None

    tag = ControlTag(context=context, intent=intent, project=fields.get("project"))
    logger.debug("Extracted control tag: %s", tag)
    return tag, match.span()


def _parse_fields(body: str) -> dict[str, str] | None:
    """Split a tag body into a key -> value mapping, or ``None`` if invalid."""
    if not body.isascii():
        return None

    fields: dict[str, str] = {}
    for token in body.split():
        pair = _PAIR.fullmatch(token)
        if pair is None:
            return None
        key, value = pair.groups()
        if key not in _KNOWN_KEYS or key in fields:
            return None
        value_pattern = _PROJECT_VALUE if key == "project" else _WORD_VALUE
        if value_pattern.fullmatch(value) is None:
            return None
        fields[key] = value

    if not _REQUIRED_KEYS.issubset(fields):
        return None
    return fields
