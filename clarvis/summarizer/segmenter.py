"""Split provider output into sentences for one-at-a-time speech.

Uses pysbd's rule-based sentence boundary disambiguation, which keeps
abbreviations ("e.g.", "Dr.") and decimal numbers ("v2.5") inside their
sentence where a naive split on punctuation would cut them.
"""

import logging

import pysbd

from clarvis.config import SEGMENTER_LANGUAGE

logger = logging.getLogger(__name__)

MIN_SEGMENT_LENGTH = 10  # Shorter text is spoken as a single segment.


def split_sentences(raw: str, language: str = SEGMENTER_LANGUAGE) -> list[str]:
    """Return the trimmed sentences of *raw*.

    Falls back to ``[raw.strip()]`` for short input, when segmentation
    finds nothing, or when the segmenter fails.
    """
    whole = raw.strip()
    if len(whole) < MIN_SEGMENT_LENGTH:
        return [whole]

    try:
        segmenter = pysbd.Segmenter(language=language, clean=False)
        segments = [s.strip() for s in segmenter.segment(whole)]
    except Exception:
        logger.warning(
            "Sentence segmentation failed (language=%s) — speaking as one segment",
            language,
            exc_info=True,
        )
        return [whole]

    sentences = [s for s in segments if s]
    return sentences or [whole]
