"""Summarization stage: turns assistant text into speakable sentences."""

from clarvis.summarizer.llm_summarizer import Summarizer, build_instruction
from clarvis.summarizer.provider import SummaryProvider
from clarvis.summarizer.provider_factory import create_summary_provider
from clarvis.summarizer.segmenter import split_sentences

__all__ = [
    "Summarizer",
    "SummaryProvider",
    "build_instruction",
    "create_summary_provider",
    "split_sentences",
]
