"""
Extractive summarization with a fixed three-tier precedence.

1. The first paragraph, whole, if it fits within the length cap.
2. Otherwise as many leading whole sentences as fit, joined by ". ".
3. Otherwise the first sentence, hard-truncated with an ellipsis.

The result never exceeds the requested maximum length.
"""

from __future__ import annotations

import re

from .errors import InputError


ELLIPSIS = "..."

_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def summarize_text(text: str | None, max_length: int) -> str:
    """Reduce `text` to an extractive summary of at most `max_length` characters.

    Args:
        text: The source text; paragraphs are separated by blank lines
        max_length: Maximum summary length in characters (>= 1)

    Returns:
        The summary string

    Raises:
        InputError: If `text` is empty or `max_length` is not positive
    """
    if not text or not text.strip():
        raise InputError("Nothing to summarize: text is empty")
    if max_length < 1:
        raise InputError(f"max_length must be positive, got {max_length}")

    # The length test counts the paragraph as written, surrounding whitespace included
    first = next((p for p in _PARAGRAPH_SPLIT_RE.split(text) if p.strip()), None)
    if first is not None and len(first) <= max_length:
        return first.strip()

    sentences = split_sentences(text)
    summary = ""
    for sentence in sentences:
        candidate = f"{summary}. {sentence}" if summary else sentence
        if len(candidate) > max_length:
            break
        summary = candidate

    if not summary and sentences:
        summary = _truncate(sentences[0], max_length)
    return summary


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def _truncate(sentence: str, max_length: int) -> str:
    if len(sentence) <= max_length:
        return sentence
    if max_length <= len(ELLIPSIS):
        return sentence[:max_length]
    return sentence[: max_length - len(ELLIPSIS)].rstrip() + ELLIPSIS
