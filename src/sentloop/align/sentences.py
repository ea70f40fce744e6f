"""Sentence splitting on terminal punctuation."""

from __future__ import annotations

import re

_BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    """Split text after `.`, `!` or `?` followed by whitespace.

    Sentences are trimmed and empty pieces dropped. Internal whitespace is kept
    as-is so every sentence stays a verbatim substring of its source.
    """
    sentences: list[str] = []
    for piece in _BOUNDARY_RE.split(text):
        sentence = piece.strip()
        if sentence:
            sentences.append(sentence)
    return sentences
