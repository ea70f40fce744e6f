"""Sentence-to-time alignment over word-level timestamps.

The words are concatenated verbatim into a reference string with a parallel
offset -> word-index map. Each sentence is then searched for in that string,
always starting where the previous sentence ended, and its first and last
characters are mapped back to word timestamps. Sentences that cannot be found
or mapped are skipped rather than failing the whole transcript.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sentloop.align.sentences import split_sentences
from sentloop.models import Segment, WordTimestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlignmentReport:
    """Segments plus the bookkeeping needed to count alignment misses."""

    segments: list[Segment]
    sentences: list[str]
    skipped: list[str]


def build_reference(words: Sequence[WordTimestamp]) -> tuple[str, list[int]]:
    """Concatenate word texts and record which word owns each character."""
    parts: list[str] = []
    char_to_word: list[int] = []
    for word_index, word in enumerate(words):
        parts.append(word.text)
        char_to_word.extend([word_index] * len(word.text))
    return "".join(parts), char_to_word


def align_report(words: Sequence[WordTimestamp], text: str | None = None) -> AlignmentReport:
    """Align sentences to word timestamps and report the ones that were dropped.

    `text` is the transcript as delivered by the speech-to-text engine. When it
    is omitted the sentences are split from the concatenated words themselves.
    """
    reference, char_to_word = build_reference(words)
    sentences = split_sentences(reference if text is None else text)

    segments: list[Segment] = []
    skipped: list[str] = []
    cursor = 0
    for sentence in sentences:
        start = reference.find(sentence, cursor)
        if start == -1:
            logger.debug("Sentence not found in word sequence: %r", sentence)
            skipped.append(sentence)
            continue

        end = start + len(sentence)
        if end - 1 >= len(char_to_word):
            logger.debug("Sentence falls outside mapped words: %r", sentence)
            skipped.append(sentence)
            continue

        first_word = words[char_to_word[start]]
        last_word = words[char_to_word[end - 1]]
        cursor = end
        if last_word.end_time <= first_word.start_time:
            logger.debug(
                "Sentence has an empty time span (%.3f-%.3f): %r",
                first_word.start_time,
                last_word.end_time,
                sentence,
            )
            skipped.append(sentence)
            continue

        segments.append(
            Segment(
                text=sentence,
                start_time=first_word.start_time,
                end_time=last_word.end_time,
            )
        )

    if skipped:
        logger.info("Aligned %d of %d sentences", len(segments), len(sentences))
    return AlignmentReport(segments=segments, sentences=sentences, skipped=skipped)


def align(words: Sequence[WordTimestamp], text: str | None = None) -> list[Segment]:
    """Map a word-timestamped transcript to ordered sentence segments."""
    return align_report(words, text).segments
