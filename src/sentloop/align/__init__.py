"""Transcript-to-sentence alignment."""

from sentloop.align.aligner import AlignmentReport, align, align_report, build_reference
from sentloop.align.sentences import split_sentences

__all__ = [
    "AlignmentReport",
    "align",
    "align_report",
    "build_reference",
    "split_sentences",
]
