"""Alignment pipeline producing the API/CLI response contract."""

from __future__ import annotations

from datetime import UTC, datetime

from sentloop.align import align_report
from sentloop.models import AlignmentMetadata, AlignRequest, AlignResponse, Segment


def run_alignment(request: AlignRequest) -> AlignResponse:
    """Align the request's words into sentence segments with run metadata."""
    text = request.text if request.text and request.text.strip() else None
    report = align_report(request.words, text)

    metadata = AlignmentMetadata(
        word_count=len(request.words),
        sentence_count=len(report.sentences),
        segment_count=len(report.segments),
        skipped_sentences=len(report.skipped),
        text_source="words" if text is None else "transcript",
        duration_sec=_covered_duration(report.segments),
        generated_at=datetime.now(UTC),
    )
    return AlignResponse(metadata=metadata, segments=report.segments)


def _covered_duration(segments: list[Segment]) -> float:
    return round(sum(segment.end_time - segment.start_time for segment in segments), 3)
