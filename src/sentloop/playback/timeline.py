"""Time-to-segment lookup."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Sequence
from itertools import accumulate

from sentloop.models import Segment


def locate_segment(segments: Sequence[Segment], time: float) -> int | None:
    """Index of the first segment whose closed span contains `time`."""
    for index, segment in enumerate(segments):
        if segment.start_time <= time <= segment.end_time:
            return index
    return None


class SegmentTimeline:
    """Immutable segment sequence with first-containing-segment lookup.

    For start-sorted sequences the lookup bisects over the running maximum of
    end times: the first index whose running maximum reaches `time` is the
    first segment ending at or after `time`, and it contains `time` exactly
    when it also starts at or before it. Unsorted input falls back to a scan.
    """

    def __init__(self, segments: Sequence[Segment]) -> None:
        self.segments: tuple[Segment, ...] = tuple(segments)
        starts = [segment.start_time for segment in self.segments]
        self._sorted = all(a <= b for a, b in zip(starts, starts[1:]))
        self._max_ends = list(accumulate((s.end_time for s in self.segments), max))

    def __len__(self) -> int:
        return len(self.segments)

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    def __bool__(self) -> bool:
        return bool(self.segments)

    def locate(self, time: float) -> int | None:
        if not self._sorted:
            return locate_segment(self.segments, time)
        index = bisect_left(self._max_ends, time)
        if index < len(self.segments) and self.segments[index].start_time <= time:
            return index
        return None

    def contains_index(self, index: int) -> bool:
        return 0 <= index < len(self.segments)
