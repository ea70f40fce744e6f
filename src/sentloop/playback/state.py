"""Playback session state and controller tuning."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class RepeatMode(str, enum.Enum):
    """How playback repeats: not at all, per sentence, or the whole recording."""

    OFF = "off"
    SENTENCE = "sentence"
    ALL = "all"


@dataclass(frozen=True)
class PlaybackSettings:
    """Controller tuning.

    `boundary_tolerance` is how far before a sentence's end a sample already
    counts as reaching it. `max_overshoot` bounds how far past the end the
    first sample of a session may land and still count. Later samples that
    move forward count as long as they stay within the following sentence.
    """

    boundary_tolerance: float = 0.1
    max_overshoot: float = 0.5
    default_repeat_target: int = 3


@dataclass(frozen=True)
class PlaybackState:
    """Everything the controller knows about one playback session.

    `position` is the last known playhead time: the last sample, or the target
    of the last seek the controller issued. `cycle_index` is the segment the
    running repeat cycle belongs to. `unconfirmed_seek` is the target of a
    seek no position sample has observed yet.
    """

    active_index: int | None = None
    repeat_mode: RepeatMode = RepeatMode.OFF
    repeat_target: int = 3
    repeats_completed: int = 0
    is_cycling: bool = False
    is_playing: bool = False
    position: float | None = None
    cycle_index: int | None = None
    unconfirmed_seek: float | None = None
