"""Sentence-scoped playback control."""

from sentloop.playback.controller import PlaybackController
from sentloop.playback.events import (
    Command,
    Ended,
    Event,
    JumpTo,
    Pause,
    Play,
    PositionSample,
    Seek,
    SetRepeatMode,
    SetRepeatTarget,
    StartPlayback,
    StopPlayback,
    Transition,
)
from sentloop.playback.session import PlaybackSession, status_of
from sentloop.playback.simulation import SimulationStep, simulate
from sentloop.playback.state import PlaybackSettings, PlaybackState, RepeatMode
from sentloop.playback.timeline import SegmentTimeline, locate_segment
from sentloop.playback.transport import SimulatedTransport, Transport

__all__ = [
    "Command",
    "Ended",
    "Event",
    "JumpTo",
    "Pause",
    "Play",
    "PlaybackController",
    "PlaybackSession",
    "PlaybackSettings",
    "PlaybackState",
    "PositionSample",
    "RepeatMode",
    "Seek",
    "SegmentTimeline",
    "SetRepeatMode",
    "SetRepeatTarget",
    "SimulatedTransport",
    "SimulationStep",
    "StartPlayback",
    "StopPlayback",
    "Transition",
    "Transport",
    "locate_segment",
    "simulate",
    "status_of",
]
