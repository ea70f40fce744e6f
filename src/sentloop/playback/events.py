"""Events consumed and commands emitted by the playback controller."""

from __future__ import annotations

from dataclasses import dataclass, field

from sentloop.playback.state import PlaybackState, RepeatMode


@dataclass(frozen=True)
class PositionSample:
    """Periodic observation of the transport's playhead."""

    time: float


@dataclass(frozen=True)
class Play:
    """Transport started playing."""


@dataclass(frozen=True)
class Pause:
    """Transport paused."""


@dataclass(frozen=True)
class Ended:
    """Transport reached the end of the recording."""


@dataclass(frozen=True)
class JumpTo:
    """User selected a sentence."""

    index: int


@dataclass(frozen=True)
class SetRepeatMode:
    mode: RepeatMode


@dataclass(frozen=True)
class SetRepeatTarget:
    target: int


Event = PositionSample | Play | Pause | Ended | JumpTo | SetRepeatMode | SetRepeatTarget


@dataclass(frozen=True)
class Seek:
    """Move the transport playhead."""

    time: float


@dataclass(frozen=True)
class StartPlayback:
    pass


@dataclass(frozen=True)
class StopPlayback:
    pass


Command = Seek | StartPlayback | StopPlayback


@dataclass(frozen=True)
class Transition:
    """Result of feeding one event to the controller.

    Commands are applied by the host after the transition is taken, in order.
    `cancel_pending` tells the host to drop commands queued by earlier events
    that have not been applied yet.
    """

    state: PlaybackState
    commands: tuple[Command, ...] = field(default_factory=tuple)
    cancel_pending: bool = False
