"""Host side of the playback controller: command queue and transport wiring."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sentloop.models import PlaybackStatus, Segment
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
)
from sentloop.playback.state import PlaybackSettings, PlaybackState, RepeatMode
from sentloop.playback.transport import Notification, Transport

logger = logging.getLogger(__name__)


class PlaybackSession:
    """Binds a `PlaybackController` to a transport.

    Events are processed one at a time. Commands returned for a position
    sample stay queued until the next call to `sample()` or `apply_pending()`,
    so a seek never runs inside the handling of the sample that caused it.
    Commands caused by user intents are applied right away.
    """

    def __init__(
        self,
        segments: Sequence[Segment],
        transport: Transport,
        *,
        settings: PlaybackSettings | None = None,
        repeat_mode: RepeatMode = RepeatMode.OFF,
        repeat_target: int | None = None,
    ) -> None:
        self.transport = transport
        self.settings = settings or PlaybackSettings()
        self.controller = PlaybackController(segments, self.settings)
        self.state = self.controller.initial_state(repeat_mode, repeat_target)
        self._pending: list[Command] = []

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self.controller.segments

    @property
    def pending(self) -> tuple[Command, ...]:
        return tuple(self._pending)

    def load(self, segments: Sequence[Segment]) -> None:
        """Replace the segment sequence, e.g. after a new audio source is loaded."""
        self.controller = PlaybackController(segments, self.settings)
        self.state = self.controller.initial_state(self.state.repeat_mode, self.state.repeat_target)
        self._pending.clear()
        logger.info("Loaded %d segments", len(self.controller.segments))

    def status(self) -> PlaybackStatus:
        return status_of(self.state, len(self.controller.segments))

    def dispatch(self, event: Event) -> PlaybackStatus:
        """Feed one event to the controller and queue its commands."""
        transition = self.controller.reduce(self.state, event)
        self.state = transition.state
        if transition.cancel_pending and self._pending:
            logger.debug("Dropped %d pending commands", len(self._pending))
            self._pending.clear()
        self._pending.extend(transition.commands)
        return self.status()

    def apply_pending(self) -> list[Command]:
        """Issue queued commands to the transport in order."""
        applied, self._pending = self._pending, []
        for command in applied:
            if isinstance(command, Seek):
                self.transport.seek(command.time)
            elif isinstance(command, StartPlayback):
                self.transport.play()
            elif isinstance(command, StopPlayback):
                self.transport.pause()
        return applied

    def sample(self) -> PlaybackStatus:
        """Take one position sample from the transport.

        Commands left over from the previous sample are applied first.
        """
        self.apply_pending()
        return self.dispatch(PositionSample(self.transport.position))

    def notify(self, notification: Notification) -> PlaybackStatus:
        """Handle a lifecycle notification from the transport."""
        if notification == "play":
            event: Event = Play()
        elif notification == "pause":
            event = Pause()
        elif notification == "ended":
            event = Ended()
        else:
            raise ValueError(f"unknown transport notification: {notification!r}")
        status = self.dispatch(event)
        self.apply_pending()
        return status

    def play(self) -> None:
        self.transport.play()

    def pause(self) -> None:
        self.transport.pause()

    def toggle(self) -> None:
        if self.transport.is_playing:
            self.pause()
        else:
            self.play()

    def jump_to(self, index: int) -> PlaybackStatus:
        return self._command(JumpTo(index))

    def previous_sentence(self) -> PlaybackStatus:
        current = self.state.active_index
        return self.jump_to(0 if current is None or current <= 0 else current - 1)

    def next_sentence(self) -> PlaybackStatus:
        current = self.state.active_index
        if current is None:
            return self.jump_to(0)
        if current >= len(self.controller.segments) - 1:
            return self.status()
        return self.jump_to(current + 1)

    def set_repeat_mode(self, mode: RepeatMode | str) -> PlaybackStatus:
        return self._command(SetRepeatMode(RepeatMode(mode)))

    def set_repeat_target(self, target: int) -> PlaybackStatus:
        return self._command(SetRepeatTarget(target))

    def set_rate(self, rate: float) -> None:
        self.transport.set_rate(rate)

    def _command(self, event: Event) -> PlaybackStatus:
        status = self.dispatch(event)
        self.apply_pending()
        return status


def status_of(state: PlaybackState, segment_count: int) -> PlaybackStatus:
    """Snapshot a controller state for the rendering layer."""
    return PlaybackStatus(
        active_index=state.active_index,
        is_playing=state.is_playing,
        repeat_mode=state.repeat_mode.value,
        repeat_target=state.repeat_target,
        repeats_completed=state.repeats_completed,
        is_cycling=state.is_cycling,
        position=state.position,
        segment_count=segment_count,
    )
