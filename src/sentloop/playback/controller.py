"""Sentence-scoped, repeat-aware playback controller.

The controller is a reducer: `reduce(state, event)` returns the next state
and the transport commands that follow from it. It never touches a transport
itself, so the host decides when commands are applied and can drop the ones
a later event supersedes.

Sentence ends are detected from position samples alone. A sentence counts as
finished when the playhead crosses `end_time - boundary_tolerance` between two
consecutive known positions. Seeks issued by the controller update the known
position, so landing on a segment boundary after a seek is not a crossing.
A late sample that moved forward still counts unless it skipped past the
following sentence.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from sentloop.models import Segment
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
from sentloop.playback.state import PlaybackSettings, PlaybackState, RepeatMode
from sentloop.playback.timeline import SegmentTimeline

logger = logging.getLogger(__name__)


class PlaybackController:
    """Pure state machine over one loaded segment sequence."""

    def __init__(
        self,
        segments: Sequence[Segment],
        settings: PlaybackSettings | None = None,
    ) -> None:
        self.timeline = SegmentTimeline(segments)
        self.settings = settings or PlaybackSettings()

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self.timeline.segments

    def initial_state(
        self,
        repeat_mode: RepeatMode = RepeatMode.OFF,
        repeat_target: int | None = None,
    ) -> PlaybackState:
        target = self.settings.default_repeat_target if repeat_target is None else repeat_target
        return PlaybackState(repeat_mode=repeat_mode, repeat_target=max(1, target))

    def reduce(self, state: PlaybackState, event: Event) -> Transition:
        """Apply one event and return the resulting transition."""
        if isinstance(event, PositionSample):
            return self._on_position(state, event.time)
        if isinstance(event, Play):
            return Transition(replace(state, is_playing=True))
        if isinstance(event, Pause):
            return Transition(replace(state, is_playing=False))
        if isinstance(event, Ended):
            return self._on_ended(state)
        if isinstance(event, JumpTo):
            return self._jump_to(state, event.index)
        if isinstance(event, SetRepeatMode):
            return self._set_repeat_mode(state, event.mode)
        if isinstance(event, SetRepeatTarget):
            return self._set_repeat_target(state, event.target)
        raise TypeError(f"unsupported playback event: {event!r}")

    def _on_position(self, state: PlaybackState, time: float) -> Transition:
        state = replace(state, unconfirmed_seek=None)
        if not self.timeline:
            return Transition(replace(state, position=time))

        located = self.timeline.locate(time)
        if state.is_cycling and state.cycle_index is not None:
            # A replay lands on the sentence start, which a touching previous
            # sentence also contains; the cycle keeps its own sentence.
            cycled = self.timeline[state.cycle_index]
            if cycled.start_time <= time <= cycled.end_time:
                located = state.cycle_index
        if state.repeat_mode is RepeatMode.SENTENCE:
            pinned = state.active_index if state.active_index is not None else located
            if pinned is not None and self._crossed_end(pinned, state.position, time):
                return self._on_sentence_end(state, pinned, time)

        next_state = replace(state, active_index=located, position=time)
        if state.is_cycling and located != state.cycle_index:
            logger.info(
                "Abandoned repeat cycle on sentence %s (now at %s)",
                _display(state.cycle_index),
                _display(located),
            )
            next_state = _clear_cycle(next_state)
        return Transition(next_state)

    def _crossed_end(self, index: int, previous: float | None, time: float) -> bool:
        segment = self.timeline[index]
        threshold = segment.end_time - self.settings.boundary_tolerance
        if time < threshold:
            return False
        if previous is None:
            return time <= segment.end_time + self.settings.max_overshoot
        if previous >= threshold:
            return False
        # A late sample still ends the sentence unless it skipped the next one.
        following = index + 1
        if self.timeline.contains_index(following):
            return time <= self.timeline[following].end_time
        return True

    def _on_sentence_end(self, state: PlaybackState, index: int, time: float) -> Transition:
        segment = self.timeline[index]
        if not state.is_cycling or state.cycle_index != index:
            state = replace(
                state,
                active_index=index,
                is_cycling=True,
                cycle_index=index,
                repeats_completed=1,
            )
            if state.repeats_completed < state.repeat_target:
                logger.info(
                    "Sentence %d ended, starting repeat %d/%d",
                    index + 1,
                    state.repeats_completed,
                    state.repeat_target,
                )
                return self._seek(state, segment.start_time)
        elif state.repeats_completed < state.repeat_target:
            state = replace(state, repeats_completed=state.repeats_completed + 1)
            logger.info(
                "Sentence %d ended, continuing repeat %d/%d",
                index + 1,
                state.repeats_completed,
                state.repeat_target,
            )
            return self._seek(state, segment.start_time)

        logger.info("Finished repeating sentence %d", index + 1)
        state = _clear_cycle(replace(state, active_index=index))
        if self.timeline.contains_index(index + 1):
            return self._seek(state, self.timeline[index + 1].start_time)
        return Transition(replace(state, position=time), (StopPlayback(),))

    def _on_ended(self, state: PlaybackState) -> Transition:
        if state.repeat_mode is RepeatMode.SENTENCE:
            resumed = self._resume_after_end(replace(state, is_playing=False))
            if resumed is not None:
                return resumed
        state = _clear_cycle(
            replace(state, active_index=None, is_playing=False, unconfirmed_seek=None)
        )
        if state.repeat_mode is RepeatMode.ALL:
            logger.info("Recording ended, restarting from the beginning")
            return Transition(
                replace(state, position=0.0),
                (Seek(0.0), StartPlayback()),
                cancel_pending=True,
            )
        return Transition(state, cancel_pending=True)

    def _resume_after_end(self, state: PlaybackState) -> Transition | None:
        """Finish a repeat cycle that the end of the recording cut short.

        The recording can run out before a queued replay seek is applied, or
        before any sample observed the last sentence's end.
        """
        if state.unconfirmed_seek is not None:
            logger.debug("Recording ended before seek to %.3f; reissuing", state.unconfirmed_seek)
            return Transition(
                state,
                (Seek(state.unconfirmed_seek), StartPlayback()),
                cancel_pending=True,
            )

        index = state.active_index
        if index is None or index != len(self.timeline) - 1:
            return None
        segment = self.timeline[index]
        threshold = segment.end_time - self.settings.boundary_tolerance
        if state.position is not None and state.position >= threshold:
            return None

        transition = self._on_sentence_end(state, index, segment.end_time)
        if not any(isinstance(command, Seek) for command in transition.commands):
            return None
        return Transition(
            transition.state,
            (*transition.commands, StartPlayback()),
            cancel_pending=True,
        )

    def _jump_to(self, state: PlaybackState, index: int) -> Transition:
        if not self.timeline.contains_index(index):
            logger.debug("Rejected jump to sentence index %d of %d", index, len(self.timeline))
            return Transition(state)
        state = _clear_cycle(replace(state, active_index=index))
        return self._seek(state, self.timeline[index].start_time, cancel_pending=True)

    def _set_repeat_mode(self, state: PlaybackState, mode: RepeatMode) -> Transition:
        state = replace(state, repeat_mode=mode, unconfirmed_seek=None)
        return Transition(_clear_cycle(state), cancel_pending=True)

    def _set_repeat_target(self, state: PlaybackState, target: int) -> Transition:
        if target < 1:
            logger.debug("Clamped repeat target %d to 1", target)
            target = 1
        completed = min(state.repeats_completed, target)
        return Transition(replace(state, repeat_target=target, repeats_completed=completed))

    @staticmethod
    def _seek(state: PlaybackState, time: float, *, cancel_pending: bool = False) -> Transition:
        commands: tuple[Command, ...] = (Seek(time),)
        return Transition(
            replace(state, position=time, unconfirmed_seek=time),
            commands,
            cancel_pending=cancel_pending,
        )


def _clear_cycle(state: PlaybackState) -> PlaybackState:
    return replace(state, is_cycling=False, repeats_completed=0, cycle_index=None)


def _display(index: int | None) -> str:
    return "none" if index is None else str(index + 1)
