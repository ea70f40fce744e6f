"""Drive a playback session against a simulated transport."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sentloop.models import PlaybackStatus
from sentloop.playback.session import PlaybackSession
from sentloop.playback.transport import SimulatedTransport


@dataclass(frozen=True)
class SimulationStep:
    """A status change observed while driving the session."""

    clock: float
    status: PlaybackStatus


def simulate(
    session: PlaybackSession,
    transport: SimulatedTransport,
    *,
    interval: float = 0.1,
    max_steps: int = 100_000,
    on_change: Callable[[SimulationStep], None] | None = None,
) -> list[SimulationStep]:
    """Play from the current position until playback stops or `max_steps` ticks.

    Each tick advances the virtual clock by `interval`, delivers queued
    lifecycle notifications and takes one position sample while playing.
    Only ticks that change the observable status are recorded.
    """
    if interval <= 0:
        raise ValueError("interval must be > 0")

    steps: list[SimulationStep] = []
    clock = 0.0
    last_key: tuple[object, ...] | None = None

    session.play()
    for _ in range(max_steps):
        _deliver(session, transport)
        if transport.is_playing:
            session.sample()
        else:
            session.apply_pending()
        _deliver(session, transport)
        status = session.status()

        key = _change_key(status)
        if key != last_key:
            step = SimulationStep(clock=round(clock, 3), status=status)
            steps.append(step)
            if on_change is not None:
                on_change(step)
            last_key = key

        if not transport.is_playing and not session.pending:
            break
        transport.advance(interval)
        clock += interval
    return steps


def _deliver(session: PlaybackSession, transport: SimulatedTransport) -> None:
    for notification in transport.pop_notifications():
        session.notify(notification)


def _change_key(status: PlaybackStatus) -> tuple[object, ...]:
    return (
        status.active_index,
        status.is_playing,
        status.repeats_completed,
        status.is_cycling,
    )
