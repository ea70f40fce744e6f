"""Transport interface and a virtual-clock implementation."""

from __future__ import annotations

from collections import deque
from typing import Literal, Protocol

Notification = Literal["play", "pause", "ended"]

MIN_RATE = 0.5
MAX_RATE = 2.0


class Transport(Protocol):
    """Audio transport the playback session drives.

    Commands are fire-and-forget; their effect is observed through later
    position samples and lifecycle notifications.
    """

    @property
    def position(self) -> float:
        """Current playhead time in seconds."""

    @property
    def is_playing(self) -> bool:
        """Whether the transport is currently playing."""

    def play(self) -> None:
        """Start or resume playback."""

    def pause(self) -> None:
        """Pause playback."""

    def seek(self, time: float) -> None:
        """Move the playhead to `time` seconds."""

    def set_rate(self, rate: float) -> None:
        """Change the playback speed multiplier."""


class SimulatedTransport:
    """In-memory transport advanced by an explicit virtual clock.

    Lifecycle notifications are queued instead of delivered through callbacks;
    the host loop drains them with `pop_notifications()` and feeds them to the
    session, the same way a browser event loop would.
    """

    def __init__(self, duration: float, rate: float = 1.0) -> None:
        if duration < 0:
            raise ValueError("duration must be >= 0")
        self.duration = duration
        self.rate = _check_rate(rate)
        self.seeks: list[float] = []
        self._position = 0.0
        self._playing = False
        self._notifications: deque[Notification] = deque()

    @property
    def position(self) -> float:
        return self._position

    @property
    def is_playing(self) -> bool:
        return self._playing

    def play(self) -> None:
        if self._playing:
            return
        if self._position >= self.duration:
            self._position = 0.0
        self._playing = True
        self._notifications.append("play")

    def pause(self) -> None:
        if not self._playing:
            return
        self._playing = False
        self._notifications.append("pause")

    def seek(self, time: float) -> None:
        self._position = min(max(0.0, time), self.duration)
        self.seeks.append(self._position)

    def set_rate(self, rate: float) -> None:
        self.rate = _check_rate(rate)

    def advance(self, elapsed: float) -> None:
        """Move the virtual clock forward by `elapsed` wall-clock seconds."""
        if not self._playing:
            return
        self._position = min(self._position + elapsed * self.rate, self.duration)
        if self._position >= self.duration:
            self._playing = False
            self._notifications.append("ended")

    def pop_notifications(self) -> list[Notification]:
        pending = list(self._notifications)
        self._notifications.clear()
        return pending


def _check_rate(rate: float) -> float:
    if not MIN_RATE <= rate <= MAX_RATE:
        raise ValueError(f"playback rate must be between {MIN_RATE} and {MAX_RATE}, got {rate}")
    return rate
