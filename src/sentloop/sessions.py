"""In-memory store of playback sessions driven over HTTP.

The browser owns the audio element, so the server keeps only the controller
state. Every request carries one event; the reply lists the transport
commands the client must apply before taking its next position sample.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass

from sentloop.models import (
    CommandPayload,
    Segment,
    SessionEventRequest,
    SessionResponse,
)
from sentloop.playback import (
    Command,
    Ended,
    Event,
    JumpTo,
    Pause,
    Play,
    PlaybackController,
    PlaybackSettings,
    PlaybackState,
    PositionSample,
    RepeatMode,
    Seek,
    SetRepeatMode,
    SetRepeatTarget,
    StartPlayback,
    status_of,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 100


@dataclass
class RemoteSession:
    """Controller and current state for one client."""

    id: str
    controller: PlaybackController
    state: PlaybackState

    def response(
        self, commands: Sequence[Command] = (), cancel_pending: bool = False
    ) -> SessionResponse:
        return SessionResponse(
            session_id=self.id,
            status=status_of(self.state, len(self.controller.segments)),
            commands=[command_payload(command) for command in commands],
            cancel_pending=cancel_pending,
        )


class SessionStore:
    """Thread-safe session map; the oldest session is evicted when full."""

    def __init__(
        self,
        settings: PlaybackSettings | None = None,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        self.settings = settings or PlaybackSettings()
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, RemoteSession] = OrderedDict()
        self._lock = threading.Lock()

    def create(
        self,
        segments: Sequence[Segment],
        repeat_mode: RepeatMode = RepeatMode.OFF,
        repeat_target: int | None = None,
    ) -> SessionResponse:
        controller = PlaybackController(segments, self.settings)
        session = RemoteSession(
            id=uuid.uuid4().hex,
            controller=controller,
            state=controller.initial_state(repeat_mode, repeat_target),
        )
        with self._lock:
            while len(self._sessions) >= self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted playback session %s", evicted)
            self._sessions[session.id] = session
            response = session.response()
        logger.info("Created playback session %s with %d segments", session.id, len(segments))
        return response

    def get(self, session_id: str) -> SessionResponse:
        with self._lock:
            return self._require(session_id).response()

    def apply(self, session_id: str, request: SessionEventRequest) -> SessionResponse:
        """Process one client event under the store lock."""
        event = event_from_request(request)
        with self._lock:
            session = self._require(session_id)
            transition = session.controller.reduce(session.state, event)
            session.state = transition.state
            return session.response(transition.commands, transition.cancel_pending)

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._require(session_id)
            del self._sessions[session_id]
        logger.info("Deleted playback session %s", session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _require(self, session_id: str) -> RemoteSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(session_id)
        return session


def event_from_request(request: SessionEventRequest) -> Event:
    """Translate the wire event into a controller event."""
    if request.type == "position":
        return PositionSample(float(request.time or 0.0))
    if request.type == "play":
        return Play()
    if request.type == "pause":
        return Pause()
    if request.type == "ended":
        return Ended()
    if request.type == "jump":
        return JumpTo(int(request.index or 0))
    if request.type == "set_repeat_mode":
        return SetRepeatMode(RepeatMode(request.mode))
    if request.type == "set_repeat_target":
        return SetRepeatTarget(int(request.target or 0))
    raise ValueError(f"unsupported event type: {request.type!r}")


def command_payload(command: Command) -> CommandPayload:
    if isinstance(command, Seek):
        return CommandPayload(type="seek", time=command.time)
    if isinstance(command, StartPlayback):
        return CommandPayload(type="play")
    return CommandPayload(type="pause")
