"""Shared data models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

RepeatModeName = Literal["off", "sentence", "all"]
EventType = Literal[
    "position",
    "play",
    "pause",
    "ended",
    "jump",
    "set_repeat_mode",
    "set_repeat_target",
]


class HealthResponse(BaseModel):
    """Response payload for the API health endpoint."""

    status: Literal["ok"]
    version: str
    env: str


class WordTimestamp(BaseModel):
    """One word of a speech-to-text transcript with its audio span."""

    model_config = ConfigDict(frozen=True)

    text: str
    start_time: float = Field(ge=0.0)
    end_time: float = Field(ge=0.0)


class Segment(BaseModel):
    """A sentence-level span of the source audio."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    start_time: float = Field(ge=0.0)
    end_time: float = Field(ge=0.0)

    @model_validator(mode="after")
    def _check_span(self) -> Segment:
        if self.end_time <= self.start_time:
            raise ValueError(
                f"segment end_time ({self.end_time}) must be after start_time ({self.start_time})"
            )
        return self


class AlignRequest(BaseModel):
    """Alignment request payload used by both CLI and API."""

    words: list[WordTimestamp]
    text: str | None = None


class AlignmentMetadata(BaseModel):
    """Metadata describing how an alignment was produced."""

    word_count: int = Field(ge=0)
    sentence_count: int = Field(ge=0)
    segment_count: int = Field(ge=0)
    skipped_sentences: int = Field(ge=0)
    text_source: Literal["words", "transcript"]
    duration_sec: float = Field(ge=0.0)
    generated_at: datetime


class AlignResponse(BaseModel):
    """Canonical alignment output schema."""

    metadata: AlignmentMetadata
    segments: list[Segment]


class PlaybackStatus(BaseModel):
    """Read-only snapshot of a playback session, pulled after every event."""

    active_index: int | None
    is_playing: bool
    repeat_mode: RepeatModeName
    repeat_target: int = Field(ge=1)
    repeats_completed: int = Field(ge=0)
    is_cycling: bool
    position: float | None = None
    segment_count: int = Field(default=0, ge=0)


class CommandPayload(BaseModel):
    """A transport command the client must apply, in order."""

    type: Literal["seek", "play", "pause"]
    time: float | None = None


class SessionCreateRequest(BaseModel):
    """Create a playback session over an aligned segment list."""

    segments: list[Segment]
    repeat_mode: RepeatModeName = "off"
    repeat_target: int | None = None


class SessionEventRequest(BaseModel):
    """One event delivered by the client-side host loop."""

    type: EventType
    time: float | None = Field(default=None, ge=0.0)
    index: int | None = None
    mode: RepeatModeName | None = None
    target: int | None = None

    @model_validator(mode="after")
    def _check_arguments(self) -> SessionEventRequest:
        required = {
            "position": "time",
            "jump": "index",
            "set_repeat_mode": "mode",
            "set_repeat_target": "target",
        }
        field_name = required.get(self.type)
        if field_name is not None and getattr(self, field_name) is None:
            raise ValueError(f"event {self.type!r} requires {field_name!r}")
        return self


class SessionResponse(BaseModel):
    """Session state returned after every processed event.

    `cancel_pending` tells the client to drop commands it is still holding
    from earlier responses before applying `commands`.
    """

    session_id: str
    status: PlaybackStatus
    commands: list[CommandPayload] = Field(default_factory=list)
    cancel_pending: bool = False
