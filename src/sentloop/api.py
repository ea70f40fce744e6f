"""HTTP API for sentloop."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Response

from sentloop import __version__
from sentloop.config import load_config
from sentloop.core import run_alignment
from sentloop.logs import configure_logging
from sentloop.models import (
    AlignRequest,
    AlignResponse,
    HealthResponse,
    SessionCreateRequest,
    SessionEventRequest,
    SessionResponse,
)
from sentloop.playback import RepeatMode
from sentloop.sessions import SessionStore


def create_app(store: SessionStore | None = None) -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="sentloop",
        version=__version__,
        description="Sentence alignment and repeat-aware playback control API.",
    )
    config = load_config()
    configure_logging(config.log_level)
    sessions = store or SessionStore(settings=config.playback_settings())

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__, env=config.env)

    @app.post("/v1/align", response_model=AlignResponse, tags=["alignment"])
    def align(request: AlignRequest) -> AlignResponse:
        return run_alignment(request)

    @app.post("/v1/sessions", response_model=SessionResponse, status_code=201, tags=["playback"])
    def create_session(request: SessionCreateRequest) -> SessionResponse:
        return sessions.create(
            request.segments,
            repeat_mode=RepeatMode(request.repeat_mode),
            repeat_target=request.repeat_target,
        )

    @app.get("/v1/sessions/{session_id}", response_model=SessionResponse, tags=["playback"])
    def get_session(session_id: str) -> SessionResponse:
        try:
            return sessions.get(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="session not found") from exc

    @app.post(
        "/v1/sessions/{session_id}/events",
        response_model=SessionResponse,
        tags=["playback"],
    )
    def post_event(session_id: str, request: SessionEventRequest) -> SessionResponse:
        try:
            return sessions.apply(session_id, request)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="session not found") from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

    @app.delete("/v1/sessions/{session_id}", status_code=204, tags=["playback"])
    def delete_session(session_id: str) -> Response:
        try:
            sessions.delete(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="session not found") from exc
        return Response(status_code=204)

    return app


app = create_app()
