"""Word-timestamp transcript readers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sentloop.models import WordTimestamp


@dataclass(frozen=True)
class TranscriptInput:
    """Words plus the engine's own transcript text, when it supplied one."""

    words: list[WordTimestamp]
    text: str | None = None


def load_words(path: str | Path) -> TranscriptInput:
    """Read a transcript JSON file."""
    source = Path(path)
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{source} is not valid JSON: {exc}") from exc
    return parse_words(payload)


def parse_words(payload: Any) -> TranscriptInput:
    """Accept the supported transcript layouts.

    - a list of words
    - `{"words": [...], "text": ...}`
    - Whisper style `{"text": ..., "segments": [{"words": [...]}, ...]}`

    Each word is either `{text, start_time, end_time}` or Whisper's
    `{word, start, end}`.
    """
    text: str | None = None
    if isinstance(payload, list):
        raw_words: list[Any] = payload
    elif isinstance(payload, dict):
        text = _optional_text(payload.get("text"))
        if "words" in payload:
            raw_words = _as_list(payload["words"], "words")
        elif "segments" in payload:
            raw_words = []
            for segment in _as_list(payload["segments"], "segments"):
                if not isinstance(segment, dict):
                    raise ValueError("each transcript segment must be an object")
                raw_words.extend(_as_list(segment.get("words") or [], "segment words"))
        else:
            raise ValueError("transcript must contain 'words' or 'segments'")
    else:
        raise ValueError(f"unsupported transcript payload type: {type(payload).__name__}")

    words = [_parse_word(index, raw) for index, raw in enumerate(raw_words)]
    return TranscriptInput(words=words, text=text)


def _parse_word(index: int, raw: Any) -> WordTimestamp:
    if not isinstance(raw, dict):
        raise ValueError(f"word {index} must be an object")
    try:
        if "word" in raw:
            return WordTimestamp(text=raw["word"], start_time=raw["start"], end_time=raw["end"])
        return WordTimestamp.model_validate(raw)
    except KeyError as exc:
        raise ValueError(f"word {index} is missing {exc.args[0]!r}") from exc
    except ValidationError as exc:
        raise ValueError(f"word {index} is invalid: {exc.errors()[0]['msg']}") from exc


def _as_list(value: Any, name: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    return value


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("text must be a string")
    return value
