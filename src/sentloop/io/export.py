"""Write alignment results and session snapshots as JSON."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


def to_json(payload: BaseModel) -> str:
    """Render an `AlignResponse` (or any wire model) as indented JSON."""
    return payload.model_dump_json(indent=2)


def write_json(payload: BaseModel, output_path: str | Path) -> None:
    """Save `payload` to `output_path`, creating missing parent directories.

    The file ends with a newline so segment lists diff cleanly.
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_json(payload) + "\n", encoding="utf-8")
