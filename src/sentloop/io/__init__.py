"""I/O utilities."""

from sentloop.io.export import to_json, write_json
from sentloop.io.transcript import TranscriptInput, load_words, parse_words

__all__ = [
    "TranscriptInput",
    "load_words",
    "parse_words",
    "to_json",
    "write_json",
]
