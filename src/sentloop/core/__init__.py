"""Core alignment pipeline."""

from sentloop.core.pipeline import run_alignment

__all__ = ["run_alignment"]
