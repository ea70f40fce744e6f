"""CLI entrypoint for sentloop."""

from __future__ import annotations

import argparse
import math
import sys
from collections.abc import Sequence

from sentloop.config import load_config
from sentloop.core import run_alignment
from sentloop.io import load_words, to_json, write_json
from sentloop.logs import configure_logging
from sentloop.models import AlignRequest
from sentloop.playback import (
    PlaybackSession,
    RepeatMode,
    SimulatedTransport,
    SimulationStep,
    simulate,
)


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="sentloop",
        description="Sentence-by-sentence audio playback with repeat cycles.",
    )
    subparsers = parser.add_subparsers(dest="command")

    align = subparsers.add_parser("align", help="Align a word-timestamp transcript into sentences")
    align.add_argument("transcript", help="Path to a transcript JSON file")
    align.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output JSON path. If omitted, prints to stdout.",
    )

    sim = subparsers.add_parser("simulate", help="Simulate sentence playback of a transcript")
    sim.add_argument("transcript", help="Path to a transcript JSON file")
    sim.add_argument(
        "--repeat-mode",
        choices=[mode.value for mode in RepeatMode],
        default=RepeatMode.SENTENCE.value,
        help="Repeat mode (default: sentence)",
    )
    sim.add_argument(
        "--repeat-target",
        type=int,
        default=None,
        help="Plays per sentence in sentence mode (default: from config)",
    )
    sim.add_argument("--rate", type=float, default=1.0, help="Playback speed (0.5-2.0)")
    sim.add_argument(
        "--max-steps",
        type=int,
        default=None,
        help="Stop after this many position samples",
    )

    serve = subparsers.add_parser("serve", help="Run the sentloop HTTP API")
    serve.add_argument("--host", default=None, help="Override API host")
    serve.add_argument("--port", type=int, default=None, help="Override API port")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_config()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    configure_logging(config.log_level)

    if args.command == "align":
        try:
            transcript = load_words(args.transcript)
        except (OSError, ValueError) as exc:
            print(f"Cannot read transcript: {exc}", file=sys.stderr)
            return 2
        response = run_alignment(AlignRequest(words=transcript.words, text=transcript.text))
        if args.output:
            write_json(response, args.output)
            print(f"Wrote {response.metadata.segment_count} segments to {args.output}")
            return 0
        print(to_json(response))
        return 0

    if args.command == "simulate":
        try:
            transcript = load_words(args.transcript)
            transport = SimulatedTransport(
                duration=max((word.end_time for word in transcript.words), default=0.0),
                rate=args.rate,
            )
        except (OSError, ValueError) as exc:
            print(f"Cannot simulate: {exc}", file=sys.stderr)
            return 2
        response = run_alignment(AlignRequest(words=transcript.words, text=transcript.text))
        segments = response.segments
        session = PlaybackSession(
            segments,
            transport,
            settings=config.playback_settings(),
            repeat_mode=RepeatMode(args.repeat_mode),
            repeat_target=args.repeat_target,
        )
        max_steps = args.max_steps or _default_max_steps(
            transport.duration,
            session.state.repeat_target,
            config.sample_interval_sec * transport.rate,
        )

        def report(step: SimulationStep) -> None:
            status = step.status
            index = status.active_index
            text = segments[index].text if index is not None else "-"
            cycle = (
                f" repeat {status.repeats_completed}/{status.repeat_target}"
                if status.is_cycling
                else ""
            )
            state = "playing" if status.is_playing else "paused"
            print(f"[{step.clock:8.2f}s] {state:7} #{_ordinal(index)}{cycle} {text}")

        print(f"Simulating {len(segments)} segments in {args.repeat_mode} mode")
        steps = simulate(
            session,
            transport,
            interval=config.sample_interval_sec,
            max_steps=max_steps,
            on_change=report,
        )
        print(f"Simulation finished after {len(steps)} status changes")
        return 0

    if args.command == "serve":
        try:
            import uvicorn
        except ModuleNotFoundError:
            print(
                "`sentloop serve` requires uvicorn. Install project dependencies first.",
                file=sys.stderr,
            )
            return 1

        host = args.host or config.api_host
        port = args.port or config.api_port
        uvicorn.run(
            "sentloop.api:app",
            host=host,
            port=port,
            workers=config.workers,
            reload=False,
        )
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


def _default_max_steps(duration: float, repeat_target: int, media_step: float) -> int:
    # Every sentence may play repeat_target + 1 times; leave headroom for seeks.
    return math.ceil(duration * (repeat_target + 2) / media_step) + 10


def _ordinal(index: int | None) -> str:
    return "-" if index is None else str(index + 1)


if __name__ == "__main__":
    raise SystemExit(main())
