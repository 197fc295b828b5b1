"""Command-line interface for the caption engine.

WHY: Clip pipelines call the engine from shell scripts: a transcript
JSON goes in, caption files for the compositor and the preview renderer
come out next to it. The CLI wires together parsing, normalization,
chunking, and the selected emitters behind a single command.

HOW: Uses argparse to accept a transcript file (or "-" for stdin),
style options, overlay text, output format selection, and an output
directory. Status messages go to stderr; output files are saved next to
the transcript (or to --output-dir).

RULES:
- Positional argument: transcript JSON path, or "-" for stdin
- --formats: comma-separated emitter keys (default: all registered)
- Unknown style values fall back to defaults with a warning, never an error
- Output naming: {stem}{suffix}, numeric suffix for conflicts
- Exit codes: 0 = success, 1 = unreadable input / unknown format / bad dir
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from short_captions.config import DEFAULT_FONT, DEFAULT_FPS, LOG_LEVEL, SUBTITLE_FONT_SIZE
from short_captions.core.ir import Overlay
from short_captions.core.normalizer import try_parse_json
from short_captions.core.pipeline import build_track
from short_captions.core.style import StyleConfig
from short_captions.emitters import EMITTERS
from short_captions.emitters.base import EmitterOutput


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. clip-captions.srt)
    - Conflict: counter inserted before the last extension
      (e.g. clip-captions-2.srt); counter starts at 2
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: EmitterOutput, stem: str, output_dir: Path) -> Path:
    """Save a single emitter output to disk as UTF-8 text."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _read_transcript(input_file: str) -> str:
    if input_file == "-":
        return sys.stdin.read()
    with open(input_file, "r", encoding="utf-8") as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="short_captions",
        description="Turn a word-level transcript into synchronized caption files "
                    "(frame props JSON, ASS, SRT) for vertical short-form video.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the transcript JSON (word list with start/end seconds), or '-' for stdin.",
    )
    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(EMITTERS.keys()))),
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file, or CWD for stdin).",
    )
    parser.add_argument(
        "--words-per-chunk",
        default="3",
        help="Words per caption page: 1, 3, or full (default: %(default)s).",
    )
    parser.add_argument(
        "--color",
        default="Yellow",
        help="Highlight colour: White, Yellow, Red, Cyan, Green (default: %(default)s).",
    )
    parser.add_argument(
        "--background",
        default="outline",
        help="Background style: outline, box, shadow, 3d (default: %(default)s).",
    )
    parser.add_argument(
        "--animation",
        default="pop",
        help="Entrance animation: pop, bounce, slide, fade (default: %(default)s).",
    )
    parser.add_argument("--font", default=DEFAULT_FONT, help="Font family (default: %(default)s).")
    parser.add_argument(
        "--font-size",
        type=int,
        default=SUBTITLE_FONT_SIZE,
        help="Caption font size (default: %(default)s).",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=DEFAULT_FPS,
        help="Frame rate for frame props (default: %(default)s).",
    )
    parser.add_argument(
        "--uppercase",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Force upper-case captions (default: %(default)s).",
    )
    parser.add_argument("--title", default="", help="Top title overlay text.")
    parser.add_argument("--part", default="", help="Part-number overlay text (e.g. 'Part 1').")
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Clip duration in seconds for overlays (default: end of last caption).",
    )
    parser.add_argument(
        "--clip-start",
        type=float,
        default=None,
        help="Caption only words from this time (seconds) on, shifted to start at 0.",
    )
    parser.add_argument(
        "--clip-end",
        type=float,
        default=None,
        help="Caption only words ending by this time (seconds).",
    )

    return parser


def run(args: argparse.Namespace) -> List[Path]:
    """Execute the caption pipeline for parsed arguments.

    Returns:
        Paths of the saved files.
    """
    if args.formats:
        format_keys = [f.strip() for f in args.formats.split(",") if f.strip()]
        for key in format_keys:
            if key not in EMITTERS:
                available = ", ".join(sorted(EMITTERS.keys()))
                print(
                    "Error: Unknown format '{}'. Available formats: {}".format(key, available),
                    file=sys.stderr,
                )
                sys.exit(1)
    else:
        format_keys = list(EMITTERS.keys())

    if args.input_file == "-":
        stem = "captions"
        default_dir = Path.cwd()
    else:
        input_path = Path(args.input_file).resolve()
        if not input_path.is_file():
            print("Error: File not found: {}".format(input_path), file=sys.stderr)
            sys.exit(1)
        stem = input_path.stem
        default_dir = input_path.parent

    output_dir = Path(args.output_dir).resolve() if args.output_dir else default_dir
    if not output_dir.is_dir():
        print("Error: Output directory does not exist: {}".format(output_dir), file=sys.stderr)
        sys.exit(1)

    try:
        data = try_parse_json(_read_transcript(args.input_file))
    except (OSError, ValueError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    style = StyleConfig(
        font=args.font,
        font_size=args.font_size,
        highlight_color=args.color,
        background_style=args.background,
        force_uppercase=args.uppercase,
        words_per_chunk=args.words_per_chunk,
        animation=args.animation,
        fps=args.fps,
    )
    overlay = Overlay(top_title=args.title, part_number=args.part, duration_s=args.duration)

    track = build_track(
        data, style=style, overlay=overlay,
        clip_start=args.clip_start, clip_end=args.clip_end,
    )
    _status("Built {} caption pages ({} words per page, {} fps)".format(
        len(track.chunks), style.words_per_chunk.value, style.fps,
    ))

    saved_files: List[Path] = []
    for key in format_keys:
        emitter = EMITTERS[key]()
        outputs = emitter.emit(track)
        if not outputs:
            _status("  {}: nothing to write".format(emitter.name))
            continue
        for output in outputs:
            saved_path = _save_output(output, stem, output_dir)
            saved_files.append(saved_path)
            _status("  Saved: {}".format(saved_path.name))

    _status("Done! Saved {} file(s) to {}".format(len(saved_files), output_dir))
    return saved_files


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)
    run(args)


if __name__ == "__main__":
    main()
