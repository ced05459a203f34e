"""CLI interface with subcommand routing."""

import argparse
import logging
import os
import sys

from srt_narrator.config import build_settings
from srt_narrator.console import log_success, setup_logging
from srt_narrator.constants import INPUT_DIR, STRETCH_MAX, STRETCH_MIN, SUBTITLE_EXTENSION, VERSION
from srt_narrator.converter import convert_all
from srt_narrator.dependencies import check_dependencies
from srt_narrator.errors import ConfigurationError, DependencyError, VoiceModelError
from srt_narrator.normalizer import normalize_text
from srt_narrator.parser import format_timestamp, parse_srt_file
from srt_narrator.tts import create_synthesizer
from srt_narrator.voices import ensure_voice_model
from srt_narrator.workspace import Workspace, discover_subtitles, install_cleanup_handlers

logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    logger.error(message)
    raise SystemExit(1)


def _collect_inputs(paths: list[str], input_dir: str) -> list[str]:
    """Explicit files are taken as-is; directories are searched recursively."""
    if not paths:
        return discover_subtitles(input_dir)

    found = []
    for path in paths:
        if os.path.isdir(path):
            found.extend(discover_subtitles(path))
        elif os.path.isfile(path):
            found.append(path)
        else:
            logger.warning("Input not found: %s", path)
    return found


def _settings_overrides(args) -> dict:
    bounds = None
    if args.min_ratio is not None or args.max_ratio is not None:
        bounds = (
            args.min_ratio if args.min_ratio is not None else STRETCH_MIN,
            args.max_ratio if args.max_ratio is not None else STRETCH_MAX,
        )
    return {
        "engine": args.engine,
        "voice_model": args.voice_model,
        "edge_voice": args.edge_voice,
        "voices_dir": args.voices_dir,
        "sample_rate": args.sample_rate,
        "output_bitrate": args.bitrate,
        "stretch_bounds": bounds,
        "gap_epsilon": args.gap_epsilon,
        "output_dir": args.output_dir,
        "workers": args.workers,
        "write_manifest": True if args.manifest else None,
    }


def cmd_convert(args):
    """Convert subtitle files to narrated MP3s."""
    setup_logging(getattr(logging, args.log_level.upper(), logging.INFO))
    install_cleanup_handlers()
    logger.info("SRT to MP3 Converter %s", VERSION)

    try:
        settings = build_settings(args.config, _settings_overrides(args))
    except ConfigurationError as e:
        _fail(str(e))

    srt_files = _collect_inputs(args.paths, args.input_dir)
    if not srt_files:
        _fail(f"No {SUBTITLE_EXTENSION} files found in {args.input_dir if not args.paths else ', '.join(args.paths)}")
    logger.info("Found %d SRT file(s) to convert", len(srt_files))

    logger.info("Checking dependencies...")
    try:
        check_dependencies(settings.engine)
    except DependencyError as e:
        _fail(str(e))
    log_success(logger, "All dependencies found")

    model_path = None
    if settings.engine == "piper":
        try:
            model_path = ensure_voice_model(
                settings.voice_model, settings.voices_dir, download=not args.no_download
            )
        except VoiceModelError as e:
            _fail(str(e))

    with Workspace() as workspace:
        summary = convert_all(
            srt_files,
            settings,
            lambda workdir: create_synthesizer(settings, workdir=workdir, model_path=model_path),
            workspace=workspace,
        )

    log_success(
        logger,
        "Conversion complete: %d/%d files processed successfully",
        summary.succeeded,
        summary.total,
    )
    for result in summary.results:
        if not result.ok:
            logger.warning("Failed: %s (%s)", result.source, result.error)
    logger.info("Output files saved to: %s", settings.output_dir)
    return summary


def cmd_cues(args):
    """Print the cues a subtitle file parses into."""
    if not os.path.isfile(args.file):
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        raise SystemExit(1)

    cues = parse_srt_file(args.file, normalize=None if args.raw else normalize_text)
    if not cues:
        print(f"No subtitles found in {args.file}")
        return cues

    print(f"Cues: {len(cues)}")
    for cue in cues:
        print(
            f"  {cue.index:>4}  {format_timestamp(cue.start)} --> {format_timestamp(cue.end)}"
            f"  ({cue.duration}s)  {cue.text}"
        )
    print(f"Total duration: {format_timestamp(cues[-1].end)}")
    return cues


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srt-narrator",
        description="Narrate SRT subtitles into timed MP3 audio with text-to-speech",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # convert
    convert_parser = subparsers.add_parser("convert", help="Convert subtitle files to MP3")
    convert_parser.add_argument("paths", nargs="*", help="SRT files or directories (default: search --input-dir)")
    convert_parser.add_argument("--input-dir", default=INPUT_DIR, help="Directory searched recursively for .srt files")
    convert_parser.add_argument("-o", "--output-dir", help="Where MP3 files are written")
    convert_parser.add_argument("-c", "--config", help="JSON settings file")
    convert_parser.add_argument("--engine", choices=["piper", "edge"], help="Speech engine")
    convert_parser.add_argument("--voice-model", help="Piper voice model id, e.g. en_US-lessac-medium")
    convert_parser.add_argument("--voices-dir", help="Piper voice model cache directory")
    convert_parser.add_argument("--edge-voice", help="edge-tts voice name, e.g. en-US-GuyNeural")
    convert_parser.add_argument("--sample-rate", type=int, help="Sample rate in Hz")
    convert_parser.add_argument("--bitrate", help="MP3 bitrate, e.g. 128k")
    convert_parser.add_argument("--min-ratio", type=float, help="Lowest tempo factor applied to a clip")
    convert_parser.add_argument("--max-ratio", type=float, help="Highest tempo factor applied to a clip")
    convert_parser.add_argument("--gap-epsilon", type=float, help="Shortest gap (seconds) kept as silence")
    convert_parser.add_argument("--workers", type=int, help="Cues rendered concurrently per file")
    convert_parser.add_argument("--manifest", action="store_true", help="Write a JSON manifest next to each MP3")
    convert_parser.add_argument("--no-download", action="store_true", help="Fail instead of downloading a missing voice model")
    convert_parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level",
    )
    convert_parser.set_defaults(func=cmd_convert)

    # cues
    cues_parser = subparsers.add_parser("cues", help="Show the cues parsed from a subtitle file")
    cues_parser.add_argument("file", help="Path to the .srt file")
    cues_parser.add_argument("--raw", action="store_true", help="Show text without speech normalization")
    cues_parser.set_defaults(func=cmd_cues)

    return parser


def main(argv=None):
    """CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    args.func(args)
