"""Per-file conversion pipeline and the multi-file run.

parse → normalize → synthesize/reconcile (per cue) → assemble → encode
"""

import logging

from srt_narrator.assembly import assemble_timeline, render_cue
from srt_narrator.config import Settings
from srt_narrator.console import log_success
from srt_narrator.errors import EmptyInputFailure, EncodingFailure, ParseFailure
from srt_narrator.exporter import Encoder, Mp3Encoder, write_manifest
from srt_narrator.models import ConversionResult, RunSummary
from srt_narrator.normalizer import normalize_text
from srt_narrator.parser import parse_srt_file
from srt_narrator.tempo import AudioTransform, FfmpegTempo
from srt_narrator.workspace import Workspace, init_output_dir, output_path_for

logger = logging.getLogger(__name__)


def convert_file(
    srt_path: str,
    settings: Settings,
    synthesizer,
    transform: AudioTransform,
    encoder: Encoder,
    output_path: str | None = None,
) -> ConversionResult:
    """Convert one subtitle file into one narrated audio file.

    Raises EmptyInputFailure if no cue survives parsing or none renders,
    and EncodingFailure if the final export fails. Neither leaves an
    output file behind.
    """
    output_path = output_path or output_path_for(srt_path, settings.output_dir)
    logger.info("Converting: %s", srt_path)

    cues = parse_srt_file(srt_path, normalize=normalize_text)
    if not cues:
        raise EmptyInputFailure(f"No subtitles found in {srt_path}")

    render = render_cue(synthesizer, transform, tuple(settings.stretch_bounds))
    result = assemble_timeline(
        cues,
        render,
        gap_epsilon=settings.gap_epsilon,
        sample_rate=settings.sample_rate,
        workers=settings.workers,
    )

    logger.info("Generated audio duration: %.3fs", result.duration)
    logger.info("SRT duration: %ss", result.nominal_duration)

    encoder.encode(result.audio, output_path)
    if settings.write_manifest:
        write_manifest(output_path, srt_path, result, len(cues), settings)

    log_success(logger, "Created: %s", output_path)
    return ConversionResult(
        source=srt_path,
        output=output_path,
        cue_count=len(cues),
        speech_count=result.speech_count,
        duration=result.duration,
        nominal_duration=float(result.nominal_duration),
    )


def convert_all(
    srt_paths: list[str],
    settings: Settings,
    synthesizer_factory,
    transform: AudioTransform | None = None,
    encoder: Encoder | None = None,
    workspace: Workspace | None = None,
) -> RunSummary:
    """Convert every file in turn; one file's failure never stops the run.

    synthesizer_factory(workdir) builds the engine for a file, with workdir
    a scratch directory that is removed once that file is done.
    """
    transform = transform or FfmpegTempo()
    encoder = encoder or Mp3Encoder(settings.output_bitrate)
    own_workspace = workspace is None
    workspace = workspace or Workspace()
    init_output_dir(settings.output_dir)

    summary = RunSummary()
    try:
        for srt_path in srt_paths:
            with workspace.file_scope(srt_path) as workdir:
                try:
                    result = convert_file(
                        srt_path,
                        settings,
                        synthesizer_factory(workdir),
                        transform,
                        encoder,
                    )
                except (
                    EmptyInputFailure, EncodingFailure, ParseFailure, OSError, UnicodeError,
                ) as e:
                    logger.error("%s: %s", srt_path, e)
                    result = ConversionResult(source=srt_path, error=str(e))
            summary.results.append(result)
    finally:
        if own_workspace:
            workspace.cleanup()

    return summary
