"""Assemble per-cue speech and silence gaps into one continuous track."""

import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from pydub import AudioSegment

from srt_narrator.constants import (
    GAP_EPSILON,
    PROGRESS_PREVIEW_CHARS,
    SAMPLE_RATE,
    STRETCH_MAX,
    STRETCH_MIN,
    WORKERS,
)
from srt_narrator.errors import EmptyInputFailure, ReconciliationFailure, SynthesisFailure
from srt_narrator.models import AssemblyResult, Cue, Silence, Speech
from srt_narrator.tempo import reconcile

logger = logging.getLogger(__name__)


def make_silence(seconds, sample_rate: int = SAMPLE_RATE) -> AudioSegment:
    """Mono silence of the given length in seconds."""
    duration_ms = int((Decimal(str(seconds)) * 1000).to_integral_value())
    return AudioSegment.silent(duration=duration_ms, frame_rate=sample_rate)


def render_cue(synthesizer, transform, bounds: tuple[float, float] = (STRETCH_MIN, STRETCH_MAX)):
    """Build the per-cue synthesize + reconcile step used by assemble_timeline()."""

    def render(cue: Cue) -> tuple[AudioSegment, Speech]:
        raw_audio, raw_duration = synthesizer.synthesize(cue.text)
        audio, ratio = reconcile(raw_audio, raw_duration, cue.duration, transform, bounds)
        return audio, Speech(
            cue_index=cue.index,
            raw_duration=raw_duration,
            target_duration=cue.duration,
            stretch_ratio=ratio,
        )

    return render


def _attempt(render, cue: Cue):
    """Run render(cue); per-cue failures come back as the second item."""
    try:
        return render(cue), None
    except (SynthesisFailure, ReconciliationFailure) as e:
        return None, e


def _outcomes(cues: list[Cue], render, workers: int):
    """Yield (cue, (rendered, error)) in cue order, whatever the execution order."""
    if workers <= 1:
        for cue in cues:
            yield cue, _attempt(render, cue)
        return

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(_attempt, render, cue) for cue in cues]
        for cue, future in zip(cues, futures):
            yield cue, future.result()


def _preview(text: str) -> str:
    if len(text) <= PROGRESS_PREVIEW_CHARS:
        return text
    return text[:PROGRESS_PREVIEW_CHARS] + "..."


def _concatenate(pieces: list[AudioSegment]) -> AudioSegment:
    if len(pieces) == 1:
        return pieces[0]
    result = pieces[0]
    for piece in pieces[1:]:
        result += piece
    return result


def assemble_timeline(
    cues: list[Cue],
    render,
    gap_epsilon: float = GAP_EPSILON,
    sample_rate: int = SAMPLE_RATE,
    workers: int = WORKERS,
) -> AssemblyResult:
    """Interleave rendered cues with silence so the track follows the cue timeline.

    Walks the cues with a cursor starting at 0. A gap before a cue longer
    than gap_epsilon becomes a Silence segment; shorter gaps are absorbed.
    A successful cue appends its Speech segment and moves the cursor to the
    cue's end. A failed cue is logged and skipped without moving the cursor,
    so its time folds into the next cue's leading silence.

    With workers > 1, cues are rendered concurrently but the walk and the
    concatenation still happen in cue order.

    Raises EmptyInputFailure when there are no cues or none renders.
    """
    if not cues:
        raise EmptyInputFailure("No cues to assemble")

    epsilon = Decimal(str(gap_epsilon))
    cursor = Decimal(0)
    segments = []
    pieces = []
    failed = []
    total = len(cues)

    for position, (cue, (rendered, error)) in enumerate(_outcomes(cues, render, workers), 1):
        gap = cue.start - cursor
        if gap > epsilon:
            segments.append(Silence(gap))
            pieces.append(make_silence(gap, sample_rate))
            logger.info("Added %ss silence gap", gap)

        logger.info("Processing segment %d/%d: %s", position, total, _preview(cue.text))

        if error is not None:
            logger.warning("Skipping failed segment %d (%s): %s", cue.index, error, _preview(cue.text))
            failed.append(cue.index)
            continue

        audio, speech = rendered
        segments.append(speech)
        pieces.append(audio)
        cursor = cue.end

    if not any(isinstance(s, Speech) for s in segments):
        raise EmptyInputFailure(f"No audio segments generated ({len(failed)} cues failed)")

    audio = _concatenate(pieces)
    return AssemblyResult(
        audio=audio,
        segments=tuple(segments),
        duration=audio.duration_seconds,
        nominal_duration=cues[-1].end,
        failed_cues=tuple(failed),
    )
