"""Fit synthesized speech to a cue's duration with bounded tempo scaling."""

import io
import logging

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError, CouldntEncodeError

from srt_narrator.constants import STRETCH_MAX, STRETCH_MIN
from srt_narrator.errors import ReconciliationFailure

logger = logging.getLogger(__name__)


class AudioTransform:
    """Uniform tempo scaling: ratio 2.0 plays twice as fast, pitch unchanged."""

    def tempo(self, audio: AudioSegment, ratio: float) -> AudioSegment:
        raise NotImplementedError


ATEMPO_MIN = 0.5
ATEMPO_MAX = 2.0


def atempo_stages(ratio: float) -> list[float]:
    """Split ratio into atempo factors that each stay within 0.5-2.0.

    0.25 → [0.5, 0.5]; 3.0 → [2.0, 1.5]; 1.2 → [1.2]
    """
    if ratio <= 0:
        raise ReconciliationFailure(f"Tempo ratio must be positive, got {ratio}")
    stages = []
    remaining = ratio
    while remaining > ATEMPO_MAX:
        stages.append(ATEMPO_MAX)
        remaining /= ATEMPO_MAX
    while remaining < ATEMPO_MIN:
        stages.append(ATEMPO_MIN)
        remaining /= ATEMPO_MIN
    stages.append(remaining)
    return stages


def atempo_filter(ratio: float) -> str:
    return ",".join(f"atempo={stage:.6f}" for stage in atempo_stages(ratio))


class FfmpegTempo(AudioTransform):
    """Tempo scaling through a chain of ffmpeg atempo filters, kept in memory.

    Ratios outside 0.5-2.0 are split across several filters, so any
    configured stretch bounds can be honored.
    """

    def tempo(self, audio: AudioSegment, ratio: float) -> AudioSegment:
        if ratio == 1.0:
            return audio
        buf = io.BytesIO()
        try:
            audio.export(buf, format="wav", parameters=["-filter:a", atempo_filter(ratio)])
            buf.seek(0)
            return AudioSegment.from_wav(buf)
        except (CouldntEncodeError, CouldntDecodeError, OSError) as e:
            raise ReconciliationFailure(f"atempo={ratio} failed: {e}") from e


def clamp_ratio(ratio: float, bounds: tuple[float, float] = (STRETCH_MIN, STRETCH_MAX)) -> float:
    low, high = bounds
    return min(max(ratio, low), high)


def compute_ratio(
    raw_duration: float,
    target_duration: float,
    bounds: tuple[float, float] = (STRETCH_MIN, STRETCH_MAX),
) -> float:
    """Speed factor raw/target, clamped to bounds.

    raw=10, target=1 → 2.0; raw=1, target=10 → 0.5
    """
    raw = float(raw_duration)
    target = float(target_duration)
    if raw <= 0 or target <= 0:
        raise ReconciliationFailure(
            f"Cannot compute tempo ratio for raw={raw:.3f}s target={target:.3f}s"
        )
    natural = raw / target
    ratio = clamp_ratio(natural, bounds)
    if ratio != natural:
        logger.debug("Tempo ratio %.3f clamped to %.3f", natural, ratio)
    return ratio


def reconcile(
    raw_audio: AudioSegment,
    raw_duration: float,
    target_duration: float,
    transform: AudioTransform,
    bounds: tuple[float, float] = (STRETCH_MIN, STRETCH_MAX),
) -> tuple[AudioSegment, float]:
    """Scale raw_audio toward target_duration.

    Returns (adjusted_audio, applied_ratio). The result lasts about
    raw_duration / ratio seconds; outside the bounds timing is sacrificed
    for intelligibility. Raises ReconciliationFailure for zero-length input
    or a failed transform.
    """
    if len(raw_audio) == 0:
        raise ReconciliationFailure("Cannot tempo-scale zero-length audio")
    ratio = compute_ratio(raw_duration, target_duration, bounds)
    adjusted = transform.tempo(raw_audio, ratio)
    if len(adjusted) == 0:
        raise ReconciliationFailure(f"Tempo scaling by {ratio:.3f} produced no audio")
    return adjusted, ratio
