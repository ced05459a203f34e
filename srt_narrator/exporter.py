"""Encode the assembled track as MP3, with an optional JSON manifest."""

import json
import os
from datetime import datetime, timezone

from pydub import AudioSegment
from pydub.exceptions import CouldntEncodeError

from srt_narrator.constants import OUTPUT_BITRATE, OUTPUT_FORMAT, VERSION
from srt_narrator.errors import EncodingFailure
from srt_narrator.models import AssemblyResult


class Encoder:
    """Write an AudioSegment to its final compressed format."""

    def encode(self, audio: AudioSegment, output_path: str) -> str:
        raise NotImplementedError


class Mp3Encoder(Encoder):
    def __init__(self, bitrate: str = OUTPUT_BITRATE):
        self.bitrate = bitrate

    def encode(self, audio: AudioSegment, output_path: str) -> str:
        """Export audio as MP3 at the fixed bitrate.

        Any failure raises EncodingFailure and leaves no partial file behind.
        """
        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)
        try:
            handle = audio.export(
                output_path,
                format=OUTPUT_FORMAT,
                codec="libmp3lame",
                bitrate=self.bitrate,
            )
            handle.close()
        except (CouldntEncodeError, OSError) as e:
            if os.path.exists(output_path):
                os.remove(output_path)
            raise EncodingFailure(f"Could not encode {output_path}: {e}") from e

        if not os.path.exists(output_path) or os.path.getsize(output_path) == 0:
            raise EncodingFailure(f"Encoder produced no output: {output_path}")
        return output_path


def manifest_path_for(output_path: str) -> str:
    return os.path.splitext(output_path)[0] + ".json"


def write_manifest(
    output_path: str,
    source: str,
    result: AssemblyResult,
    cue_count: int,
    settings,
) -> str:
    """Write <base>.json next to the audio describing how it was produced.

    Returns path to the manifest.
    """
    manifest = {
        "source": os.path.abspath(source),
        "output": os.path.abspath(output_path),
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "narrator_version": VERSION,
        "settings": settings.to_dict(),
        "stats": {
            "cues": cue_count,
            "speech_segments": result.speech_count,
            "silence_segments": result.silence_count,
            "failed_cues": list(result.failed_cues),
            "duration_seconds": round(result.duration, 3),
            "nominal_duration_seconds": float(result.nominal_duration),
        },
    }

    path = manifest_path_for(output_path)
    with open(path, "w") as f:
        json.dump(manifest, f, indent=2)
    return path
