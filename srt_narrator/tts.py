"""Speech synthesis engines: Piper (local CLI) and edge-tts (with retry logic)."""

import asyncio
import logging
import os
import subprocess
import tempfile
import time

import edge_tts
from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from srt_narrator.constants import (
    EDGE_VOICE,
    PIPER_TIMEOUT,
    SAMPLE_RATE,
    TTS_RATE,
    TTS_RETRY_BASE_DELAY,
    TTS_RETRY_COUNT,
)
from srt_narrator.errors import SynthesisFailure

logger = logging.getLogger(__name__)


class Synthesizer:
    """Render text to audio.

    synthesize() returns (audio, duration_seconds), where the duration is
    measured from the decoded audio. Raises SynthesisFailure when the
    engine produces nothing usable.
    """

    def synthesize(self, text: str) -> tuple[AudioSegment, float]:
        raise NotImplementedError


def load_rendered_audio(path: str, sample_rate: int = SAMPLE_RATE) -> tuple[AudioSegment, float]:
    """Load an engine's output file as mono audio at sample_rate.

    Raises SynthesisFailure for a missing, empty, or undecodable file.
    """
    if not os.path.exists(path) or os.path.getsize(path) == 0:
        raise SynthesisFailure(f"Engine produced no audio: {path}")
    try:
        audio = AudioSegment.from_file(path)
    except (CouldntDecodeError, IndexError, OSError) as e:
        raise SynthesisFailure(f"Could not decode engine output {path}: {e}") from e
    if len(audio) == 0:
        raise SynthesisFailure(f"Engine produced zero-length audio: {path}")
    audio = audio.set_channels(1).set_frame_rate(sample_rate)
    return audio, audio.duration_seconds


def _scratch_file(workdir: str | None, suffix: str) -> str:
    fd, path = tempfile.mkstemp(suffix=suffix, prefix="speech_", dir=workdir)
    os.close(fd)
    return path


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


class PiperSynthesizer(Synthesizer):
    """Run the piper CLI with a fixed voice model; text goes in on stdin."""

    def __init__(
        self,
        model_path: str,
        sample_rate: int = SAMPLE_RATE,
        workdir: str | None = None,
        executable: str = "piper",
        timeout: float = PIPER_TIMEOUT,
    ):
        self.model_path = model_path
        self.sample_rate = sample_rate
        self.workdir = workdir
        self.executable = executable
        self.timeout = timeout

    def command(self, output_path: str) -> list[str]:
        return [self.executable, "--model", self.model_path, "--output_file", output_path]

    def synthesize(self, text: str) -> tuple[AudioSegment, float]:
        output_path = _scratch_file(self.workdir, ".wav")
        try:
            try:
                proc = subprocess.run(
                    self.command(output_path),
                    input=text,
                    capture_output=True,
                    text=True,
                    check=False,
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as e:
                raise SynthesisFailure(
                    f"{self.executable} did not finish within {self.timeout}s"
                ) from e
            except OSError as e:
                raise SynthesisFailure(f"Could not run {self.executable}: {e}") from e

            if proc.returncode != 0:
                stderr = (proc.stderr or "").strip()
                raise SynthesisFailure(
                    f"{self.executable} exited with status {proc.returncode}: {stderr[-200:]}"
                )
            return load_rendered_audio(output_path, self.sample_rate)
        finally:
            _remove_quietly(output_path)


class EdgeSynthesizer(Synthesizer):
    """Render through Microsoft Edge's online voices via edge-tts.

    Each request is retried with exponential backoff on network errors,
    HTTP errors, or output that is empty or cannot be decoded.
    """

    def __init__(
        self,
        voice: str = EDGE_VOICE,
        sample_rate: int = SAMPLE_RATE,
        workdir: str | None = None,
        rate: str = TTS_RATE,
        retries: int = TTS_RETRY_COUNT,
    ):
        self.voice = voice
        self.sample_rate = sample_rate
        self.workdir = workdir
        self.rate = rate
        self.retries = retries

    def _render(self, text: str, output_path: str) -> tuple[AudioSegment, float]:
        communicate = edge_tts.Communicate(text, self.voice, rate=self.rate)
        asyncio.run(communicate.save(output_path))
        return load_rendered_audio(output_path, self.sample_rate)

    def synthesize(self, text: str) -> tuple[AudioSegment, float]:
        output_path = _scratch_file(self.workdir, ".mp3")
        last_error = None
        try:
            for attempt in range(self.retries):
                try:
                    return self._render(text, output_path)
                except Exception as e:
                    last_error = e

                if attempt < self.retries - 1:
                    delay = TTS_RETRY_BASE_DELAY * (2 ** attempt)
                    logger.debug(
                        "edge-tts attempt %d failed (%s); retrying in %.1fs",
                        attempt + 1, last_error, delay,
                    )
                    time.sleep(delay)
        finally:
            _remove_quietly(output_path)

        if isinstance(last_error, SynthesisFailure):
            raise last_error
        raise SynthesisFailure(f"edge-tts failed for voice {self.voice}: {last_error}") from last_error


def create_synthesizer(settings, workdir: str | None = None, model_path: str | None = None) -> Synthesizer:
    """Build the engine named by settings.engine."""
    if settings.engine == "edge":
        return EdgeSynthesizer(
            voice=settings.edge_voice,
            sample_rate=settings.sample_rate,
            workdir=workdir,
        )
    if model_path is None:
        from srt_narrator.voices import voice_model_paths

        model_path, _ = voice_model_paths(settings.voice_model, settings.voices_dir)
    return PiperSynthesizer(model_path, sample_rate=settings.sample_rate, workdir=workdir)
