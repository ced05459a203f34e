"""Data models for subtitle narration."""

from dataclasses import dataclass, field
from decimal import Decimal

from pydub import AudioSegment


@dataclass(frozen=True)
class Cue:
    index: int         # ordinal from the subtitle file, informational only
    start: Decimal     # seconds
    end: Decimal       # seconds
    text: str

    @property
    def duration(self) -> Decimal:
        return self.end - self.start


@dataclass(frozen=True)
class Speech:
    cue_index: int
    raw_duration: float      # seconds, as rendered by the engine
    target_duration: Decimal  # seconds, from the cue
    stretch_ratio: float     # tempo factor actually applied


@dataclass(frozen=True)
class Silence:
    duration: Decimal        # seconds


@dataclass
class AssemblyResult:
    audio: AudioSegment
    segments: tuple
    duration: float          # seconds, measured from the assembled audio
    nominal_duration: Decimal  # seconds, end of the last cue
    failed_cues: tuple = ()

    @property
    def speech_count(self) -> int:
        return sum(1 for s in self.segments if isinstance(s, Speech))

    @property
    def silence_count(self) -> int:
        return sum(1 for s in self.segments if isinstance(s, Silence))


@dataclass
class ConversionResult:
    source: str
    output: str | None = None
    error: str | None = None
    cue_count: int = 0
    speech_count: int = 0
    duration: float = 0.0
    nominal_duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.output is not None and self.error is None


@dataclass
class RunSummary:
    results: list[ConversionResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded
