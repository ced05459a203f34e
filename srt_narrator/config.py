"""Conversion settings: constants, overridden by a JSON file, overridden by CLI flags."""

import json
import os
from dataclasses import asdict, dataclass, fields, replace

from srt_narrator.constants import (
    EDGE_VOICE,
    ENGINE,
    ENGINES,
    GAP_EPSILON,
    OUTPUT_BITRATE,
    OUTPUT_DIR,
    SAMPLE_RATE,
    STRETCH_MAX,
    STRETCH_MIN,
    VOICE_MODEL,
    VOICES_DIR,
    WORKERS,
)
from srt_narrator.errors import ConfigurationError


@dataclass(frozen=True)
class Settings:
    engine: str = ENGINE
    voice_model: str = VOICE_MODEL
    edge_voice: str = EDGE_VOICE
    voices_dir: str = VOICES_DIR
    sample_rate: int = SAMPLE_RATE
    output_bitrate: str = OUTPUT_BITRATE
    stretch_bounds: tuple = (STRETCH_MIN, STRETCH_MAX)
    gap_epsilon: float = GAP_EPSILON
    output_dir: str = OUTPUT_DIR
    workers: int = WORKERS
    write_manifest: bool = False

    def to_dict(self) -> dict:
        data = asdict(self)
        data["stretch_bounds"] = list(self.stretch_bounds)
        return data


def validate(settings: Settings) -> Settings:
    """Raise ConfigurationError for values the pipeline cannot honor."""
    if settings.engine not in ENGINES:
        raise ConfigurationError(f"Unknown engine {settings.engine!r}; choose from {', '.join(ENGINES)}")
    if len(settings.stretch_bounds) != 2:
        raise ConfigurationError("stretch_bounds must be [min, max]")
    low, high = settings.stretch_bounds
    if low <= 0 or low > high:
        raise ConfigurationError(f"Invalid stretch bounds [{low}, {high}]")
    if settings.gap_epsilon < 0:
        raise ConfigurationError(f"gap_epsilon must be >= 0, got {settings.gap_epsilon}")
    if settings.sample_rate <= 0:
        raise ConfigurationError(f"sample_rate must be positive, got {settings.sample_rate}")
    if settings.workers < 1:
        raise ConfigurationError(f"workers must be >= 1, got {settings.workers}")
    return settings


def _coerce(values: dict) -> dict:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"Unknown setting(s): {', '.join(unknown)}")
    values = dict(values)
    try:
        if "stretch_bounds" in values:
            values["stretch_bounds"] = tuple(float(v) for v in values["stretch_bounds"])
        if "sample_rate" in values:
            values["sample_rate"] = int(values["sample_rate"])
        if "workers" in values:
            values["workers"] = int(values["workers"])
        if "gap_epsilon" in values:
            values["gap_epsilon"] = float(values["gap_epsilon"])
        if "voices_dir" in values:
            values["voices_dir"] = os.path.expanduser(values["voices_dir"])
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid setting value: {e}") from e
    return values


def load_settings_file(path: str) -> dict:
    """Read a JSON settings file. Returns the raw mapping."""
    if not os.path.isfile(path):
        raise ConfigurationError(f"Settings file not found: {path}")
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigurationError(f"Could not read settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a JSON object")
    return data


def build_settings(path: str | None = None, overrides: dict | None = None) -> Settings:
    """Defaults, then the settings file (if any), then non-None overrides."""
    settings = Settings()
    if path:
        settings = replace(settings, **_coerce(load_settings_file(path)))
    if overrides:
        given = {k: v for k, v in overrides.items() if v is not None}
        settings = replace(settings, **_coerce(given))
    return validate(settings)
