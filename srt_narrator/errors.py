"""Exception hierarchy for subtitle narration.

Per-cue failures (SynthesisFailure, ReconciliationFailure) are recovered by
the assembler. Per-file failures (ParseFailure, EmptyInputFailure, EncodingFailure)
abort one file's conversion. The remaining errors are fatal to the whole run.
"""


class NarratorError(Exception):
    """Base class for all srt_narrator errors."""


class ParseFailure(NarratorError):
    """A structural subtitle line could not be parsed."""


class SynthesisFailure(NarratorError):
    """The speech engine could not render a cue."""


class ReconciliationFailure(NarratorError):
    """Tempo scaling could not be applied to a rendered cue."""


class EmptyInputFailure(NarratorError):
    """No cues survived parsing, or no audio segment was produced."""


class EncodingFailure(NarratorError):
    """The assembled track could not be encoded to the output format."""


class ConfigurationError(NarratorError):
    """Settings are invalid or the settings file cannot be read."""


class DependencyError(NarratorError):
    """A required external tool is not installed."""


class VoiceModelError(NarratorError):
    """A voice model could not be resolved or downloaded."""
