"""Parse SRT subtitle text into timed cues."""

import logging
import re
from decimal import Decimal

from srt_narrator.errors import ParseFailure
from srt_narrator.models import Cue

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"^[0-9]+$")
# "HH:MM:SS,mmm --> HH:MM:SS,mmm", optionally followed by position hints.
# Each side only needs a timestamp shape; bad fields are zeroed later.
_TIMESTAMP_LINE_RE = re.compile(
    r"^(?P<start>[\w.,]*:[\w.,:]*)\s*-->\s*(?P<end>[\w.,]*:[\w.,:]*)(?:\s|$)"
)
_MS_SEP_RE = re.compile(r"[,.]")

_MS_PER_SECOND = Decimal(1000)

# Parser states
AWAITING_INDEX = "awaiting_index"
AWAITING_TIMESTAMP = "awaiting_timestamp"
ACCUMULATING_TEXT = "accumulating_text"


def _component(value: str) -> int:
    """ASCII digits → int, anything else (including "²") → 0."""
    value = value.strip()
    return int(value) if _DIGITS_RE.match(value) else 0


def timestamp_to_seconds(timestamp: str) -> Decimal:
    """Convert "HH:MM:SS,mmm" to exact seconds.

    "00:01:02,500" → Decimal("62.5")

    A "." millisecond separator is accepted. Malformed components count
    as 0 so one bad timestamp never aborts a file.
    """
    parts = _MS_SEP_RE.split(timestamp.strip(), maxsplit=1)
    time_part = parts[0]
    ms = _component(parts[1]) if len(parts) > 1 else 0

    fields = time_part.split(":")
    # Right-align so "MM:SS" and "SS" still land in the right slots
    fields = ["0"] * (3 - len(fields)) + fields[-3:]
    hours, minutes, seconds = (_component(f) for f in fields)

    return Decimal(hours * 3600 + minutes * 60 + seconds) + Decimal(ms) / _MS_PER_SECOND


def format_timestamp(seconds) -> str:
    """Convert seconds to SRT timestamp format (HH:MM:SS,mmm).

    Exact for Decimal input, so parse/format round-trips never drift.
    """
    total_ms = int((Decimal(str(seconds)) * _MS_PER_SECOND).to_integral_value())
    if total_ms < 0:
        total_ms = 0
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def is_timestamp_line(line: str) -> bool:
    return _TIMESTAMP_LINE_RE.match(line.strip()) is not None


def parse_timestamp_range(line: str) -> tuple[Decimal, Decimal]:
    """Parse "HH:MM:SS,mmm --> HH:MM:SS,mmm" into (start, end) seconds.

    Trailing position hints such as "X1:40 X2:600" are ignored. Raises
    ParseFailure if the line is not shaped like a timestamp range.
    """
    match = _TIMESTAMP_LINE_RE.match(line.strip())
    if match is None:
        raise ParseFailure(f"Not a timestamp range: {line!r}")
    return timestamp_to_seconds(match.group("start")), timestamp_to_seconds(match.group("end"))


class _PendingCue:
    """Mutable accumulator for the cue currently being read."""

    def __init__(self, index: int, start: Decimal = Decimal(0), end: Decimal = Decimal(0)):
        self.index = index
        self.start = start
        self.end = end
        self.lines = []

    def text(self) -> str:
        return " ".join(self.lines)


def _finalize(pending: _PendingCue, normalize, cues: list[Cue]) -> None:
    text = pending.text()
    if normalize is not None:
        text = normalize(text)
    if not text:
        return
    if pending.end <= pending.start:
        logger.warning(
            "Skipping cue %d: end %s is not after start %s",
            pending.index, format_timestamp(pending.end), format_timestamp(pending.start),
        )
        return
    cues.append(Cue(index=pending.index, start=pending.start, end=pending.end, text=text))


def parse_srt(text: str, normalize=None) -> list[Cue]:
    """Parse SRT text into an ordered list of Cues.

    Runs a three-state machine: index line → timestamp line → text lines.
    A numeric line or blank line while reading text finalizes the cue, as
    does end-of-input. Multi-line text is joined with single spaces.

    If normalize is given it is applied to each cue's text; cues whose text
    ends up empty are dropped.
    """
    cues: list[Cue] = []
    state = AWAITING_INDEX
    pending = None
    next_index = 1

    for raw_line in text.lstrip("\ufeff").splitlines():
        line = raw_line.strip()

        if _DIGITS_RE.match(line):
            if state == ACCUMULATING_TEXT and pending is not None:
                _finalize(pending, normalize, cues)
                pending = None
            next_index = int(line)
            state = AWAITING_TIMESTAMP
            continue

        if is_timestamp_line(line):
            if pending is not None:
                _finalize(pending, normalize, cues)
            start, end = parse_timestamp_range(line)
            pending = _PendingCue(next_index, start, end)
            next_index += 1
            state = ACCUMULATING_TEXT
            continue

        if not line:
            if state == ACCUMULATING_TEXT and pending is not None and pending.lines:
                _finalize(pending, normalize, cues)
                pending = None
                state = AWAITING_INDEX
            continue

        if state == ACCUMULATING_TEXT and pending is not None:
            pending.lines.append(line)
        else:
            logger.debug("Ignoring stray line outside a cue: %r", line)

    if pending is not None:
        _finalize(pending, normalize, cues)

    return cues


def read_subtitle_text(path: str) -> str:
    """Read a subtitle file as UTF-8, tolerating a byte-order mark."""
    with open(path, encoding="utf-8-sig", errors="replace") as f:
        return f.read()


def parse_srt_file(path: str, normalize=None) -> list[Cue]:
    """Parse an SRT file from disk."""
    return parse_srt(read_subtitle_text(path), normalize=normalize)
