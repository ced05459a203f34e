"""Rewrite cue text so technical and scientific content is spoken clearly.

The substitutions are data: four ordered rule tables applied one after the
other by apply_rules(). Each table sees the full output of the previous one.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Rule:
    pattern: re.Pattern
    replacement: str


def _literal_rules(table: list[tuple[str, str]]) -> list[Rule]:
    return [Rule(re.compile(re.escape(src)), f" {dst} ") for src, dst in table]


def _word_pattern(src: str) -> str:
    # Plain word boundaries: "5 kg" and "20°C" match, "5kg" and "DNAse" do not
    return rf"\b{re.escape(src)}\b"


def _word_rules(table: list[tuple[str, str]]) -> list[Rule]:
    return [Rule(re.compile(_word_pattern(src)), f" {dst} ") for src, dst in table]


SYMBOLS = [
    ("+", "plus"),
    ("-", "minus"),
    ("*", "times"),
    ("/", "divided by"),
    ("=", "equals"),
    ("≠", "not equal to"),
    ("≈", "approximately equal to"),
    ("≤", "less than or equal to"),
    ("≥", "greater than or equal to"),
    ("<", "less than"),
    (">", "greater than"),
    ("∞", "infinity"),
    ("π", "pi"),
    ("∑", "sum"),
    ("∫", "integral"),
    ("∂", "partial"),
    ("∇", "nabla"),
    ("Δ", "delta"),
    ("α", "alpha"),
    ("β", "beta"),
    ("γ", "gamma"),
    ("θ", "theta"),
    ("λ", "lambda"),
    ("μ", "mu"),
    ("σ", "sigma"),
    ("ω", "omega"),
    ("Ω", "capital omega"),
]

ABBREVIATIONS = [
    ("CO2", "carbon dioxide"),
    ("H2O", "water"),
    ("O2", "oxygen"),
    ("N2", "nitrogen"),
    ("pH", "p H"),
    ("DNA", "D N A"),
    ("RNA", "R N A"),
    ("ATP", "A T P"),
    ("NaCl", "sodium chloride"),
]

# m/s² must come before m/s
UNITS = [
    ("m/s²", "meters per second squared"),
    ("m/s", "meters per second"),
    ("km/h", "kilometers per hour"),
    ("kg", "kilograms"),
    ("mg", "milligrams"),
    ("ml", "milliliters"),
    ("mm", "millimeters"),
    ("cm", "centimeters"),
    ("km", "kilometers"),
    ("°C", "degrees Celsius"),
    ("°F", "degrees Fahrenheit"),
    ("K", "Kelvin"),
]

SYMBOL_RULES = _literal_rules(SYMBOLS)

EXPONENT_RULES = [
    Rule(re.compile(r"(?<![A-Za-z_])x\^2(?!\d)"), " x squared "),
    Rule(re.compile(r"(?<![A-Za-z_])x\^3(?!\d)"), " x cubed "),
    Rule(re.compile(r"\^(\d+)"), r" to the power of \1 "),
    Rule(re.compile(r"_(\d+)"), r" subscript \1 "),
]

ABBREVIATION_RULES = _word_rules(ABBREVIATIONS)

UNIT_RULES = _word_rules(UNITS)

RULE_STAGES = (SYMBOL_RULES, EXPONENT_RULES, ABBREVIATION_RULES, UNIT_RULES)

# Units spelled with operator characters are left alone by the symbol stage
_SYMBOL_CHARS = {src for src, _ in SYMBOLS}
_SHIELDED_UNITS = [src for src, _ in UNITS if _SYMBOL_CHARS.intersection(src)]
_SHIELD_RE = re.compile("(" + "|".join(_word_pattern(u) for u in _SHIELDED_UNITS) + ")")

_WHITESPACE_RE = re.compile(r"\s+")

_MAX_PASSES = 8


def apply_rules(text: str, rules: list[Rule]) -> str:
    """Apply every rule, in order, to the whole text."""
    for rule in rules:
        text = rule.pattern.sub(rule.replacement, text)
    return text


def _apply_symbol_rules(text: str) -> str:
    # re.split with a capture group alternates plain text and shielded units
    pieces = _SHIELD_RE.split(text)
    return "".join(
        piece if i % 2 else apply_rules(piece, SYMBOL_RULES)
        for i, piece in enumerate(pieces)
    )


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _normalize_once(text: str) -> str:
    text = _apply_symbol_rules(text)
    for rules in RULE_STAGES[1:]:
        text = apply_rules(text, rules)
    return collapse_whitespace(text)


def normalize_text(text: str) -> str:
    """Return text tuned for speech synthesis.

    "E=mc^2 at 20°C" → "E equals mc to the power of 2 at 20 degrees Celsius"

    Never fails. The stages are repeated until the text stops changing, so
    normalizing already-normalized text is a no-op.
    """
    for _ in range(_MAX_PASSES):
        normalized = _normalize_once(text)
        if normalized == text:
            break
        text = normalized
    return text
