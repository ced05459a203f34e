"""Tests for normalizer module."""

import re

import numpy as np
import pytest

from srt_narrator.normalizer import (
    Rule,
    apply_rules,
    collapse_whitespace,
    normalize_text,
)


def test_formula_with_units():
    assert normalize_text("E=mc^2 at 20°C") == "E equals mc to the power of 2 at 20 degrees Celsius"


def test_symbols_replaced_everywhere():
    assert normalize_text("a+b=c") == "a plus b equals c"
    assert normalize_text("Δx ≈ 5") == "delta x approximately equal to 5"


def test_squared_and_cubed():
    assert normalize_text("x^2") == "x squared"
    assert normalize_text("x^3") == "x cubed"
    assert normalize_text("2^10") == "2 to the power of 10"


def test_subscript():
    assert normalize_text("y_1 and H_2") == "y subscript 1 and H subscript 2"


def test_abbreviations_whole_word_only():
    assert normalize_text("DNA and RNA") == "D N A and R N A"
    assert normalize_text("DNAse") == "DNAse"
    assert normalize_text("CO2 + H2O") == "carbon dioxide plus water"


def test_abbreviations_are_case_sensitive():
    assert normalize_text("dna") == "dna"


def test_compound_units_keep_their_slash():
    assert normalize_text("9.8 m/s²") == "9.8 meters per second squared"
    assert normalize_text("moving at 3 m/s") == "moving at 3 meters per second"
    assert normalize_text("60 km/h") == "60 kilometers per hour"


def test_units_after_numbers():
    assert normalize_text("5 kg of salt") == "5 kilograms of salt"
    assert normalize_text("20°C") == "20 degrees Celsius"
    assert normalize_text("100 K") == "100 Kelvin"


def test_units_need_a_word_boundary():
    assert normalize_text("5kg") == "5kg"
    assert normalize_text("CO2K") == "CO2K"


def test_units_not_matched_inside_words():
    assert normalize_text("OK then") == "OK then"
    assert normalize_text("backgammon") == "backgammon"


def test_plain_text_unchanged():
    assert normalize_text("Hello there, friend.") == "Hello there, friend."


def test_whitespace_collapsed():
    assert normalize_text("  too    many\tspaces  ") == "too many spaces"


def test_empty_text():
    assert normalize_text("") == ""
    assert normalize_text("   ") == ""


@pytest.mark.parametrize("text", [
    "E=mc^2 at 20°C",
    "CO2 + H2O",
    "Δx ≈ 5 mm",
    "pH < 7",
    "x^2 + y_1",
    "9.8 m/s²",
    "DNA and RNA",
    "100 K",
    "∑ α β ≥ ∞",
    "a - b / c * d",
    "CO2K",
    "K°C",
    "3m/s",
    "O2°C",
])
def test_idempotent(text):
    once = normalize_text(text)
    assert normalize_text(once) == once


def test_kelvin_before_degrees():
    assert normalize_text("K°C") == "Kelvin degrees Celsius"


_FRAGMENTS = [
    "CO2", "H2O", "O2", "pH", "DNA", "NaCl", "K", "kg", "mm", "°C", "°F",
    "m/s", "m/s²", "km/h", "x", "^", "_", "2", "3", "10", "+", "-", "/",
    "=", "<", "≤", "π", "Δ", "a", "b", " ", ".",
]


def test_idempotent_on_random_fragments():
    rng = np.random.default_rng(1234)
    for _ in range(500):
        picks = rng.integers(0, len(_FRAGMENTS), size=rng.integers(1, 9))
        text = "".join(_FRAGMENTS[i] for i in picks)
        once = normalize_text(text)
        assert normalize_text(once) == once, text


def test_apply_rules_in_order():
    rules = [
        Rule(re.compile("a"), "b"),
        Rule(re.compile("b"), "c"),
    ]
    assert apply_rules("a", rules) == "c"


def test_collapse_whitespace():
    assert collapse_whitespace(" a \n b ") == "a b"
