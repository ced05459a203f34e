"""Tests for config module."""

import json

import pytest

from srt_narrator import constants
from srt_narrator.config import Settings, build_settings, load_settings_file, validate
from srt_narrator.errors import ConfigurationError


def _write(tmp_path, data):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(data) if not isinstance(data, str) else data)
    return str(path)


def test_defaults_come_from_constants():
    settings = build_settings()
    assert settings.engine == constants.ENGINE
    assert settings.voice_model == constants.VOICE_MODEL
    assert settings.sample_rate == constants.SAMPLE_RATE
    assert settings.output_bitrate == constants.OUTPUT_BITRATE
    assert settings.stretch_bounds == (constants.STRETCH_MIN, constants.STRETCH_MAX)
    assert settings.gap_epsilon == constants.GAP_EPSILON
    assert settings.output_dir == constants.OUTPUT_DIR
    assert settings.workers == 1
    assert settings.write_manifest is False


def test_file_overrides_defaults(tmp_path):
    path = _write(tmp_path, {"engine": "edge", "stretch_bounds": [0.8, 1.25], "workers": "4"})
    settings = build_settings(path)
    assert settings.engine == "edge"
    assert settings.stretch_bounds == (0.8, 1.25)
    assert settings.workers == 4


def test_overrides_beat_file(tmp_path):
    path = _write(tmp_path, {"output_dir": "from_file", "gap_epsilon": 0.5})
    settings = build_settings(path, {"output_dir": "from_cli", "gap_epsilon": None})
    assert settings.output_dir == "from_cli"
    assert settings.gap_epsilon == 0.5


def test_voices_dir_user_expanded(tmp_path):
    settings = build_settings(_write(tmp_path, {"voices_dir": "~/voices"}))
    assert not settings.voices_dir.startswith("~")


def test_unknown_key_rejected(tmp_path):
    with pytest.raises(ConfigurationError, match="colour"):
        build_settings(_write(tmp_path, {"colour": "blue"}))


def test_bad_value_rejected(tmp_path):
    with pytest.raises(ConfigurationError):
        build_settings(_write(tmp_path, {"sample_rate": "fast"}))


def test_missing_file():
    with pytest.raises(ConfigurationError, match="not found"):
        load_settings_file("/no/such/settings.json")


def test_invalid_json(tmp_path):
    with pytest.raises(ConfigurationError):
        load_settings_file(_write(tmp_path, "{not json"))


def test_non_object_json(tmp_path):
    with pytest.raises(ConfigurationError, match="JSON object"):
        load_settings_file(_write(tmp_path, [1, 2]))


@pytest.mark.parametrize("kwargs", [
    {"engine": "espeak"},
    {"stretch_bounds": (2.0, 0.5)},
    {"stretch_bounds": (0.0, 2.0)},
    {"stretch_bounds": (1.0,)},
    {"gap_epsilon": -0.1},
    {"sample_rate": 0},
    {"workers": 0},
])
def test_validate_rejects(kwargs):
    with pytest.raises(ConfigurationError):
        validate(Settings(**kwargs))


def test_to_dict_is_json_ready():
    data = Settings().to_dict()
    assert data["stretch_bounds"] == [0.5, 2.0]
    json.dumps(data)
