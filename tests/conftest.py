"""Shared fixtures for srt_narrator tests."""

import logging

import pytest

from fakes import SAMPLE_SRT, FakeEncoder, FakeSynthesizer, FakeTransform


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers that setup_logging() attached during a test."""
    yield
    logger = logging.getLogger("srt_narrator")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def srt_file(tmp_path):
    """A small three-cue subtitle file."""
    path = tmp_path / "lesson.srt"
    path.write_text(SAMPLE_SRT, encoding="utf-8")
    return path


@pytest.fixture
def fake_synth():
    return FakeSynthesizer()


@pytest.fixture
def fake_transform():
    return FakeTransform()


@pytest.fixture
def fake_encoder():
    return FakeEncoder()
