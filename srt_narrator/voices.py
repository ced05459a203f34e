"""Piper voice model resolution and download cache."""

import logging
import os
import re

import requests

from srt_narrator.constants import VOICE_DOWNLOAD_TIMEOUT, VOICE_MODEL_BASE_URL, VOICES_DIR
from srt_narrator.errors import VoiceModelError

logger = logging.getLogger(__name__)

# "en_US-lessac-medium" → language "en", locale "en_US", name "lessac", quality "medium"
_MODEL_ID_RE = re.compile(r"^(?P<lang>[a-z]{2,3})_(?P<region>[A-Z]{2})-(?P<name>[\w]+)-(?P<quality>[a-z_]+)$")


def voice_model_paths(model_id: str, voices_dir: str = VOICES_DIR) -> tuple[str, str]:
    """Return (onnx_path, config_path) for a model id inside voices_dir."""
    onnx = os.path.join(voices_dir, f"{model_id}.onnx")
    return onnx, onnx + ".json"


def voice_model_url(model_id: str, base_url: str = VOICE_MODEL_BASE_URL) -> str:
    """Hugging Face URL of a model's .onnx file.

    "en_US-lessac-medium" →
    ".../en/en_US/lessac/medium/en_US-lessac-medium.onnx"
    """
    match = _MODEL_ID_RE.match(model_id)
    if not match:
        raise VoiceModelError(
            f"Malformed voice model id: {model_id!r} (expected e.g. en_US-lessac-medium)"
        )
    lang = match.group("lang")
    locale = f"{lang}_{match.group('region')}"
    return f"{base_url}/{lang}/{locale}/{match.group('name')}/{match.group('quality')}/{model_id}.onnx"


def _download(url: str, path: str) -> None:
    """Stream url into path via a .part file so an interrupted download leaves nothing behind."""
    part = path + ".part"
    try:
        with requests.get(url, stream=True, timeout=VOICE_DOWNLOAD_TIMEOUT) as response:
            if response.status_code != 200:
                raise VoiceModelError(f"Download failed (status={response.status_code}): {url}")
            with open(part, "wb") as f:
                for chunk in response.iter_content(chunk_size=1 << 16):
                    if chunk:
                        f.write(chunk)
        os.replace(part, path)
    except requests.RequestException as e:
        raise VoiceModelError(f"Download failed: {url}: {e}") from e
    finally:
        if os.path.exists(part):
            os.remove(part)


def ensure_voice_model(model_id: str, voices_dir: str = VOICES_DIR, download: bool = True) -> str:
    """Make sure the model and its config are cached; return the .onnx path.

    Missing files are downloaded unless download is False, in which case
    VoiceModelError is raised.
    """
    onnx_path, config_path = voice_model_paths(model_id, voices_dir)
    if os.path.exists(onnx_path) and os.path.exists(config_path):
        logger.info("Piper model already exists: %s", onnx_path)
        return onnx_path

    if not download:
        raise VoiceModelError(f"Voice model not found: {onnx_path}")

    os.makedirs(voices_dir, exist_ok=True)
    url = voice_model_url(model_id)
    logger.info("Downloading Piper model: %s", model_id)
    for target, source in ((onnx_path, url), (config_path, url + ".json")):
        if not os.path.exists(target):
            _download(source, target)
    logger.info("Model downloaded successfully")
    return onnx_path
