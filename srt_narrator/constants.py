"""All magic numbers and configuration constants."""

import os

ENGINE = "piper"                             # "piper" or "edge"
ENGINES = ("piper", "edge")
VOICE_MODEL = "en_US-lessac-medium"          # Piper voice model id
VOICES_DIR = os.path.join(os.path.expanduser("~"), ".local", "share", "piper-voices")
VOICE_MODEL_BASE_URL = "https://huggingface.co/rhasspy/piper-voices/resolve/v1.0.0"
VOICE_DOWNLOAD_TIMEOUT = 180                 # seconds per model file request
PIPER_TIMEOUT = 120                          # seconds before a piper run is abandoned
EDGE_VOICE = "en-US-GuyNeural"               # voice used by the edge-tts engine
TTS_RATE = "+0%"                             # edge-tts relative speech rate
TTS_RETRY_COUNT = 3                          # max retries per edge-tts request
TTS_RETRY_BASE_DELAY = 1.0                   # seconds, base delay for exponential backoff
SAMPLE_RATE = 22050                          # Hz, mono
OUTPUT_BITRATE = "128k"                      # MP3 output bitrate
OUTPUT_FORMAT = "mp3"
STRETCH_MIN = 0.5                            # slowest tempo factor applied to a clip
STRETCH_MAX = 2.0                            # fastest tempo factor applied to a clip
GAP_EPSILON = 0.1                            # seconds; shorter gaps get no silence segment
WORKERS = 1                                  # per-cue render threads
SUBTITLE_EXTENSION = ".srt"
INPUT_DIR = "."
OUTPUT_DIR = "converted_audio"
TEMP_PREFIX = "srt2mp3_"
PROGRESS_PREVIEW_CHARS = 50                  # chars of cue text shown in progress lines
VERSION = "0.1.0"
