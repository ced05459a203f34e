"""External tool presence checks."""

import shutil

from srt_narrator.errors import DependencyError

INSTALL_HINTS = {
    "ffmpeg": "sudo apt install -y ffmpeg  (macOS: brew install ffmpeg)",
    "ffprobe": "ships with ffmpeg",
    "piper": "pip install piper-tts, or a release from https://github.com/rhasspy/piper/releases",
}


def required_tools(engine: str) -> list[str]:
    """Tools a run needs: ffmpeg always, piper only for the Piper engine."""
    tools = ["ffmpeg", "ffprobe"]
    if engine == "piper":
        tools.append("piper")
    return tools


def missing_tools(tools: list[str]) -> list[str]:
    return [tool for tool in tools if shutil.which(tool) is None]


def check_dependencies(engine: str) -> None:
    """Raise DependencyError naming every missing tool and how to install it."""
    missing = missing_tools(required_tools(engine))
    if missing:
        hints = "; ".join(f"{tool}: {INSTALL_HINTS.get(tool, 'install it')}" for tool in missing)
        raise DependencyError(f"Missing dependencies: {', '.join(missing)}. Install with: {hints}")
