"""Input discovery, output paths, and the scratch area for intermediate audio."""

import atexit
import logging
import os
import re
import shutil
import signal
import tempfile
from contextlib import contextmanager

from srt_narrator.constants import OUTPUT_FORMAT, SUBTITLE_EXTENSION, TEMP_PREFIX

logger = logging.getLogger(__name__)

# Every live workspace, so abnormal exits can still clean up
_ACTIVE = set()


def discover_subtitles(root: str, extension: str = SUBTITLE_EXTENSION) -> list[str]:
    """Recursively find subtitle files under root.

    Matching is case-insensitive on the extension. Returns sorted paths.
    """
    extension = extension.lower()
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in filenames:
            if name.lower().endswith(extension):
                found.append(os.path.join(dirpath, name))
    return sorted(found)


def base_name(subtitle_path: str) -> str:
    """File name without extension: "/path/to/Lecture 01.srt" → "Lecture 01"."""
    return os.path.splitext(os.path.basename(subtitle_path))[0]


def output_path_for(subtitle_path: str, output_dir: str, extension: str = OUTPUT_FORMAT) -> str:
    return os.path.join(output_dir, f"{base_name(subtitle_path)}.{extension}")


def init_output_dir(output_dir: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    return output_dir


def _scope_name(label: str) -> str:
    # Keep scratch directory names filesystem-safe
    slug = re.sub(r"[^a-zA-Z0-9]+", "_", label).strip("_").lower()
    return slug or "file"


class Workspace:
    """Temporary working area for one run.

    Each input file gets its own scratch directory via file_scope(), which
    is removed when the file's conversion ends, successfully or not. The
    whole area is removed by cleanup(), at interpreter exit, or on SIGTERM.
    """

    def __init__(self, parent: str | None = None, prefix: str = TEMP_PREFIX):
        self.root = tempfile.mkdtemp(prefix=prefix, dir=parent)
        _ACTIVE.add(self)
        logger.debug("Created workspace %s", self.root)

    @contextmanager
    def file_scope(self, label: str):
        path = tempfile.mkdtemp(prefix=_scope_name(label) + "_", dir=self.root)
        try:
            yield path
        finally:
            shutil.rmtree(path, ignore_errors=True)

    def cleanup(self) -> None:
        if os.path.exists(self.root):
            shutil.rmtree(self.root, ignore_errors=True)
            logger.debug("Removed workspace %s", self.root)
        _ACTIVE.discard(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False


def cleanup_all() -> None:
    """Remove every workspace still alive."""
    for workspace in list(_ACTIVE):
        workspace.cleanup()


def _handle_sigterm(signum, frame):
    cleanup_all()
    raise SystemExit(128 + signum)


def install_cleanup_handlers() -> None:
    """Clean up on normal exit and on SIGTERM (Ctrl-C unwinds through atexit)."""
    atexit.register(cleanup_all)
    try:
        signal.signal(signal.SIGTERM, _handle_sigterm)
    except ValueError:
        # Not on the main thread; atexit still applies
        pass
