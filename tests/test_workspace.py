"""Tests for workspace module."""

import os

import pytest

from srt_narrator.workspace import (
    Workspace,
    base_name,
    cleanup_all,
    discover_subtitles,
    init_output_dir,
    output_path_for,
)


def test_discover_recursive_and_sorted(tmp_path):
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "two.srt").write_text("")
    (tmp_path / "a.srt").write_text("")
    (tmp_path / "upper.SRT").write_text("")
    (tmp_path / "notes.txt").write_text("")

    found = discover_subtitles(str(tmp_path))
    assert found == sorted([
        str(tmp_path / "a.srt"),
        str(tmp_path / "b" / "two.srt"),
        str(tmp_path / "upper.SRT"),
    ])


def test_discover_empty(tmp_path):
    assert discover_subtitles(str(tmp_path)) == []


def test_base_name():
    assert base_name("/path/to/Lecture 01.srt") == "Lecture 01"


def test_output_path_for():
    assert output_path_for("/in/deep/lesson.srt", "/out") == os.path.join("/out", "lesson.mp3")


def test_init_output_dir(tmp_path):
    out = tmp_path / "converted_audio"
    init_output_dir(str(out))
    init_output_dir(str(out))
    assert out.is_dir()


def test_file_scope_removed_after_success(tmp_path):
    with Workspace(parent=str(tmp_path)) as ws:
        with ws.file_scope("/in/Lesson One.srt") as workdir:
            assert os.path.isdir(workdir)
            assert os.path.dirname(workdir) == ws.root
            open(os.path.join(workdir, "clip.wav"), "wb").close()
        assert not os.path.exists(workdir)


def test_file_scope_removed_after_failure(tmp_path):
    ws = Workspace(parent=str(tmp_path))
    with pytest.raises(RuntimeError):
        with ws.file_scope("broken.srt") as workdir:
            raise RuntimeError("conversion blew up")
    assert not os.path.exists(workdir)
    ws.cleanup()


def test_cleanup_removes_root(tmp_path):
    ws = Workspace(parent=str(tmp_path))
    root = ws.root
    assert os.path.isdir(root)
    ws.cleanup()
    assert not os.path.exists(root)
    ws.cleanup()


def test_cleanup_all(tmp_path):
    roots = [Workspace(parent=str(tmp_path)).root for _ in range(2)]
    cleanup_all()
    assert not any(os.path.exists(r) for r in roots)
