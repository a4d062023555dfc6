"""Tests for CLI utility functions — expand_inputs."""

from pathlib import Path

import pytest

from reelsub.cli.utils import expand_inputs, is_video_path


class TestExpandInputs:
    def test_txt_file_expansion(self, tmp_path):
        txt_file = tmp_path / "videos.txt"
        txt_file.write_text("/media/a.mp4\n# comment\n/media/b.mov\n\n")
        result = expand_inputs([str(txt_file)])
        assert result == ["/media/a.mp4", "/media/b.mov"]

    def test_txt_file_skips_blank_lines(self, tmp_path):
        txt_file = tmp_path / "list.txt"
        txt_file.write_text("\n\nhello.mp4\n\n")
        result = expand_inputs([str(txt_file)])
        assert result == ["hello.mp4"]

    def test_glob_expansion(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "a.mp4").touch()
        (tmp_path / "b.mp4").touch()
        (tmp_path / "c.mov").touch()
        result = expand_inputs(["*.mp4"])
        assert result == ["a.mp4", "b.mp4"]

    def test_regular_path_passthrough(self):
        result = expand_inputs(["/some/path/video.mp4"])
        assert result == ["/some/path/video.mp4"]

    def test_mixed_inputs(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "video.mp4").touch()
        txt_file = tmp_path / "list.txt"
        txt_file.write_text("/data/clip.mov\n")

        result = expand_inputs(["/data/x.mp4", str(txt_file), "*.mp4"])
        assert result == ["/data/x.mp4", "/data/clip.mov", "video.mp4"]

    def test_empty_input(self):
        assert expand_inputs([]) == []

    def test_nonexistent_glob_returns_literal(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        # No matching files — glob pattern with no matches returns the literal
        result = expand_inputs(["*.nonexistent"])
        assert result == ["*.nonexistent"]

    def test_glob_keeps_only_videos(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        for name in ("a.mp4", "b.mov", "a.vtt", "notes.md"):
            (tmp_path / name).touch()
        (tmp_path / "clips.mp4").mkdir()
        assert expand_inputs(["*"]) == ["a.mp4", "b.mov"]

    def test_duplicates_dropped(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "a.mp4").touch()
        assert expand_inputs(["a.mp4", "*.mp4"]) == ["a.mp4"]


@pytest.mark.parametrize(
    "name, expected",
    [("clip.MP4", True), ("clip.mov", True), ("clip.webm", True), ("clip.srt", False), ("x", False)],
)
def test_is_video_path(name, expected):
    assert is_video_path(Path(name)) is expected
