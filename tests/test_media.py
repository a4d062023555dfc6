"""Tests for media acquisition and handles."""

import base64
import io
from pathlib import Path

import pytest

from reelsub.core.errors import LocalReadFailure, TranscriptionFailure
from reelsub.core.media import (
    create_handle,
    encode_media,
    guess_mime_type,
    is_acceptable,
    local_file,
    normalize_mime_type,
    read_media_bytes,
    receive_upload,
)
from reelsub.core.models import MediaFile

from .conftest import VIDEO_BYTES


class TestAcceptance:
    @pytest.mark.parametrize("mime", ["video/mp4", "video/quicktime"])
    def test_picker_accepts_mp4_and_mov(self, mime):
        assert is_acceptable(mime, "picker")

    def test_picker_rejects_other_video(self):
        assert not is_acceptable("video/webm", "picker")

    def test_drop_accepts_any_video(self):
        assert is_acceptable("video/webm", "drop")
        assert is_acceptable("video/x-matroska; codecs=avc1", "drop")

    def test_drop_ignores_non_video(self):
        assert not is_acceptable("image/png", "drop")
        assert not is_acceptable("", "drop")


@pytest.mark.parametrize(
    "name, expected",
    [("a.mp4", "video/mp4"), ("b.MOV", "video/quicktime"), ("c.webm", "video/webm")],
)
def test_guess_mime_type(name, expected):
    assert guess_mime_type(Path(name)) == expected


class TestReceiveUpload:
    def test_stores_owned_file(self, tmp_path):
        media = receive_upload(
            io.BytesIO(VIDEO_BYTES), len(VIDEO_BYTES), "video/mp4", tmp_path / "media", name="clip.mp4"
        )
        assert media.owned
        assert media.name == "clip.mp4"
        assert media.path.suffix == ".mp4"
        assert media.path.read_bytes() == VIDEO_BYTES

    def test_truncated_body(self, tmp_path):
        media_dir = tmp_path / "media"
        with pytest.raises(LocalReadFailure):
            receive_upload(io.BytesIO(b"short"), 1000, "video/mp4", media_dir)
        assert list(media_dir.iterdir()) == []


class TestHandles:
    def test_local_file_uses_file_uri(self, video_file):
        handle = create_handle(local_file(video_file))
        assert handle.url == video_file.resolve().as_uri()
        assert not handle.owned

    def test_owned_file_served_under_media(self, video_file):
        handle = create_handle(MediaFile(path=video_file, mime_type="video/mp4", owned=True))
        assert handle.url == f"/media/{video_file.name}"

    def test_release_deletes_owned_file_once(self, video_file):
        handle = create_handle(MediaFile(path=video_file, mime_type="video/mp4", owned=True))
        handle.release()
        handle.release()
        assert handle.released
        assert not video_file.exists()

    def test_release_keeps_user_file(self, video_file):
        handle = create_handle(local_file(video_file))
        handle.release()
        assert handle.released
        assert video_file.exists()


def test_read_and_encode(video_file):
    data = read_media_bytes(local_file(video_file))
    assert base64.b64decode(encode_media(data)) == VIDEO_BYTES


def test_read_missing_file(tmp_path):
    with pytest.raises(LocalReadFailure):
        read_media_bytes(local_file(tmp_path / "gone.mp4"))


def test_read_refuses_oversize_file(video_file):
    with pytest.raises(TranscriptionFailure, match="MB inline limit"):
        read_media_bytes(local_file(video_file), max_bytes=len(VIDEO_BYTES) - 1)
    assert read_media_bytes(local_file(video_file), max_bytes=len(VIDEO_BYTES)) == VIDEO_BYTES


def test_upload_stores_normalized_mime(tmp_path):
    media = receive_upload(
        io.BytesIO(VIDEO_BYTES), len(VIDEO_BYTES), "Video/MP4; codecs=avc1", tmp_path / "media"
    )
    assert media.mime_type == "video/mp4"
    assert media.path.suffix == ".mp4"


@pytest.mark.parametrize(
    "raw, expected",
    [("video/mp4", "video/mp4"), ("Video/QuickTime ; charset=x", "video/quicktime"), ("", "")],
)
def test_normalize_mime_type(raw, expected):
    assert normalize_mime_type(raw) == expected
