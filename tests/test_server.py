"""Tests for the player HTTP server, run against a real socket."""

from __future__ import annotations

import json
import threading
import urllib.error
import urllib.request

import pytest

from reelsub.core.config import ReelsubConfig, ServerConfig, TranscriptionConfig
from reelsub.core.errors import TranscriptionFailure
from reelsub.core.models import Cue
from reelsub.player.server import PlayerApp, create_server

from .conftest import VIDEO_BYTES

CUES = [Cue(0.0, 2.0, "Привет всем"), Cue(1.0, 3.0, "Bonjour tout le monde")]


@pytest.fixture
def start_player(tmp_path, make_controller):
    """Start a server on a free port; returns (base_url, app)."""
    running = []

    def start(cues=CUES, error=None, max_file_mb=20):
        config = ReelsubConfig(
            workspace_dir=tmp_path / "workspace",
            server=ServerConfig(port=0),
            transcription=TranscriptionConfig(max_file_mb=max_file_mb),
        )
        app = PlayerApp(make_controller(cues, error=error), config)
        server = create_server(config, app)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        running.append((server, app))
        return f"http://127.0.0.1:{server.server_address[1]}", app

    yield start
    for server, app in running:
        server.shutdown()
        server.server_close()
        app.close()


@pytest.fixture
def player(start_player):
    return start_player()


def request(method: str, url: str, data: bytes | None = None, headers: dict | None = None):
    """Return (status, headers, body) without raising on HTTP errors."""
    req = urllib.request.Request(url, data=data, method=method, headers=headers or {})
    try:
        with urllib.request.urlopen(req, timeout=5) as resp:
            return resp.status, resp.headers, resp.read()
    except urllib.error.HTTPError as e:
        return e.code, e.headers, e.read()


def post_json(url: str, body: dict):
    status, _, raw = request(
        "POST", url, json.dumps(body).encode("utf-8"), {"Content-Type": "application/json"}
    )
    return status, json.loads(raw)


def upload(base: str, mime: str = "video/mp4", source: str = "picker"):
    status, _, raw = request(
        "POST",
        f"{base}/api/upload",
        VIDEO_BYTES,
        {"Content-Type": mime, "X-Source": source, "X-Filename": "clip.mp4"},
    )
    return status, json.loads(raw)


def test_index_served(player):
    base, _ = player
    status, headers, body = request("GET", f"{base}/")
    assert status == 200
    assert headers["Content-Type"].startswith("text/html")
    assert b'accept="video/mp4,video/quicktime"' in body


def test_initial_state_idle(player):
    base, _ = player
    status, _, raw = request("GET", f"{base}/api/state")
    state = json.loads(raw)
    assert status == 200
    assert state["phase"] == "idle"
    assert state["captions"] == []
    assert state["notice_duration"] == 2.0


def test_upload_reaches_ready(player):
    base, app = player
    status, state = upload(base)

    assert status == 200
    assert state["phase"] == "ready"
    assert [c["text"] for c in state["captions"]] == ["Привет всем", "Bonjour tout le monde"]
    assert state["captions"][0]["range"] == "0:00.0 – 0:02.0"
    assert state["media_url"].startswith("/media/")
    assert app.controller.transcriber_calls[0][1] == "video/mp4"


def test_media_served_with_ranges(player):
    base, _ = player
    _, state = upload(base)
    url = base + state["media_url"]

    status, headers, body = request("GET", url)
    assert status == 200
    assert body == VIDEO_BYTES
    assert headers["Accept-Ranges"] == "bytes"

    status, headers, body = request("GET", url, headers={"Range": "bytes=4-7"})
    assert status == 206
    assert body == VIDEO_BYTES[4:8]
    assert headers["Content-Range"] == f"bytes 4-7/{len(VIDEO_BYTES)}"

    status, _, body = request("GET", url, headers={"Range": "bytes=-4"})
    assert status == 206
    assert body == VIDEO_BYTES[-4:]


def test_unknown_media_404(player):
    base, _ = player
    upload(base)
    status, _, _ = request("GET", f"{base}/media/other.mp4")
    assert status == 404


def test_picker_rejects_webm(player):
    base, app = player
    status, body = upload(base, mime="video/webm", source="picker")
    assert status == 415
    assert "error" in body
    assert app.controller.phase.value == "idle"


def test_drop_accepts_webm(player):
    base, _ = player
    status, state = upload(base, mime="video/webm", source="drop")
    assert status == 200
    assert state["phase"] == "ready"


def test_second_upload_conflicts_until_reset(player):
    base, _ = player
    upload(base)
    status, _ = upload(base)
    assert status == 409

    status, state = post_json(f"{base}/api/reset", {})
    assert status == 200
    assert state["phase"] == "idle"

    status, state = upload(base)
    assert status == 200


def test_position_scrolls_only_on_change(player):
    base, _ = player
    _, state = upload(base)
    first_id = state["captions"][0]["id"]

    status, body = post_json(f"{base}/api/position", {"position": 1.5})
    assert status == 200
    assert body["active_caption_id"] == first_id
    assert body["scroll"] is True
    assert body["clock"] == "0:01.5"

    _, body = post_json(f"{base}/api/position", {"position": 1.8})
    assert body["scroll"] is False


def test_position_needs_number(player):
    base, _ = player
    upload(base)
    status, body = post_json(f"{base}/api/position", {"position": "soon"})
    assert status == 400


def test_position_before_ready_conflicts(player):
    base, _ = player
    status, _ = post_json(f"{base}/api/position", {"position": 1.0})
    assert status == 409


def test_seek(player):
    base, _ = player
    _, state = upload(base)
    second_id = state["captions"][1]["id"]

    status, body = post_json(f"{base}/api/seek", {"id": second_id})
    assert status == 200
    assert body == {"position": 1.0, "playing": True}

    status, _ = post_json(f"{base}/api/seek", {"id": "missing"})
    assert status == 404


def test_edit_and_export(player):
    base, _ = player
    _, state = upload(base)
    caption_id = state["captions"][0]["id"]

    status, body = post_json(f"{base}/api/captions/{caption_id}", {"text": "Всем привет"})
    assert status == 200
    assert body["text"] == "Всем привет"
    assert body["hint"] == "warn"

    status, headers, raw = request("GET", f"{base}/captions.vtt")
    assert status == 200
    assert headers["Content-Type"].startswith("text/vtt")
    assert "Всем привет" in raw.decode("utf-8")


def test_edit_unknown_caption(player):
    base, _ = player
    upload(base)
    status, _ = post_json(f"{base}/api/captions/nope", {"text": "x"})
    assert status == 404


def test_copy_sets_notice(player):
    base, _ = player
    status, body = post_json(f"{base}/api/copy", {"text": "Привет всем"})
    assert status == 200
    assert body == {"notice": "Copied!", "duration": 2.0}

    _, _, raw = request("GET", f"{base}/api/state")
    assert json.loads(raw)["notice"] == "Copied!"


def test_reset_deletes_uploaded_media(player):
    base, app = player
    upload(base)
    stored = app.controller.session.media.path
    assert stored.exists()

    post_json(f"{base}/api/reset", {})
    assert not stored.exists()


def test_bad_json_body(player):
    base, _ = player
    status, _, _ = request(
        "POST", f"{base}/api/copy", b"{not json", {"Content-Type": "application/json"}
    )
    assert status == 400


def test_unknown_routes(player):
    base, _ = player
    assert request("GET", f"{base}/nowhere")[0] == 404
    assert request("GET", f"{base}/captions.docx")[0] == 404
    assert post_json(f"{base}/api/nowhere", {})[0] == 404


def test_failed_transcription_reports_error_phase(start_player):
    base, _ = start_player(error=RuntimeError("quota exceeded"))
    status, state = upload(base)

    assert status == 200
    assert state["phase"] == "error"
    assert state["error"] == TranscriptionFailure.user_message
    assert state["captions"] == []


def test_oversize_upload_rejected_before_storing(start_player, tmp_path):
    base, app = start_player(max_file_mb=0)
    status, body = upload(base)

    assert status == 413
    assert "MB" in body["error"]
    assert app.controller.phase.value == "idle"
    assert app.controller.transcriber_calls == []
    media_dir = tmp_path / "workspace" / ".media"
    assert not media_dir.exists() or list(media_dir.iterdir()) == []


def test_mime_parameters_stripped(player):
    base, app = player
    status, _ = upload(base, mime="video/mp4; codecs=avc1")
    assert status == 200
    assert app.controller.transcriber_calls[0][1] == "video/mp4"


def test_page_ignores_stale_polls(player):
    base, _ = player
    _, _, body = request("GET", f"{base}/")
    assert b"seq !== refreshSeq" in body
