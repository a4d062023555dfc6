"""Local web player: HTTP routes over a single SessionController.

One lock serialises every session operation, so position samples and edits
are applied strictly in arrival order. The transcription call is the one
long operation and runs outside the lock; meanwhile /api/state keeps
reporting the processing phase.
"""

from __future__ import annotations

import functools
import http.server
import json
import mimetypes
import threading
import urllib.parse
from pathlib import Path

from reelsub.core.config import ReelsubConfig
from reelsub.core.errors import (
    InvalidTransition,
    LocalReadFailure,
    TranscriptionFailure,
    UnknownCaption,
)
from reelsub.core.media import is_acceptable, normalize_mime_type, receive_upload
from reelsub.core.models import Phase
from reelsub.core.session import SessionController
from reelsub.player.page import PLAYER_HTML
from reelsub.subtitles.converter import FORMATS, captions_to_string
from reelsub.subtitles.hints import length_hint
from reelsub.utils.timefmt import format_short_time

_EXPORT_MIME = {
    "vtt": "text/vtt",
    "srt": "application/x-subrip",
    "ass": "text/x-ssa",
    "txt": "text/plain",
}


class ApiError(Exception):
    """An HTTP error response with a JSON body."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class PlayerApp:
    """Request-level operations of the player, independent of the HTTP plumbing."""

    def __init__(self, controller: SessionController, config: ReelsubConfig) -> None:
        self.controller = controller
        self.config = config
        self.lock = threading.Lock()

    def state(self) -> dict:
        with self.lock:
            data = self.controller.snapshot()
        for caption in data["captions"]:
            caption["range"] = (
                f"{format_short_time(caption['start'])} – {format_short_time(caption['end'])}"
            )
            caption["chars"] = len(caption["text"])
            caption["hint"] = length_hint(caption["text"])
        data["clock"] = format_short_time(data["position"])
        data["notice_duration"] = self.config.notifier.duration
        return data

    def upload(self, stream, length: int, mime_type: str, source: str, name: str) -> dict:
        """Accept an uploaded video and run it through transcription."""
        mime_type = normalize_mime_type(mime_type)
        if not is_acceptable(mime_type, source):
            raise ApiError(415, f"Not an accepted video type: {mime_type or 'unknown'}")
        max_mb = self.config.transcription.max_file_mb
        if length > max_mb * 1024 * 1024:
            raise ApiError(413, f"Video exceeds the {max_mb} MB upload limit")
        with self.lock:
            if self.controller.phase is not Phase.IDLE:
                raise ApiError(409, "Reset the current session before uploading a new video")

        try:
            media = receive_upload(stream, length, mime_type, self.config.media_dir, name=name)
        except LocalReadFailure as e:
            raise ApiError(400, str(e)) from e

        with self.lock:
            try:
                payload = self.controller.begin(media)
            except InvalidTransition as e:
                media.path.unlink(missing_ok=True)
                raise ApiError(409, str(e)) from e

        if payload is not None:
            try:
                cues = self.controller.transcribe(payload, media.mime_type)
            except TranscriptionFailure as e:
                with self.lock:
                    self.controller.fail(e)
            else:
                with self.lock:
                    self.controller.complete(cues)
        return self.state()

    def position(self, body: dict) -> dict:
        position = _number(body, "position")
        with self.lock:
            scroll = self.controller.update_position(position)
            active = self.controller.session.active_caption_id
        return {
            "active_caption_id": active,
            "scroll": scroll,
            "clock": format_short_time(position),
        }

    def seek(self, body: dict) -> dict:
        caption_id = _string(body, "id")
        with self.lock:
            position = self.controller.seek(caption_id)
        return {"position": position, "playing": True}

    def edit(self, caption_id: str, body: dict) -> dict:
        text = _string(body, "text")
        with self.lock:
            caption = self.controller.commit_edit(caption_id, text)
        data = caption.to_dict()
        data["chars"] = len(caption.text)
        data["hint"] = length_hint(caption.text)
        return data

    def copy(self, body: dict) -> dict:
        text = _string(body, "text")
        notice = self.controller.copy(text)
        return {"notice": notice.message, "duration": self.config.notifier.duration}

    def reset(self) -> dict:
        with self.lock:
            self.controller.reset()
        return self.state()

    def media_path(self, name: str) -> Path | None:
        with self.lock:
            media = self.controller.session.media
        if media is None or media.released or media.path.name != name:
            return None
        return media.path

    def export(self, fmt: str) -> str:
        with self.lock:
            captions = list(self.controller.session.captions)
        return captions_to_string(captions, fmt)

    def close(self) -> None:
        """Release the live session's media on shutdown."""
        with self.lock:
            media = self.controller.session.media
            if media is not None:
                media.release()


def _number(body: dict, key: str) -> float:
    value = body.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ApiError(400, f"'{key}' must be a number")
    return float(value)


def _string(body: dict, key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str):
        raise ApiError(400, f"'{key}' must be a string")
    return value


class PlayerHandler(http.server.BaseHTTPRequestHandler):
    """Serve the player page, its JSON API and the session's media."""

    def __init__(self, *args, app: PlayerApp, **kwargs):
        self.app = app
        super().__init__(*args, **kwargs)

    def do_GET(self) -> None:
        path = urllib.parse.urlparse(self.path).path

        if path in ("/", "/index.html"):
            self._send(200, PLAYER_HTML.encode("utf-8"), "text/html; charset=utf-8")
        elif path == "/api/state":
            self._send_json(200, self.app.state())
        elif path.startswith("/media/"):
            self._serve_media(Path(path).name)
        elif path.startswith("/captions."):
            fmt = path.rsplit(".", 1)[-1]
            if fmt not in FORMATS:
                self.send_error(404)
                return
            content = self.app.export(fmt).encode("utf-8")
            self._send(200, content, f"{_EXPORT_MIME[fmt]}; charset=utf-8")
        else:
            self.send_error(404)

    def do_POST(self) -> None:
        path = urllib.parse.urlparse(self.path).path
        try:
            if path == "/api/upload":
                result = self._upload()
            elif path == "/api/position":
                result = self.app.position(self._read_json())
            elif path == "/api/seek":
                result = self.app.seek(self._read_json())
            elif path == "/api/copy":
                result = self.app.copy(self._read_json())
            elif path == "/api/reset":
                result = self.app.reset()
            elif path.startswith("/api/captions/"):
                caption_id = urllib.parse.unquote(path[len("/api/captions/") :])
                result = self.app.edit(caption_id, self._read_json())
            else:
                raise ApiError(404, "Not found")
        except ApiError as e:
            self._send_json(e.status, {"error": e.message})
        except InvalidTransition as e:
            self._send_json(409, {"error": str(e)})
        except UnknownCaption as e:
            self._send_json(404, {"error": f"Unknown caption: {e.args[0]}"})
        else:
            self._send_json(200, result)

    def _upload(self) -> dict:
        length = self._content_length()
        if length <= 0:
            raise ApiError(411, "Upload needs a Content-Length")
        mime_type = self.headers.get("Content-Type", "")
        source = self.headers.get("X-Source", "picker")
        name = urllib.parse.unquote(self.headers.get("X-Filename", ""))
        try:
            return self.app.upload(self.rfile, length, mime_type, source, name)
        except ApiError:
            # The body may be unread; don't reuse the connection
            self.close_connection = True
            raise

    def _content_length(self) -> int:
        try:
            return int(self.headers.get("Content-Length", "0"))
        except ValueError:
            raise ApiError(400, "Invalid Content-Length")

    def _read_json(self) -> dict:
        length = self._content_length()
        raw = self.rfile.read(length) if length > 0 else b""
        try:
            body = json.loads(raw or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ApiError(400, "Body must be JSON")
        if not isinstance(body, dict):
            raise ApiError(400, "Body must be a JSON object")
        return body

    def _send(self, status: int, content: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(content)))
        self.send_header("Cache-Control", "no-store")
        self.end_headers()
        self.wfile.write(content)

    def _send_json(self, status: int, data: dict) -> None:
        content = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._send(status, content, "application/json; charset=utf-8")

    def _serve_media(self, name: str) -> None:
        file_path = self.app.media_path(name)
        if file_path is None or not file_path.is_file():
            self.send_error(404)
            return

        content_type, _ = mimetypes.guess_type(file_path.name)
        if content_type is None:
            content_type = "application/octet-stream"
        file_size = file_path.stat().st_size

        # Support Range requests for video seeking
        range_header = self.headers.get("Range")
        if range_header:
            self._serve_range(file_path, file_size, content_type, range_header)
            return

        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(file_size))
        self.send_header("Accept-Ranges", "bytes")
        self.end_headers()
        with open(file_path, "rb") as f:
            while chunk := f.read(1 << 20):  # 1 MB chunks
                self.wfile.write(chunk)

    def _serve_range(
        self, file_path: Path, file_size: int, content_type: str, range_header: str
    ) -> None:
        """Handle HTTP Range requests for video seeking."""
        try:
            range_spec = range_header.replace("bytes=", "")
            start_str, end_str = range_spec.split("-", 1)
            if start_str:
                start = int(start_str)
                end = int(end_str) if end_str else file_size - 1
            else:
                # Suffix range: last N bytes
                start = max(file_size - int(end_str), 0)
                end = file_size - 1
            end = min(end, file_size - 1)
            if start < 0 or end < 0 or start > end or start >= file_size:
                self.send_error(416)
                return
            length = end - start + 1

            self.send_response(206)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(length))
            self.send_header("Content-Range", f"bytes {start}-{end}/{file_size}")
            self.send_header("Accept-Ranges", "bytes")
            self.end_headers()

            with open(file_path, "rb") as f:
                f.seek(start)
                remaining = length
                while remaining > 0:
                    chunk = f.read(min(remaining, 1 << 20))
                    if not chunk:
                        break
                    self.wfile.write(chunk)
                    remaining -= len(chunk)
        except (ValueError, IndexError):
            self.send_error(416)

    def log_message(self, format, *args):
        """Suppress default access logs."""
        pass


def create_server(
    config: ReelsubConfig,
    app: PlayerApp | None = None,
) -> http.server.ThreadingHTTPServer:
    """Bind the player server on the configured host and port."""
    app = app or PlayerApp(SessionController(config), config)
    handler_class = functools.partial(PlayerHandler, app=app)
    server = http.server.ThreadingHTTPServer((config.server.host, config.server.port), handler_class)
    server.daemon_threads = True
    return server
