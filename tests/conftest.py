"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from reelsub.core.config import ReelsubConfig
from reelsub.core.models import Caption, Cue, Phase, Session
from reelsub.core.session import SessionController

VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42fake-video-payload"


class FakeHandle:
    def __init__(self, delay: float, callback) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Records delayed callbacks instead of running them on a timer."""

    def __init__(self) -> None:
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback) -> FakeHandle:
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle

    def fire_pending(self) -> None:
        for handle in list(self.handles):
            if not handle.cancelled:
                handle.callback()


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_captions(ranges: list[tuple[float, float, str]]) -> list[Caption]:
    return [
        Caption(id=f"c{i}", start=start, end=end, text=text)
        for i, (start, end, text) in enumerate(ranges)
    ]


def ready_session(ranges: list[tuple[float, float, str]]) -> Session:
    return Session(phase=Phase.READY, captions=make_captions(ranges))


@pytest.fixture
def config(tmp_path: Path) -> ReelsubConfig:
    return ReelsubConfig(workspace_dir=tmp_path / "workspace")


@pytest.fixture
def video_file(tmp_path: Path) -> Path:
    path = tmp_path / "clip.mp4"
    path.write_bytes(VIDEO_BYTES)
    return path


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_controller(config, scheduler, clock):
    """Build a controller whose transcriber returns the given cues or raises."""

    def factory(cues: list[Cue] | None = None, error: Exception | None = None, **kwargs):
        calls: list[tuple[str, str]] = []

        def transcriber(payload: str, mime_type: str) -> list[Cue]:
            calls.append((payload, mime_type))
            if error is not None:
                raise error
            return list(cues or [])

        controller = SessionController(
            config,
            transcriber=transcriber,
            scheduler=scheduler,
            clock=clock,
            **kwargs,
        )
        controller.transcriber_calls = calls
        return controller

    return factory
