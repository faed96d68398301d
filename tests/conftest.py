import os
import stat
import tempfile

import httpx
import pytest

os.environ.setdefault("LOG_LEVEL", "DEBUG")

from app.core import config  # noqa: E402
from app.services import video_fetcher  # noqa: E402

VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"fake-video-payload" * 64


@pytest.fixture
def temp_dir(tmp_path, monkeypatch):
    """Route tempfile.mkstemp into an isolated directory so leaks are visible."""
    path = tmp_path / "scratch"
    path.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(path))
    return path


@pytest.fixture
def fake_ffmpeg(tmp_path, monkeypatch):
    """Write an executable shell script that stands in for ffmpeg.

    Arguments follow build_ffmpeg_command, so the input source is "$8".
    """
    def factory(body: str, name: str = "ffmpeg") -> str:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        monkeypatch.setattr(config, "FFMPEG_PATH", str(path))
        return str(path)

    return factory


@pytest.fixture
def mock_http(monkeypatch):
    """Serve fetches from a handler instead of the network; records requests."""
    requests = []

    def install(handler):
        def recording_handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        monkeypatch.setattr(
            video_fetcher, "_create_transport", lambda: httpx.MockTransport(recording_handler)
        )
        return requests

    return install


def serve_bytes(content: bytes = VIDEO_BYTES, status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, content=content, headers={"content-type": "video/mp4"})

    return handler
