"""Shared pytest fixtures for the Gemina client test suite."""

from __future__ import annotations

import json
import os
import uuid
from io import BytesIO
from pathlib import Path
from typing import Callable

import httpx
import pytest
from PIL import Image

# Set test environment before importing the package
os.environ["GEMINA_API_KEY"] = "test-key"
os.environ["GEMINA_CLIENT_ID"] = "123"
os.environ["GEMINA_API_URL"] = "https://api.test/v1"
os.environ["GEMINA_LOG_DIR"] = ""
os.environ["GEMINA_DEBUG"] = "false"

from gemina.core.config import Settings, get_settings  # noqa: E402
from gemina.services.gemina_client import GeminaClient  # noqa: E402


@pytest.fixture
def settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def test_image_bytes() -> bytes:
    """Create a simple test PNG image."""
    img = Image.new("RGB", (200, 100), color="white")
    buf = BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf.read()


@pytest.fixture
def test_image_file(tmp_path: Path, test_image_bytes: bytes) -> Path:
    """Save a test image to disk."""
    path = tmp_path / "invoice.png"
    path.write_bytes(test_image_bytes)
    return path


class FakeGemina:
    """Scripted Gemina API: one upload answer and a queue of status answers."""

    def __init__(
        self,
        upload: tuple[int, object] = (201, {"external_id": "ignored"}),
        statuses: list[tuple[int, object]] | None = None,
    ) -> None:
        self.upload = upload
        self.statuses = list(statuses or [(200, {"status": "done"})])
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            code, body = self.upload
        else:
            code, body = self.statuses.pop(0)
        if isinstance(body, str):
            return httpx.Response(code, text=body)
        return httpx.Response(code, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def posted_json(self) -> dict:
        return json.loads(self.requests[0].content)


@pytest.fixture
def make_client(settings: Settings) -> Callable[[FakeGemina], GeminaClient]:
    """Open a GeminaClient wired to a FakeGemina; closed at teardown."""
    clients: list[GeminaClient] = []

    def _make(fake: FakeGemina) -> GeminaClient:
        client = GeminaClient(settings, transport=fake.transport)
        client.open()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


def is_uuid4(value: str) -> bool:
    """True when ``value`` is a canonical, lowercase, hyphenated version 4 UUID."""
    try:
        parsed = uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return str(parsed) == value and parsed.version == 4 and parsed.variant == uuid.RFC_4122
