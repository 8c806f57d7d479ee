"""Root conftest: temporary data files and an httpx client per app.

Invariants:
    - Every test gets its own data file under tmp_path
    - Apps are built with explicit Settings (never from the environment)
    - The client talks to the app in-process via ASGITransport (no socket)
"""

import json

import pytest
from httpx import ASGITransport, AsyncClient

from mockapi.config import Settings
from mockapi.main import create_app

SAMPLE_DATA = {
    "users": [
        {"id": 1, "name": "Alice", "role": "admin", "age": 30},
        {"id": 2, "name": "Bob", "role": "user", "age": 25},
        {"id": 3, "name": "Carol", "role": "user", "age": 35},
    ],
    "posts": [
        {"id": 1, "title": "Hello", "userId": 1},
    ],
}


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(json.dumps(SAMPLE_DATA), encoding="utf-8")
    return path


@pytest.fixture
def read_data(data_file):
    """Parse the backing file as it is on disk right now."""
    def _read():
        return json.loads(data_file.read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def make_app(data_file):
    """Build an app for data_file with Settings overrides."""
    def _make(**overrides):
        return create_app(Settings(data_file=data_file, **overrides))
    return _make


def client_for(app) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    )


@pytest.fixture
async def client(make_app):
    """Client for the default configuration."""
    async with client_for(make_app()) as c:
        yield c


@pytest.fixture
def make_client(make_app):
    """Client factory: make_client(readonly=True), or make_client(app=existing)."""
    def _make(app=None, **overrides):
        return client_for(app if app is not None else make_app(**overrides))
    return _make
