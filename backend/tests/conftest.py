"""Shared fixtures: an isolated app per test backed by a temporary SQLite file."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from travel_story.core.config import Settings
from travel_story.main import create_app

VISITED_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "access_token_secret": "test-secret",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        "upload_dir": str(tmp_path / "uploads"),
        "password_hash_time_cost": 1,
        "password_hash_memory_cost": 1024,
        "request_timeout_seconds": 10,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI):
    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client: TestClient) -> Callable[..., dict]:
    """Create an account and return the response body."""

    def _signup(full_name: str = "Ana", email: str = "ana@x.com", password: str = "pw123") -> dict:
        res = client.post("/create-account", json={"fullName": full_name, "email": email, "password": password})
        assert res.status_code == 201, res.text
        return res.json()

    return _signup


@pytest.fixture
def add_story(client: TestClient) -> Callable[..., dict]:
    """Create a story for the token's owner and return it."""

    def _add_story(token: str, **overrides: Any) -> dict:
        payload = {
            "title": "Lisbon in spring",
            "story": "Trams, tiles and pastel de nata.",
            "visitedLocation": ["Lisbon", "Sintra"],
            "imageUrl": "http://localhost:8000/uploads/lisbon.png",
            "visitedDate": VISITED_MS,
        }
        payload.update(overrides)
        res = client.post("/add-travel-story", json=payload, headers=bearer(token))
        assert res.status_code == 201, res.text
        return res.json()["story"]

    return _add_story
