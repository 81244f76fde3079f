"""
Shared fixtures and fakes.
Run with: pytest tests/
"""
from pathlib import Path
from typing import Optional

import pytest

from starsearch.services.models import Track
from starsearch.services.store import TrackStore


class FakeConnectionChecker:
    def __init__(self, online: bool):
        self.online = online

    def is_online(self) -> bool:
        return self.online


class FakeITunesService:
    """Returns `tracks` or raises `error`; counts calls."""

    def __init__(self, tracks: Optional[list[Track]] = None, error: Optional[Exception] = None):
        self.tracks = tracks or []
        self.error = error
        self.calls = 0

    async def fetch_tracks(self) -> list[Track]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.tracks)


def make_track(track_id: str, name: str = "Track", **fields) -> Track:
    defaults = {
        "album": "Album",
        "artwork": f"https://example.com/{track_id}.jpg",
        "genre": "Drama",
        "price": 9.99,
        "artist": "Someone",
        "currency": "AUD",
    }
    defaults.update(fields)
    return Track(id=track_id, name=name, **defaults)


@pytest.fixture
def store(tmp_path: Path):
    track_store = TrackStore(tmp_path / "tracks.db")
    try:
        yield track_store
    finally:
        track_store.close()
