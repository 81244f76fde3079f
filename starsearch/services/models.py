from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class TrackMinimal:
    """The fields the track list screen needs."""

    id: str
    name: str
    album: Optional[str] = None
    artwork: Optional[str] = None
    genre: Optional[str] = None
    price: Optional[float] = None


@dataclass
class Track:
    id: str
    name: str
    album: Optional[str] = None
    artwork: Optional[str] = None
    genre: Optional[str] = None
    price: Optional[float] = None
    artist: Optional[str] = None
    description: Optional[str] = None
    preview_url: Optional[str] = None
    release_date: Optional[str] = None
    currency: Optional[str] = None
    kind: Optional[str] = None

    def to_minimal(self) -> TrackMinimal:
        return TrackMinimal(
            id=self.id,
            name=self.name,
            album=self.album,
            artwork=self.artwork,
            genre=self.genre,
            price=self.price,
        )

    @property
    def display_price(self) -> str:
        if self.price is None:
            return "N/A"
        if self.price == 0:
            return "Free"
        return f"{self.price:.2f} {self.currency or ''}".rstrip()


@dataclass
class ITunesResponse:
    result_count: int
    tracks: list[Track] = field(default_factory=list)


def unique_tracks(tracks: list[Track]) -> list[Track]:
    """Drop repeated ids; the first occurrence wins and order is kept."""
    seen: set[str] = set()
    unique = []
    for track in tracks:
        if track.id not in seen:
            seen.add(track.id)
            unique.append(track)
    return unique


def lighten_tracks(tracks: list[Track]) -> list[TrackMinimal]:
    """
    Project full tracks to their minimal view, keeping order.
    Repeated ids are dropped the same way the cache drops them, so every
    projected entry can be read back from the cache.
    """
    return [track.to_minimal() for track in unique_tracks(tracks)]
