"""
Local track cache backed by SQLite through SQLAlchemy.

Holds the full records of the last successful search. Reads come in two
flavours: synchronous snapshots and LiveData holders that are refreshed after
every replace. Writes are replace-all only.
"""
from __future__ import annotations

import logging
import threading
import weakref
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy import Float, Integer, String, Text, create_engine, delete, func, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from starsearch.services.models import Track, TrackMinimal, unique_tracks
from starsearch.utils.live_data import LiveData, MutableLiveData

logger = logging.getLogger(__name__)


class StoreBase(DeclarativeBase):
    pass


class TrackRecord(StoreBase):
    """One cached track. `position` keeps the order of the search results."""

    __tablename__ = "tracks"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, index=True)
    name: Mapped[str] = mapped_column(Text)
    album: Mapped[str | None] = mapped_column(Text)
    artwork: Mapped[str | None] = mapped_column(Text)
    genre: Mapped[str | None] = mapped_column(String(128))
    price: Mapped[float | None] = mapped_column(Float)
    artist: Mapped[str | None] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(Text)
    preview_url: Mapped[str | None] = mapped_column(Text)
    release_date: Mapped[str | None] = mapped_column(String(32))
    currency: Mapped[str | None] = mapped_column(String(8))
    kind: Mapped[str | None] = mapped_column(String(64))

    def __repr__(self) -> str:
        return f"<TrackRecord(id='{self.id}', name='{self.name}')>"


_MINIMAL_COLUMNS = (
    TrackRecord.id,
    TrackRecord.name,
    TrackRecord.album,
    TrackRecord.artwork,
    TrackRecord.genre,
    TrackRecord.price,
)


class TrackStore:
    def __init__(self, db_path: Path):
        self._engine = create_engine(
            f"sqlite:///{db_path}",
            connect_args={
                "timeout": 30,
                "check_same_thread": False,
            },
        )
        StoreBase.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        self._live_lock = threading.Lock()
        self._live_queries: list[tuple[weakref.ref, Callable[[], object]]] = []

    # ── Synchronous reads ────────────────────────────────────────────────────

    def get_tracks_minimal(self) -> list[TrackMinimal]:
        stmt = select(*_MINIMAL_COLUMNS).order_by(TrackRecord.position)
        with self._session_factory() as session:
            return [TrackMinimal(**row._asdict()) for row in session.execute(stmt)]

    def get_track(self, track_id: str) -> Optional[Track]:
        with self._session_factory() as session:
            record = session.get(TrackRecord, track_id)
            return _to_track(record) if record else None

    def count(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count()).select_from(TrackRecord)) or 0

    # ── Observable reads ─────────────────────────────────────────────────────

    def observe_tracks_minimal(self) -> LiveData[list[TrackMinimal]]:
        return self._live_query(self.get_tracks_minimal)

    def observe_track(self, track_id: str) -> LiveData[Optional[Track]]:
        return self._live_query(lambda: self.get_track(track_id))

    # ── Writes ───────────────────────────────────────────────────────────────

    def replace_tracks(self, tracks: list[Track]) -> None:
        """Drop every cached track and store `tracks` in one transaction."""
        unique = unique_tracks(tracks)
        if len(unique) < len(tracks):
            logger.debug("Duplicate track ids ignored", extra={"duplicates": len(tracks) - len(unique)})
        records = [_to_record(track, position) for position, track in enumerate(unique)]

        with self._session_factory.begin() as session:
            session.execute(delete(TrackRecord))
            session.add_all(records)

        logger.info("Track cache replaced", extra={"tracks": len(records)})
        self._refresh_live_queries()

    def close(self) -> None:
        self._engine.dispose()

    def _live_query(self, loader: Callable[[], object]) -> LiveData:
        live: MutableLiveData = MutableLiveData()
        live.set_value(loader())
        with self._live_lock:
            self._prune_live_queries()
            self._live_queries.append((weakref.ref(live), loader))
        return live

    def _refresh_live_queries(self) -> None:
        with self._live_lock:
            self._prune_live_queries()
            queries = list(self._live_queries)
        for ref, loader in queries:
            live = ref()
            if live is not None:
                live.set_value(loader())

    def _prune_live_queries(self) -> None:
        # Caller holds _live_lock
        self._live_queries = [(ref, loader) for ref, loader in self._live_queries if ref() is not None]


def _to_record(track: Track, position: int) -> TrackRecord:
    return TrackRecord(
        id=track.id,
        position=position,
        name=track.name,
        album=track.album,
        artwork=track.artwork,
        genre=track.genre,
        price=track.price,
        artist=track.artist,
        description=track.description,
        preview_url=track.preview_url,
        release_date=track.release_date,
        currency=track.currency,
        kind=track.kind,
    )


def _to_track(record: TrackRecord) -> Track:
    return Track(
        id=record.id,
        name=record.name,
        album=record.album,
        artwork=record.artwork,
        genre=record.genre,
        price=record.price,
        artist=record.artist,
        description=record.description,
        preview_url=record.preview_url,
        release_date=record.release_date,
        currency=record.currency,
        kind=record.kind,
    )
