"""
iTunes Search API service.
- One GET /search per call, no retries.
- Results are parsed into Track records; entries without an id are dropped.
"""
import logging
from typing import Any, Callable, Optional

from aiohttp import ClientSession

from starsearch.config.settings import settings
from starsearch.services.models import ITunesResponse, Track
from starsearch.utils.http_client import build_session, fetch_json

logger = logging.getLogger(__name__)


class MalformedResponseError(ValueError):
    pass


class ITunesService:
    def __init__(
        self,
        session_factory: Callable[[], ClientSession] = build_session,
        search_url: str = settings.itunes_search_url,
    ):
        self._session_factory = session_factory
        self._search_url = search_url

    async def fetch_tracks(self) -> list[Track]:
        """A fresh session and request for every call."""
        async with self._session_factory() as session:
            data = await fetch_json(
                session,
                self._search_url,
                params={
                    "term": settings.ITUNES_SEARCH_TERM,
                    "country": settings.ITUNES_COUNTRY,
                    "media": settings.ITUNES_MEDIA,
                    "limit": settings.ITUNES_LIMIT,
                },
            )
        response = _parse_response(data)
        logger.info(
            "iTunes search complete",
            extra={"result_count": response.result_count, "tracks": len(response.tracks)},
        )
        return response.tracks


def _parse_response(data: Any) -> ITunesResponse:
    if not isinstance(data, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(data).__name__}")
    results = data.get("results")
    if not isinstance(results, list):
        raise MalformedResponseError("Response has no 'results' list")

    tracks = []
    for item in results:
        track = _parse_track(item) if isinstance(item, dict) else None
        if track is None:
            logger.debug("Skipping result without an id")
            continue
        tracks.append(track)

    return ITunesResponse(
        result_count=data.get("resultCount", len(results)),
        tracks=tracks,
    )


def _parse_track(item: dict) -> Optional[Track]:
    raw_id = _first(item, "trackId", "collectionId")
    if raw_id is None:
        return None

    return Track(
        id=str(raw_id),
        name=_first(item, "trackName", "collectionName") or "Unknown Title",
        album=item.get("collectionName"),
        artwork=_first(item, "artworkUrl100", "artworkUrl60", "artworkUrl30"),
        genre=item.get("primaryGenreName"),
        price=_to_price(_first(item, "trackPrice", "collectionPrice")),
        artist=item.get("artistName"),
        description=_first(item, "longDescription", "shortDescription", "description"),
        preview_url=item.get("previewUrl"),
        release_date=item.get("releaseDate"),
        currency=item.get("currency"),
        kind=_first(item, "kind", "wrapperType"),
    )


def _first(item: dict, *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value is not None:
            return value
    return None


def _to_price(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None
