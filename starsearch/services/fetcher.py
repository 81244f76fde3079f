"""
TrackFetcher: the track repository.
  online  → iTunes search → minimal list to caller, full list into the cache
  offline → cached list
  failure → cached snapshot
"""
import asyncio
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from starsearch.services.itunes import ITunesService
from starsearch.services.models import Track, TrackMinimal, lighten_tracks
from starsearch.services.store import TrackStore
from starsearch.utils.connectivity import ConnectionChecker
from starsearch.utils.live_data import LiveData, MutableLiveData

logger = logging.getLogger(__name__)


class FetcherNotInitializedError(RuntimeError):
    pass


class TrackFetcher:
    def __init__(
        self,
        store: TrackStore,
        connection_checker: ConnectionChecker,
        itunes: Optional[ITunesService] = None,
    ):
        self._store = store
        self._connection_checker = connection_checker
        self._itunes = itunes or ITunesService()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="track-cache")
        self._pending: set[asyncio.Task] = set()

    def get_track_list(self) -> LiveData[list[TrackMinimal]]:
        """
        Must be called with an event loop running. When online the returned
        holder is empty until the search (or the cache fallback) completes.
        """
        if self._connection_checker.is_online():
            return self._fetch_tracks_remotely()
        logger.info("Offline, serving cached tracks")
        return self._store.observe_tracks_minimal()

    def get_track_details_by_id(self, track_id: str) -> LiveData[Optional[Track]]:
        if not track_id:
            raise ValueError("track_id must be a non-empty string")
        return self._store.observe_track(track_id)

    def close(self) -> None:
        """Stop the cache worker after any pending write finishes."""
        self._executor.shutdown(wait=True)

    def _fetch_tracks_remotely(self) -> MutableLiveData[list[TrackMinimal]]:
        results: MutableLiveData[list[TrackMinimal]] = MutableLiveData()
        task = asyncio.get_running_loop().create_task(self._fetch_into(results))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        task.add_done_callback(_log_task_failure)
        return results

    async def _fetch_into(self, results: MutableLiveData[list[TrackMinimal]]) -> None:
        try:
            tracks = await self._itunes.fetch_tracks()
        except Exception as exc:
            logger.warning(
                "Track search failed, serving cached tracks",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            results.set_value(await self._cached_snapshot())
            return

        results.set_value(lighten_tracks(tracks))
        self._update_cache(tracks)

    async def _cached_snapshot(self) -> list[TrackMinimal]:
        """Cached minimal list read off the loop; empty when the read fails."""
        try:
            return await asyncio.to_thread(self._store.get_tracks_minimal)
        except Exception:
            logger.error("Cached track read failed", exc_info=True)
            return []

    def _update_cache(self, tracks: list[Track]) -> None:
        # Nobody waits on this future
        try:
            future = self._executor.submit(self._store.replace_tracks, tracks)
        except RuntimeError:
            logger.error("Track cache worker unavailable, cache not updated", exc_info=True)
            return
        future.add_done_callback(_log_cache_failure)


def _log_task_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(
            "Track fetch task failed",
            exc_info=(type(exc), exc, exc.__traceback__),
        )


def _log_cache_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error(
            "Track cache replace failed",
            exc_info=(type(exc), exc, exc.__traceback__),
        )


# Module-level singleton, set once by the composition root
_instance: Optional[TrackFetcher] = None


def initialize(
    store: TrackStore,
    connection_checker: ConnectionChecker,
    itunes: Optional[ITunesService] = None,
) -> TrackFetcher:
    """Create the shared TrackFetcher. Later calls return the first instance."""
    global _instance
    if _instance is None:
        _instance = TrackFetcher(store, connection_checker, itunes)
    else:
        logger.debug("TrackFetcher already initialized")
    return _instance


def get_instance() -> TrackFetcher:
    if _instance is None:
        raise FetcherNotInitializedError("TrackFetcher must be initialized")
    return _instance
