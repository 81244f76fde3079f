"""
StarSearch - Main Entrypoint
Builds the track repository once and prints the current track list.
"""
import asyncio
import logging
import sys

from starsearch.config.settings import settings
from starsearch.services.fetcher import initialize
from starsearch.services.store import TrackStore
from starsearch.utils.connectivity import SocketConnectionChecker
from starsearch.utils.logging import setup_logging


async def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)

    store = TrackStore(settings.DATABASE_PATH)
    fetcher = initialize(store, SocketConnectionChecker())

    logger.info("Loading tracks", extra={"env": settings.ENV, "db": str(settings.DATABASE_PATH)})
    try:
        tracks = await fetcher.get_track_list().wait(timeout=settings.HTTP_TIMEOUT_SECONDS + 5)
        for track in tracks:
            print(f"{track.id}\t{track.name}\t{track.genre or '-'}\t{track.price if track.price is not None else '-'}")

        if tracks:
            details = await fetcher.get_track_details_by_id(tracks[0].id).wait()
            if details:
                print(f"\n{details.name} ({details.artist or 'Unknown Artist'}) - {details.display_price}")
    finally:
        fetcher.close()
        store.close()
        logger.info("Done")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
