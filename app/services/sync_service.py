"""
Sync Service - pulls TMDB popular movies into the local catalog

One run:
- fetches the requested number of pages sequentially
- resolves language and genre reference rows (find-or-create)
- upserts each movie by TMDB id, counting added/updated
- always writes exactly one SyncLog row
"""

from sqlalchemy.orm import Session
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from app.models.genre import Genre
from app.models.sync_log import (
    SyncLog,
    SYNC_STATUS_FAILED,
    SYNC_STATUS_SUCCESS,
    SYNC_TYPE_MANUAL,
)
from app.schemas.sync import TMDBMovie
from app.schemas.validation import clamp_sync_pages
from app.services.catalog_store import GenreStore, LanguageStore, MovieStore, SyncLogStore
from app.services.tmdb_service import TMDBService
from app.utils.reference_data import get_genre_name, get_language_name

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """A sync run stopped early; sync_log is the persisted failed record"""

    def __init__(self, message: str, sync_log: SyncLog):
        super().__init__(message)
        self.sync_log = sync_log


class SyncService:
    """
    Catalog synchronization pipeline

    Usage:
        service = SyncService(db, TMDBService())
        sync_log = service.sync_movies(pages=3)
    """

    def __init__(self, db: Session, tmdb: TMDBService):
        self.db = db
        self.tmdb = tmdb

    def sync_movies(self, pages: int = 1, sync_type: str = SYNC_TYPE_MANUAL) -> SyncLog:
        """
        Run one sync over `pages` pages of TMDB popular movies (clamped to 1..10).

        Fetch errors stop the run; per-movie errors are logged and skipped.

        Returns:
            The persisted SyncLog with status 'success'

        Raises:
            SyncError: If a page could not be fetched (a 'failed' log is still persisted)
        """
        pages = clamp_sync_pages(pages)
        sync_log = SyncLog(
            sync_type=sync_type,
            status=SYNC_STATUS_FAILED,
            movies_added=0,
            movies_updated=0,
            synced_at=datetime.now(timezone.utc),
        )
        start_time = datetime.now()

        for page in range(1, pages + 1):
            logger.info(f"[sync] Fetching TMDB popular movies page {page}/{pages}")

            try:
                tmdb_page = self.tmdb.fetch_popular_page(page)
            except Exception as e:
                sync_log.error_message = f"failed to fetch page {page}: {str(e)}"
                logger.error(f"[sync] ✗ {sync_log.error_message}")
                self._persist_log(sync_log)
                raise SyncError(sync_log.error_message, sync_log) from e

            for tmdb_movie in tmdb_page.results:
                result = self._sync_movie(tmdb_movie)
                if result == "added":
                    sync_log.movies_added += 1
                elif result == "updated":
                    sync_log.movies_updated += 1

        sync_log.status = SYNC_STATUS_SUCCESS
        self._persist_log(sync_log)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"[sync] ✓ Completed in {elapsed:.2f}s - "
            f"added={sync_log.movies_added} updated={sync_log.movies_updated}"
        )
        return sync_log

    def get_last_sync_log(self) -> Optional[SyncLog]:
        return SyncLogStore.get_last(self.db)

    # ============================================
    # Helper Methods
    # ============================================

    def _sync_movie(self, tmdb_movie: TMDBMovie) -> Optional[str]:
        """
        Upsert one TMDB movie.

        Returns:
            'added', 'updated', or None when the movie was skipped
        """
        if not tmdb_movie.id:
            logger.warning(f"[sync] Skipping movie without TMDB id: '{tmdb_movie.title}'")
            return None

        language_id = None
        lang_code = (tmdb_movie.original_language or "").strip()
        if lang_code:
            try:
                language = LanguageStore.find_or_create(self.db, lang_code, get_language_name(lang_code))
                language_id = language.id
            except Exception as e:
                self.db.rollback()
                logger.error(f"[sync] Error creating language {lang_code}: {str(e)}")
                return None

        genres = self._resolve_genres(tmdb_movie.genre_ids)

        try:
            _, created = MovieStore.upsert_by_tmdb_id(
                self.db,
                tmdb_movie.id,
                self._movie_fields(tmdb_movie, language_id),
                genres,
            )
        except Exception as e:
            self.db.rollback()
            logger.error(f"[sync] Error saving movie tmdb_id={tmdb_movie.id} '{tmdb_movie.title}': {str(e)}")
            return None

        return "added" if created else "updated"

    def _resolve_genres(self, genre_ids: List[int]) -> List[Genre]:
        genres = []
        for genre_id in dict.fromkeys(genre_ids):  # de-duplicate, keep order
            try:
                genres.append(GenreStore.find_or_create(self.db, genre_id, get_genre_name(genre_id)))
            except Exception as e:
                self.db.rollback()
                logger.error(f"[sync] Error creating genre {genre_id}: {str(e)}")
        return genres

    @staticmethod
    def _movie_fields(tmdb_movie: TMDBMovie, language_id: Optional[int]) -> Dict:
        return {
            'title': tmdb_movie.title,
            'original_title': tmdb_movie.original_title or "",
            'overview': tmdb_movie.overview or "",
            'release_date': tmdb_movie.release_date or "",
            'poster_path': tmdb_movie.poster_path or "",
            'backdrop_path': tmdb_movie.backdrop_path or "",
            'vote_average': tmdb_movie.vote_average,
            'vote_count': tmdb_movie.vote_count,
            'popularity': tmdb_movie.popularity,
            'adult': tmdb_movie.adult,
            'language_id': language_id,
        }

    def _persist_log(self, sync_log: SyncLog) -> None:
        """Write the run record; a failure here is logged, never raised"""
        try:
            SyncLogStore.create(self.db, sync_log)
        except Exception as e:
            logger.error(f"[sync] Failed to write sync log: {str(e)}")
