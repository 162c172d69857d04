"""
Movie Service - catalog CRUD, listing, dashboard and chart queries

The image-cleanup dependency (StorageService) is passed in by the caller;
without it, stored poster/backdrop objects are simply left in the bucket.
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import Depends, HTTPException, status
from typing import List, Optional, Tuple
import logging

from app.database import get_db
from app.models.genre import Genre
from app.models.movie import Movie
from app.schemas.dashboard import ChartDataResponse, ColumnChartData, DashboardStats, PieChartData
from app.schemas.movie import MovieRequest, MovieResponse
from app.schemas.validation import is_valid_chart_year, validate_pagination
from app.services.catalog_store import GenreStore, LanguageStore, MovieStore
from app.services.storage_service import StorageError, StorageService, get_storage_service
from app.utils.reference_data import get_genre_name, get_language_name

logger = logging.getLogger(__name__)


class MovieService:
    """Service for catalog movie operations"""

    def __init__(self, db: Session, storage: Optional[StorageService] = None):
        self.db = db
        self.storage = storage

    # ==================== CRUD ====================

    def get_movie(self, movie_id: int) -> Movie:
        """Get a movie by internal id"""
        movie = MovieStore.get_by_id(self.db, movie_id)
        if not movie:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Movie not found"
            )
        return movie

    def create_movie(self, movie_data: MovieRequest) -> Movie:
        """Create a movie; a non-zero TMDB id must not already exist"""
        if not movie_data.title:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="movie title is required"
            )

        tmdb_id = movie_data.tmdb_id or None
        if tmdb_id and MovieStore.get_by_tmdb_id(self.db, tmdb_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"movie with TMDB ID {tmdb_id} already exists"
            )

        language_id = self._resolve_language_id(movie_data.original_language)
        genres = self._resolve_genres(movie_data.genre_ids or [])

        movie = Movie(tmdb_id=tmdb_id, **self._movie_fields(movie_data, language_id))
        movie.genres = genres
        try:
            return MovieStore.create(self.db, movie)
        except IntegrityError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"movie with TMDB ID {tmdb_id} already exists"
            )

    def update_movie(self, movie_id: int, movie_data: MovieRequest) -> Movie:
        """
        Replace a movie's fields, keeping id, created_at and tmdb_id.
        Genres are replaced only when genre_ids is supplied.
        Replaced poster/backdrop objects in storage are deleted afterwards.
        """
        movie = self.get_movie(movie_id)
        old_poster = movie.poster_path
        old_backdrop = movie.backdrop_path

        language_id = self._resolve_language_id(movie_data.original_language)
        genres = None
        if movie_data.genre_ids is not None:
            genres = self._resolve_genres(movie_data.genre_ids)

        for key, value in self._movie_fields(movie_data, language_id).items():
            setattr(movie, key, value)
        if genres is not None:
            movie.genres = genres

        movie = MovieStore.save(self.db, movie)

        if movie_data.poster_path and movie_data.poster_path != old_poster:
            self._delete_image(old_poster, "poster")
        if movie_data.backdrop_path and movie_data.backdrop_path != old_backdrop:
            self._delete_image(old_backdrop, "backdrop")

        return movie

    def delete_movie(self, movie_id: int) -> None:
        """Delete a movie and any poster/backdrop objects it owns in storage"""
        movie = self.get_movie(movie_id)
        poster, backdrop = movie.poster_path, movie.backdrop_path

        self._delete_image(poster, "poster")
        self._delete_image(backdrop, "backdrop")

        MovieStore.delete(self.db, movie)

    # ==================== LISTING ====================

    def list_movies(
        self,
        page: int = 1,
        limit: int = 20,
        search: str = "",
        sort_by: str = "updated_at",
        order: str = "desc",
        start_date: str = "",
        end_date: str = ""
    ) -> Tuple[List[Movie], int, int, int]:
        """
        Page of movies with filters applied

        Returns:
            (movies, total, page, limit) with page/limit after normalization
        """
        page, limit = validate_pagination(page, limit)
        movies, total = MovieStore.list_movies(
            self.db, page, limit,
            search=(search or "").strip(),
            sort_by=sort_by,
            order=order,
            start_date=start_date or "",
            end_date=end_date or "",
        )
        return movies, total, page, limit

    # ==================== DASHBOARD & CHARTS ====================

    def get_dashboard_stats(self) -> DashboardStats:
        stats = MovieStore.get_dashboard_stats(self.db)
        for key in ("top_rated_movies", "most_popular", "recently_added"):
            stats[key] = [MovieResponse.model_validate(movie) for movie in stats[key]]
        return DashboardStats(**stats)

    def get_movies_by_language(self) -> List[PieChartData]:
        return [PieChartData(**row) for row in MovieStore.count_by_language(self.db)]

    def get_movies_by_year(self, start_date: str = "", end_date: str = "") -> List[ColumnChartData]:
        rows = MovieStore.count_by_year(self.db, start_date or "", end_date or "")
        return [ColumnChartData(**row) for row in rows]

    def get_movies_by_month(self, year: int) -> List[ColumnChartData]:
        if not is_valid_chart_year(year):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"invalid year: {year}"
            )
        return [ColumnChartData(**row) for row in MovieStore.count_by_month(self.db, year)]

    def get_chart_data(self, start_date: str = "", end_date: str = "") -> ChartDataResponse:
        """Pie chart by language plus column chart by year"""
        return ChartDataResponse(
            pie_chart=self.get_movies_by_language(),
            column_chart=self.get_movies_by_year(start_date, end_date),
        )

    # ==================== HELPERS ====================

    def _resolve_language_id(self, code: Optional[str]) -> Optional[int]:
        if not code:
            return None
        return LanguageStore.find_or_create(self.db, code, get_language_name(code)).id

    def _resolve_genres(self, genre_ids: List[int]) -> List[Genre]:
        return [
            GenreStore.find_or_create(self.db, genre_id, get_genre_name(genre_id))
            for genre_id in dict.fromkeys(genre_ids)
        ]

    def _delete_image(self, path: Optional[str], kind: str) -> None:
        """Best-effort removal of a stored image; TMDB paths are ignored"""
        if not self.storage or not self.storage.is_managed_url(path):
            return
        try:
            self.storage.delete_file(path)
        except StorageError as e:
            logger.warning(f"Failed to delete old {kind} from storage: {str(e)}")

    @staticmethod
    def _movie_fields(movie_data: MovieRequest, language_id: Optional[int]) -> dict:
        return {
            "title": movie_data.title,
            "original_title": movie_data.original_title or "",
            "overview": movie_data.overview or "",
            "release_date": movie_data.release_date or "",
            "poster_path": movie_data.poster_path or "",
            "backdrop_path": movie_data.backdrop_path or "",
            "vote_average": movie_data.vote_average,
            "vote_count": movie_data.vote_count,
            "popularity": movie_data.popularity,
            "adult": movie_data.adult,
            "language_id": language_id,
        }


def get_movie_service(
    db: Session = Depends(get_db),
    storage: StorageService = Depends(get_storage_service)
) -> MovieService:
    return MovieService(db, storage)
