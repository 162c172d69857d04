"""
Catalog Store - persistence for movies, genres, languages and sync logs

All reads and writes of catalog rows go through these classes.
Follows the same static-method-over-Session pattern as the other services.
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func, or_, desc
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from app.models.genre import Genre
from app.models.language import Language
from app.models.movie import Movie
from app.models.sync_log import SyncLog
from app.schemas.validation import validate_sort_field, validate_sort_order

logger = logging.getLogger(__name__)

TOP_LIST_SIZE = 10
TOP_RATED_MIN_VOTES = 100  # Only movies with significant votes
CHART_TOP_N = 10
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class LanguageStore:
    """Language reference rows, keyed by ISO code"""

    @staticmethod
    def get_by_code(db: Session, code: str) -> Optional[Language]:
        return db.query(Language).filter(Language.code == code).first()

    @staticmethod
    def find_or_create(db: Session, code: str, name: str) -> Language:
        """
        Return the language with this code, inserting it if absent.
        A concurrent insert of the same code is resolved by re-reading.
        """
        language = LanguageStore.get_by_code(db, code)
        if language:
            return language

        language = Language(code=code, name=name)
        db.add(language)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            language = LanguageStore.get_by_code(db, code)
            if language is None:
                raise
            return language

        db.refresh(language)
        logger.debug(f"Created language {code} ({name})")
        return language

    @staticmethod
    def get_all(db: Session) -> List[Language]:
        return db.query(Language).order_by(Language.code).all()


class GenreStore:
    """Genre reference rows, keyed by TMDB genre id"""

    @staticmethod
    def get_by_tmdb_id(db: Session, tmdb_id: int) -> Optional[Genre]:
        return db.query(Genre).filter(Genre.tmdb_id == tmdb_id).first()

    @staticmethod
    def find_or_create(db: Session, tmdb_id: int, name: str) -> Genre:
        genre = GenreStore.get_by_tmdb_id(db, tmdb_id)
        if genre:
            return genre

        genre = Genre(tmdb_id=tmdb_id, name=name)
        db.add(genre)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            genre = GenreStore.get_by_tmdb_id(db, tmdb_id)
            if genre is None:
                raise
            return genre

        db.refresh(genre)
        logger.debug(f"Created genre {tmdb_id} ({name})")
        return genre

    @staticmethod
    def get_all(db: Session) -> List[Genre]:
        return db.query(Genre).order_by(Genre.name).all()


class MovieStore:
    """Movie rows plus the aggregate queries behind the dashboard and charts"""

    # ==================== CRUD ====================

    @staticmethod
    def get_by_id(db: Session, movie_id: int) -> Optional[Movie]:
        return db.get(Movie, movie_id)

    @staticmethod
    def get_by_tmdb_id(db: Session, tmdb_id: int) -> Optional[Movie]:
        return db.query(Movie).filter(Movie.tmdb_id == tmdb_id).first()

    @staticmethod
    def create(db: Session, movie: Movie) -> Movie:
        db.add(movie)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(movie)
        return movie

    @staticmethod
    def save(db: Session, movie: Movie) -> Movie:
        """Flush pending changes on an already persistent movie"""
        movie.updated_at = func.now()
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(movie)
        return movie

    @staticmethod
    def delete(db: Session, movie: Movie) -> None:
        db.delete(movie)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise

    @staticmethod
    def upsert_by_tmdb_id(
        db: Session,
        tmdb_id: int,
        fields: Dict,
        genres: Iterable[Genre] = ()
    ) -> Tuple[Movie, bool]:
        """
        Insert or overwrite the movie identified by tmdb_id.

        On update the internal id and created_at are preserved and every
        other field (including language and genres) is replaced.
        An insert that loses a race against a concurrent writer is retried
        as an update, so the last write wins.

        Returns:
            (movie, created) where created is True for a new row
        """
        genres = list(genres)
        existing = MovieStore.get_by_tmdb_id(db, tmdb_id)

        if existing is None:
            movie = Movie(tmdb_id=tmdb_id, **fields)
            movie.genres = genres
            db.add(movie)
            try:
                db.commit()
                db.refresh(movie)
                return movie, True
            except IntegrityError:
                db.rollback()
                existing = MovieStore.get_by_tmdb_id(db, tmdb_id)
                if existing is None:
                    raise
                logger.info(f"Concurrent insert for tmdb_id={tmdb_id}, updating instead")

        for key, value in fields.items():
            setattr(existing, key, value)
        existing.genres = genres
        existing.updated_at = func.now()
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(existing)
        return existing, False

    # ==================== LISTING ====================

    @staticmethod
    def list_movies(
        db: Session,
        page: int,
        limit: int,
        search: str = "",
        sort_by: str = "",
        order: str = "",
        start_date: str = "",
        end_date: str = ""
    ) -> Tuple[List[Movie], int]:
        """
        Filtered, sorted page of movies plus the total count of matches.

        Release dates are compared as strings, both bounds inclusive.
        """
        query = db.query(Movie)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Movie.title.ilike(pattern),
                Movie.overview.ilike(pattern),
                Movie.original_title.ilike(pattern),
            ))

        if start_date:
            query = query.filter(Movie.release_date >= start_date)
        if end_date:
            query = query.filter(Movie.release_date <= end_date)

        total = query.count()

        sort_column = getattr(Movie, validate_sort_field(sort_by))
        if validate_sort_order(order) == "asc":
            query = query.order_by(sort_column.asc(), Movie.id.asc())
        else:
            query = query.order_by(sort_column.desc(), Movie.id.desc())

        offset = (page - 1) * limit
        movies = query.offset(offset).limit(limit).all()
        return movies, total

    # ==================== DASHBOARD ====================

    @staticmethod
    def get_dashboard_stats(db: Session) -> Dict:
        total_movies = db.query(func.count(Movie.id)).scalar() or 0

        average_rating, total_votes = 0.0, 0
        if total_movies > 0:
            average_rating, total_votes = db.query(
                func.coalesce(func.avg(Movie.vote_average), 0.0),
                func.coalesce(func.sum(Movie.vote_count), 0),
            ).one()

        last_sync = SyncLogStore.get_last(db)

        top_rated = db.query(Movie).filter(
            Movie.vote_count > TOP_RATED_MIN_VOTES
        ).order_by(
            Movie.vote_average.desc(), Movie.vote_count.desc()
        ).limit(TOP_LIST_SIZE).all()

        most_popular = db.query(Movie).order_by(
            Movie.popularity.desc()
        ).limit(TOP_LIST_SIZE).all()

        recently_added = db.query(Movie).order_by(
            Movie.created_at.desc(), Movie.id.desc()
        ).limit(TOP_LIST_SIZE).all()

        return {
            "total_movies": int(total_movies),
            "average_rating": float(average_rating or 0.0),
            "total_votes": int(total_votes or 0),
            "last_sync_time": last_sync.synced_at if last_sync else None,
            "top_rated_movies": top_rated,
            "most_popular": most_popular,
            "recently_added": recently_added,
        }

    # ==================== CHARTS ====================

    @staticmethod
    def count_by_language(db: Session) -> List[Dict]:
        """Top languages by movie count; movies without a language count as 'Unknown'"""
        value = func.count(Movie.id)
        rows = db.query(
            func.coalesce(Language.name, "Unknown").label("label"),
            func.coalesce(Language.code, "unknown").label("code"),
            value.label("value"),
        ).select_from(Movie).outerjoin(
            Language, Movie.language_id == Language.id
        ).group_by(
            Language.name, Language.code
        ).order_by(
            desc("value"), "label"
        ).limit(CHART_TOP_N).all()

        return [{"label": row.label, "code": row.code, "value": int(row.value)} for row in rows]

    @staticmethod
    def count_by_year(db: Session, start_date: str = "", end_date: str = "") -> List[Dict]:
        """Top release years by movie count, year taken from the first 4 chars of release_date"""
        query = db.query(
            func.substr(Movie.release_date, 1, 4).label("label"),
            func.count(Movie.id).label("value"),
        ).filter(
            Movie.release_date.isnot(None),
            Movie.release_date != "",
            func.length(Movie.release_date) >= 4,
        )

        if start_date:
            query = query.filter(Movie.release_date >= start_date)
        if end_date:
            query = query.filter(Movie.release_date <= end_date)

        rows = query.group_by("label").order_by(
            desc("value"), desc("label")
        ).limit(CHART_TOP_N).all()

        return [{"label": row.label, "value": int(row.value)} for row in rows]

    @staticmethod
    def count_by_month(db: Session, year: int) -> List[Dict]:
        """Twelve Jan..Dec buckets for one release year, zero-filled"""
        rows = db.query(
            func.substr(Movie.release_date, 6, 2).label("month"),
            func.count(Movie.id).label("total"),
        ).filter(
            Movie.release_date.like(f"{year:04d}%"),
            func.length(Movie.release_date) >= 7,
        ).group_by("month").all()

        counts = {}
        for row in rows:
            try:
                counts[int(row.month)] = int(row.total)
            except (TypeError, ValueError):
                continue  # malformed month part

        return [
            {"label": label, "value": counts.get(index, 0)}
            for index, label in enumerate(MONTH_LABELS, start=1)
        ]


class SyncLogStore:
    """Append-only sync run records"""

    @staticmethod
    def create(db: Session, sync_log: SyncLog) -> SyncLog:
        db.add(sync_log)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(sync_log)
        return sync_log

    @staticmethod
    def get_last(db: Session) -> Optional[SyncLog]:
        return db.query(SyncLog).order_by(
            SyncLog.synced_at.desc(), SyncLog.id.desc()
        ).first()
