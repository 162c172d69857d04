"""
Import all models to ensure they are registered with SQLAlchemy
"""
from app.models.language import Language
from app.models.genre import Genre
from app.models.movie import Movie, movie_genres
from app.models.sync_log import SyncLog

__all__ = [
    "Language",
    "Genre",
    "Movie",
    "movie_genres",
    "SyncLog",
]
