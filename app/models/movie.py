from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Table, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base

# Many-to-many link between movies and genres
movie_genres = Table(
    "movie_genres",
    Base.metadata,
    Column("movie_id", Integer, ForeignKey("movies.id", ondelete="CASCADE"), primary_key=True),
    Column("genre_id", Integer, ForeignKey("genres.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Movie(Base):
    """
    Catalog movie, keyed internally by id and externally by tmdb_id

    tmdb_id is NULL for movies created by hand without an external id,
    so the unique index only constrains real TMDB ids.
    """
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    tmdb_id = Column(Integer, unique=True, nullable=True, index=True)
    title = Column(String(500), nullable=False, index=True)
    original_title = Column(String(500))
    overview = Column(Text)
    release_date = Column(String(20), index=True)  # YYYY-MM-DD, kept as text
    poster_path = Column(String(1000))
    backdrop_path = Column(String(1000))
    vote_average = Column(Float, default=0.0, index=True)
    vote_count = Column(Integer, default=0)
    popularity = Column(Float, default=0.0, index=True)
    adult = Column(Boolean, default=False)
    language_id = Column(Integer, ForeignKey("languages.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), index=True)

    # Relationships
    language = relationship("Language", lazy="selectin")
    genres = relationship("Genre", secondary=movie_genres, lazy="selectin", order_by="Genre.tmdb_id")

    def __repr__(self):
        return f"<Movie(id={self.id}, tmdb_id={self.tmdb_id}, title='{self.title}')>"
