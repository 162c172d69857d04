from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional, List


# ==================== REQUEST SCHEMAS ====================

class MovieRequest(BaseModel):
    """Schema for creating or replacing a movie"""
    tmdb_id: Optional[int] = Field(0, ge=0, description="TMDB movie ID (0 or omitted for manual entries)")
    title: str = Field("", max_length=500, description="Movie title (required)")
    original_title: Optional[str] = Field("", max_length=500)
    overview: Optional[str] = Field("", description="Synopsis")
    release_date: Optional[str] = Field("", max_length=20, description="Release date (YYYY-MM-DD)")
    poster_path: Optional[str] = Field("", max_length=1000, description="TMDB path or storage URL")
    backdrop_path: Optional[str] = Field("", max_length=1000, description="TMDB path or storage URL")
    vote_average: float = Field(0.0, ge=0, le=10)
    vote_count: int = Field(0, ge=0)
    popularity: float = Field(0.0, ge=0)
    adult: bool = False
    original_language: Optional[str] = Field("", max_length=10, description="ISO 639-1 code (e.g., 'en')")
    genre_ids: Optional[List[int]] = Field(None, description="TMDB genre IDs; omit to keep existing genres on update")

    @field_validator("title", "original_title", "overview", "release_date", "poster_path", "backdrop_path", "original_language")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


# ==================== RESPONSE SCHEMAS ====================

class LanguageResponse(BaseModel):
    id: int
    code: str
    name: str

    class Config:
        from_attributes = True


class GenreResponse(BaseModel):
    id: int
    tmdb_id: int
    name: str

    class Config:
        from_attributes = True


class MovieResponse(BaseModel):
    """Schema for a catalog movie"""
    id: int
    tmdb_id: Optional[int]
    title: str
    original_title: Optional[str]
    overview: Optional[str]
    release_date: Optional[str]
    poster_path: Optional[str]
    backdrop_path: Optional[str]
    vote_average: Optional[float]
    vote_count: Optional[int]
    popularity: Optional[float]
    adult: Optional[bool]
    language_id: Optional[int]
    language: Optional[LanguageResponse] = None
    genres: List[GenreResponse] = []
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class PaginationMeta(BaseModel):
    """Pagination metadata returned alongside list endpoints"""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool
