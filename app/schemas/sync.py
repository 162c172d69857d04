from pydantic import BaseModel, Field, ValidationInfo, field_validator
from datetime import datetime
from typing import Optional, List


class SyncLogResponse(BaseModel):
    """Schema for a sync run record"""
    id: Optional[int] = None
    sync_type: str
    status: str
    movies_added: int
    movies_updated: int
    error_message: Optional[str] = None
    synced_at: datetime
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ==================== TMDB PAYLOADS ====================

class TMDBMovie(BaseModel):
    """One entry of TMDB /movie/popular results"""
    id: int = 0
    title: str = ""
    original_title: Optional[str] = ""
    overview: Optional[str] = ""
    release_date: Optional[str] = ""
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    adult: bool = False
    original_language: Optional[str] = ""
    genre_ids: List[int] = Field(default_factory=list)

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, v, info: ValidationInfo):
        """TMDB sends null for unknown values; treat them as the field default"""
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v


class TMDBPopularPage(BaseModel):
    """Parsed TMDB /movie/popular response"""
    page: int = 1
    results: List[TMDBMovie] = Field(default_factory=list)
    total_pages: int = 0
    total_results: int = 0
