from fastapi import APIRouter, Query, Depends, status
from app.schemas.movie import MovieRequest, MovieResponse
from app.schemas.validation import DEFAULT_LIMIT, DEFAULT_PAGE, DEFAULT_SORT_FIELD
from app.services.movie_service import MovieService, get_movie_service
from app.utils.response import create_pagination_meta, success_response
from typing import Optional

router = APIRouter(prefix="/api/v1/movies", tags=["Movies"])


# ============================================
# Listing
# ============================================

@router.get("")
def list_movies(
    page: int = Query(DEFAULT_PAGE, description="Page number (values < 1 become 1)"),
    limit: int = Query(DEFAULT_LIMIT, description="Items per page, clamped to 1-100"),
    search: Optional[str] = Query("", description="Case-insensitive match on title, original title or overview"),
    sort_by: Optional[str] = Query(DEFAULT_SORT_FIELD, description="id, title, release_date, vote_average, popularity, created_at, updated_at"),
    order: Optional[str] = Query("desc", description="asc or desc"),
    start_date: Optional[str] = Query("", description="Inclusive lower bound on release_date (YYYY-MM-DD)"),
    end_date: Optional[str] = Query("", description="Inclusive upper bound on release_date (YYYY-MM-DD)"),
    service: MovieService = Depends(get_movie_service)
):
    """
    Browse the catalog

    Unknown sort fields fall back to updated_at, unknown orders to desc.
    """
    movies, total, page, limit = service.list_movies(
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        order=order,
        start_date=start_date,
        end_date=end_date,
    )
    return success_response(
        status.HTTP_200_OK,
        "Movies retrieved successfully",
        data=[MovieResponse.model_validate(movie) for movie in movies],
        meta=create_pagination_meta(page, limit, total),
    )


# ============================================
# CRUD
# ============================================

@router.get("/{movie_id}")
def get_movie(movie_id: int, service: MovieService = Depends(get_movie_service)):
    movie = service.get_movie(movie_id)
    return success_response(
        status.HTTP_200_OK,
        "Movie retrieved successfully",
        data=MovieResponse.model_validate(movie),
    )


@router.post("")
def create_movie(movie_data: MovieRequest, service: MovieService = Depends(get_movie_service)):
    """
    Add a movie by hand

    - title is required
    - a non-zero tmdb_id must not already be in the catalog
    - original_language and genre_ids are resolved to reference rows
    """
    movie = service.create_movie(movie_data)
    return success_response(
        status.HTTP_201_CREATED,
        "Movie created successfully",
        data=MovieResponse.model_validate(movie),
    )


@router.put("/{movie_id}")
def update_movie(
    movie_id: int,
    movie_data: MovieRequest,
    service: MovieService = Depends(get_movie_service)
):
    """
    Replace a movie's fields

    id, created_at and tmdb_id are kept. Replaced images that live in
    our bucket are removed from storage.
    """
    movie = service.update_movie(movie_id, movie_data)
    return success_response(
        status.HTTP_200_OK,
        "Movie updated successfully",
        data=MovieResponse.model_validate(movie),
    )


@router.delete("/{movie_id}")
def delete_movie(movie_id: int, service: MovieService = Depends(get_movie_service)):
    service.delete_movie(movie_id)
    return success_response(status.HTTP_200_OK, "Movie deleted successfully")
