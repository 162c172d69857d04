from fastapi import APIRouter, Depends, Query, status
from app.services.movie_service import MovieService, get_movie_service
from app.utils.response import success_response
from typing import Optional

router = APIRouter(prefix="/api/v1", tags=["Dashboard"])


# ============================================
# Dashboard
# ============================================

@router.get("/dashboard/stats")
def get_dashboard_stats(service: MovieService = Depends(get_movie_service)):
    """
    Catalog totals, last sync time and three top-10 lists

    - top_rated_movies: vote_count > 100, by vote_average
    - most_popular: by popularity
    - recently_added: by created_at
    """
    return success_response(
        status.HTTP_200_OK,
        "Dashboard stats retrieved successfully",
        data=service.get_dashboard_stats(),
    )


# ============================================
# Charts
# ============================================

@router.get("/charts")
def get_chart_data(
    start_date: Optional[str] = Query("", description="Inclusive lower bound on release_date"),
    end_date: Optional[str] = Query("", description="Inclusive upper bound on release_date"),
    service: MovieService = Depends(get_movie_service)
):
    """Pie chart (movies per language) and column chart (movies per release year)"""
    return success_response(
        status.HTTP_200_OK,
        "Chart data retrieved successfully",
        data=service.get_chart_data(start_date, end_date),
    )


@router.get("/charts/pie")
def get_pie_chart(service: MovieService = Depends(get_movie_service)):
    return success_response(
        status.HTTP_200_OK,
        "Pie chart data retrieved successfully",
        data=service.get_movies_by_language(),
    )


@router.get("/charts/column")
def get_column_chart(
    start_date: Optional[str] = Query("", description="Inclusive lower bound on release_date"),
    end_date: Optional[str] = Query("", description="Inclusive upper bound on release_date"),
    service: MovieService = Depends(get_movie_service)
):
    return success_response(
        status.HTTP_200_OK,
        "Column chart data retrieved successfully",
        data=service.get_movies_by_year(start_date, end_date),
    )


@router.get("/charts/monthly/{year}")
def get_monthly_chart(year: int, service: MovieService = Depends(get_movie_service)):
    """Twelve Jan..Dec buckets; year must be within 1900-2100"""
    return success_response(
        status.HTTP_200_OK,
        "Monthly chart data retrieved successfully",
        data=service.get_movies_by_month(year),
    )
