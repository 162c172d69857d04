"""
Read-only aggregate schemas for the dashboard and chart endpoints
"""
from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List

from app.schemas.movie import MovieResponse


class DashboardStats(BaseModel):
    total_movies: int = 0
    average_rating: float = 0.0
    total_votes: int = 0
    last_sync_time: Optional[datetime] = None
    top_rated_movies: List[MovieResponse] = []
    most_popular: List[MovieResponse] = []
    recently_added: List[MovieResponse] = []


class PieChartData(BaseModel):
    """Movie count for one language"""
    label: str
    value: int
    code: str


class ColumnChartData(BaseModel):
    """Movie count for one year or month bucket"""
    label: str
    value: int


class ChartDataResponse(BaseModel):
    pie_chart: List[PieChartData] = []
    column_chart: List[ColumnChartData] = []
