"""Normalization of list query parameters (pagination, sorting, sync size)"""

from typing import Iterable, Tuple

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

MOVIE_SORT_FIELDS = (
    "id",
    "title",
    "release_date",
    "vote_average",
    "popularity",
    "created_at",
    "updated_at",
)
DEFAULT_SORT_FIELD = "updated_at"

MIN_SYNC_PAGES = 1
MAX_SYNC_PAGES = 10  # Limit to prevent too many TMDB calls per run

MIN_CHART_YEAR = 1900
MAX_CHART_YEAR = 2100


def validate_pagination(page: int, limit: int) -> Tuple[int, int]:
    """Coerce page to >= 1 and clamp limit into [1, MAX_LIMIT]"""
    page = max(1, page)
    limit = max(1, min(limit, MAX_LIMIT))
    return page, limit


def validate_sort_field(field: str, allowed_fields: Iterable[str] = MOVIE_SORT_FIELDS,
                        default: str = DEFAULT_SORT_FIELD) -> str:
    """Return field if whitelisted, otherwise the default sort field"""
    if field in allowed_fields:
        return field
    return default


def validate_sort_order(order: str) -> str:
    """'asc' (any case) stays ascending, anything else is descending"""
    if order and order.strip().lower() == "asc":
        return "asc"
    return "desc"


def clamp_sync_pages(pages: int) -> int:
    return max(MIN_SYNC_PAGES, min(pages, MAX_SYNC_PAGES))


def is_valid_chart_year(year: int) -> bool:
    return MIN_CHART_YEAR <= year <= MAX_CHART_YEAR
