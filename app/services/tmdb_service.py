import requests
from typing import Dict, Optional
from pydantic import ValidationError
import logging

from app.config import settings
from app.schemas.sync import TMDBPopularPage

logger = logging.getLogger(__name__)


class TMDBAPIError(Exception):
    """TMDB could not be reached, answered non-2xx, or returned an unreadable body"""


# TMDB Service to interact with The Movie Database API
class TMDBService:
    BASE_URL = settings.TMDB_BASE_URL
    API_KEY = settings.TMDB_API_KEY
    TIMEOUT = settings.TMDB_HTTP_TIMEOUT

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key if api_key is not None else self.API_KEY
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout or self.TIMEOUT
        self.session = session or requests.Session()

    # Internal method to make GET requests to TMDB API
    def _make_request(self, endpoint: str, params: Dict = None) -> Dict:
        """
        Make HTTP request to TMDB API.

        Args:
            endpoint: API endpoint (e.g., "/movie/popular")
            params: Query parameters

        Returns:
            JSON response from TMDB

        Raises:
            TMDBAPIError: If API key is missing, the request fails, or the body is not JSON
        """
        if not self.api_key:
            raise TMDBAPIError("TMDB API key not configured")
        params = dict(params or {})
        params['api_key'] = self.api_key
        url = f"{self.base_url}{endpoint}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"TMDB API error for {endpoint}: {str(e)}")
            raise TMDBAPIError(f"failed to fetch from TMDB: {str(e)}") from e

        if not response.ok:
            logger.error(f"TMDB API returned {response.status_code} for {endpoint}")
            raise TMDBAPIError(f"TMDB API returned status {response.status_code}: {response.text}")

        try:
            payload = response.json()
        except ValueError as e:
            raise TMDBAPIError(f"failed to decode TMDB response: {str(e)}") from e

        logger.debug(f"TMDB API request successful: {endpoint}")
        return payload

    def fetch_popular_page(self, page: int = 1) -> TMDBPopularPage:
        """
        Fetch one page of popular movies.

        Not cached: every sync run must see current TMDB data.
        """
        payload = self._make_request("/movie/popular", {'page': page, 'language': 'en-US'})
        try:
            return TMDBPopularPage.model_validate(payload)
        except ValidationError as e:
            raise TMDBAPIError(f"failed to decode TMDB response: {str(e)}") from e


def get_tmdb_service() -> TMDBService:
    """FastAPI dependency for the metadata client"""
    return TMDBService()
