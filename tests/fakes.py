"""
Test doubles for the TMDB client and the boto3 S3 client
"""
from botocore.exceptions import ClientError

from app.schemas.sync import TMDBMovie, TMDBPopularPage
from app.services.tmdb_service import TMDBAPIError


def make_tmdb_movie(tmdb_id, title=None, **overrides):
    """TMDB popular-list entry with sensible defaults"""
    data = {
        "id": tmdb_id,
        "title": title or f"Movie {tmdb_id}",
        "original_title": title or f"Movie {tmdb_id}",
        "overview": f"Overview of movie {tmdb_id}",
        "release_date": "2023-06-15",
        "poster_path": f"/poster{tmdb_id}.jpg",
        "backdrop_path": f"/backdrop{tmdb_id}.jpg",
        "vote_average": 7.5,
        "vote_count": 1200,
        "popularity": 88.0,
        "adult": False,
        "original_language": "en",
        "genre_ids": [28, 12],
    }
    data.update(overrides)
    return TMDBMovie(**data)


class FakeTMDBService:
    """
    Scripted stand-in for TMDBService.

    pages maps a page number to a list of TMDBMovie or to an exception
    raised when that page is requested. Unscripted pages are empty.
    """

    def __init__(self):
        self.pages = {}
        self.requested_pages = []

    def fetch_popular_page(self, page=1):
        self.requested_pages.append(page)
        entry = self.pages.get(page, [])
        if isinstance(entry, Exception):
            raise entry
        return TMDBPopularPage(page=page, results=entry, total_pages=len(self.pages), total_results=len(entry))

    def fail_page(self, page, message="TMDB API returned status 503: unavailable"):
        self.pages[page] = TMDBAPIError(message)


class FakeS3Client:
    """Records the boto3 calls StorageService makes"""

    def __init__(self):
        self.deleted_keys = []
        self.presign_calls = []
        self.fail_delete = False
        self.existing_buckets = set()
        self.policies = {}

    def generate_presigned_url(self, operation, Params=None, ExpiresIn=None):
        self.presign_calls.append((operation, Params, ExpiresIn))
        return f"http://localhost:9000/{Params['Bucket']}/{Params['Key']}?X-Amz-Signature=fake"

    def delete_object(self, Bucket, Key):
        if self.fail_delete:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "DeleteObject")
        self.deleted_keys.append(Key)
        return {}

    def head_bucket(self, Bucket):
        if Bucket not in self.existing_buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")
        return {}

    def create_bucket(self, Bucket):
        self.existing_buckets.add(Bucket)
        return {}

    def put_bucket_policy(self, Bucket, Policy):
        self.policies[Bucket] = Policy
        return {}

