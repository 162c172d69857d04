import os

# Settings are read at import time, so the environment is fixed before the app loads
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_BACKGROUND_JOBS"] = "false"
os.environ["AUTO_MIGRATE"] = "false"
os.environ["TMDB_API_KEY"] = ""
os.environ["STORAGE_ACCESS_KEY_ID"] = ""
os.environ["STORAGE_SECRET_ACCESS_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.services.storage_service import StorageService, get_storage_service
from app.services.tmdb_service import get_tmdb_service
from tests.fakes import FakeS3Client, FakeTMDBService

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def db_session():
    """Provide a clean database session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tmdb_stub():
    return FakeTMDBService()


@pytest.fixture
def s3_stub():
    return FakeS3Client()


@pytest.fixture
def storage_service(s3_stub):
    return StorageService(client=s3_stub, bucket="movies", public_url="http://localhost:9000/movies")


@pytest.fixture
def client(db_session, tmdb_stub, storage_service):
    """FastAPI test client with database, TMDB and storage dependencies overridden."""

    def override_get_db():
        test_db = TestingSessionLocal()
        try:
            yield test_db
        finally:
            test_db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tmdb_service] = lambda: tmdb_stub
    app.dependency_overrides[get_storage_service] = lambda: storage_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
