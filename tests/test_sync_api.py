"""
Sync, background job and health endpoint tests
"""
import pytest
from sqlalchemy.orm import sessionmaker

from app.services.background_jobs import background_jobs
from tests.fakes import make_tmdb_movie


# ============================================
# Sync API
# ============================================

def test_sync_endpoint_reports_counts(client, tmdb_stub):
    tmdb_stub.pages[1] = [make_tmdb_movie(550), make_tmdb_movie(551)]

    response = client.post("/api/v1/sync/movies", params={"pages": 1})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Movies synced successfully"
    assert body["data"]["movies_added"] == 2
    assert body["data"]["movies_updated"] == 0
    assert body["data"]["sync_type"] == "manual"
    assert body["data"]["status"] == "success"


def test_sync_endpoint_defaults_to_one_page(client, tmdb_stub):
    client.post("/api/v1/sync/movies")

    assert tmdb_stub.requested_pages == [1]


def test_sync_endpoint_failure_returns_failed_log(client, tmdb_stub):
    tmdb_stub.fail_page(1, "failed to fetch from TMDB: connection refused")

    response = client.post("/api/v1/sync/movies", params={"pages": 2})

    assert response.status_code == 500
    body = response.json()
    assert body["status"] == "fail"
    assert "failed to fetch page 1" in body["message"]
    assert body["data"]["status"] == "failed"
    assert "connection refused" in body["data"]["error_message"]
    assert tmdb_stub.requested_pages == [1]


def test_last_log_not_found_before_any_sync(client):
    response = client.get("/api/v1/sync/last-log")

    assert response.status_code == 404
    assert response.json()["message"] == "No sync log found"


def test_last_log_after_sync(client, tmdb_stub):
    tmdb_stub.pages[1] = [make_tmdb_movie(550)]
    client.post("/api/v1/sync/movies")
    client.post("/api/v1/sync/movies")

    response = client.get("/api/v1/sync/last-log")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["movies_added"] == 0
    assert data["movies_updated"] == 1


def test_synced_movies_are_listed(client, tmdb_stub):
    tmdb_stub.pages[1] = [make_tmdb_movie(550, title="Fight Club", release_date="1999-10-15")]
    client.post("/api/v1/sync/movies")

    body = client.get("/api/v1/movies", params={"search": "fight"}).json()

    assert body["meta"]["total"] == 1
    assert body["data"][0]["tmdb_id"] == 550
    assert body["data"][0]["language"]["name"] == "English"


# ============================================
# Background jobs
# ============================================

@pytest.fixture
def scheduled_jobs(db_session, tmdb_stub, monkeypatch):
    monkeypatch.setattr(background_jobs, "session_factory", sessionmaker(bind=db_session.get_bind()))
    monkeypatch.setattr(background_jobs, "tmdb_factory", lambda: tmdb_stub)
    return background_jobs


def test_jobs_status_lists_sync_job(client):
    response = client.get("/api/v1/jobs/status")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["scheduler_running"] is False
    assert [job["id"] for job in data["jobs"]] == ["sync_popular"]


def test_trigger_sync_job_records_scheduled_run(client, tmdb_stub, scheduled_jobs):
    tmdb_stub.pages[1] = [make_tmdb_movie(550)]

    response = client.post("/api/v1/jobs/trigger/sync")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "success"
    assert data["result"]["movies_added"] == 1

    last = client.get("/api/v1/sync/last-log").json()["data"]
    assert last["sync_type"] == "scheduled"


def test_trigger_sync_job_failure_is_reported_not_raised(client, tmdb_stub, scheduled_jobs):
    tmdb_stub.fail_page(1)

    response = client.post("/api/v1/jobs/trigger/sync")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "failed"
    assert "failed to fetch page 1" in data["error"]


def test_pause_unknown_job_is_bad_request(client):
    response = client.post("/api/v1/jobs/pause/update_trending")

    assert response.status_code == 400
    assert "sync_popular" in response.json()["message"]


def test_pause_job_when_scheduler_disabled_is_conflict(client):
    response = client.post("/api/v1/jobs/pause/sync_popular")

    assert response.status_code == 409


# ============================================
# Health
# ============================================

def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_health_pings_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
