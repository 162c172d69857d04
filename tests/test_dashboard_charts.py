"""
Dashboard and chart endpoint tests
"""
from datetime import datetime, timezone

import pytest

from app.models.language import Language
from app.models.movie import Movie
from app.models.sync_log import SyncLog


def _add_movie(db_session, title, release_date="", vote_average=5.0, vote_count=0, popularity=1.0, language=None):
    movie = Movie(
        title=title,
        release_date=release_date,
        vote_average=vote_average,
        vote_count=vote_count,
        popularity=popularity,
        language_id=language.id if language else None,
    )
    db_session.add(movie)
    db_session.commit()
    return movie


@pytest.fixture
def languages(db_session):
    english = Language(code="en", name="English")
    korean = Language(code="ko", name="Korean")
    db_session.add_all([english, korean])
    db_session.commit()
    return {"en": english, "ko": korean}


# ============================================
# Dashboard
# ============================================

def test_dashboard_stats_empty_catalog(client):
    response = client.get("/api/v1/dashboard/stats")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total_movies"] == 0
    assert data["average_rating"] == 0.0
    assert data["total_votes"] == 0
    assert data["last_sync_time"] is None
    assert data["top_rated_movies"] == []
    assert data["most_popular"] == []
    assert data["recently_added"] == []


def test_dashboard_stats_aggregates(client, db_session):
    _add_movie(db_session, "Cult Classic", vote_average=9.8, vote_count=50, popularity=5.0)
    _add_movie(db_session, "Crowd Pleaser", vote_average=8.0, vote_count=5000, popularity=300.0)
    _add_movie(db_session, "Solid Pick", vote_average=7.0, vote_count=101, popularity=20.0)
    _add_movie(db_session, "Exactly Hundred", vote_average=6.0, vote_count=100, popularity=10.0)

    data = client.get("/api/v1/dashboard/stats").json()["data"]

    assert data["total_movies"] == 4
    assert data["average_rating"] == pytest.approx(7.7)
    assert data["total_votes"] == 5251
    assert [m["title"] for m in data["top_rated_movies"]] == ["Crowd Pleaser", "Solid Pick"]
    assert [m["title"] for m in data["most_popular"]] == [
        "Crowd Pleaser", "Solid Pick", "Exactly Hundred", "Cult Classic"
    ]
    assert [m["title"] for m in data["recently_added"]] == [
        "Exactly Hundred", "Solid Pick", "Crowd Pleaser", "Cult Classic"
    ]


def test_dashboard_top_lists_hold_ten_movies(client, db_session):
    for index in range(12):
        _add_movie(db_session, f"Movie {index}", vote_count=1000, popularity=float(index))

    data = client.get("/api/v1/dashboard/stats").json()["data"]

    assert data["total_movies"] == 12
    assert len(data["top_rated_movies"]) == 10
    assert len(data["most_popular"]) == 10
    assert len(data["recently_added"]) == 10
    assert data["most_popular"][0]["title"] == "Movie 11"


def test_dashboard_reports_last_sync_time(client, db_session):
    db_session.add(SyncLog(
        sync_type="manual",
        status="success",
        movies_added=3,
        movies_updated=0,
        synced_at=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
    ))
    db_session.commit()

    data = client.get("/api/v1/dashboard/stats").json()["data"]

    assert data["last_sync_time"].startswith("2024-05-01T12:30")


# ============================================
# Charts
# ============================================

def test_pie_chart_groups_by_language(client, db_session, languages):
    _add_movie(db_session, "A", language=languages["en"])
    _add_movie(db_session, "B", language=languages["en"])
    _add_movie(db_session, "C", language=languages["ko"])
    _add_movie(db_session, "D")

    response = client.get("/api/v1/charts/pie")

    assert response.status_code == 200
    assert response.json()["data"] == [
        {"label": "English", "value": 2, "code": "en"},
        {"label": "Korean", "value": 1, "code": "ko"},
        {"label": "Unknown", "value": 1, "code": "unknown"},
    ]


def test_column_chart_groups_by_release_year(client, db_session):
    for release_date in ["2019-01-01", "2019-05-05", "2020-02-02", "2020-03-03", "2018-07-07", "", "20"]:
        _add_movie(db_session, f"Movie {release_date}", release_date=release_date)

    response = client.get("/api/v1/charts/column")

    assert response.json()["data"] == [
        {"label": "2020", "value": 2},
        {"label": "2019", "value": 2},
        {"label": "2018", "value": 1},
    ]


def test_column_chart_keeps_top_ten_years(client, db_session):
    for year in range(2000, 2013):
        _add_movie(db_session, f"Movie {year}", release_date=f"{year}-01-01")
    _add_movie(db_session, "Extra 2001", release_date="2001-06-01")

    data = client.get("/api/v1/charts/column").json()["data"]

    assert len(data) == 10
    assert data[0] == {"label": "2001", "value": 2}
    assert [row["label"] for row in data[1:4]] == ["2012", "2011", "2010"]


def test_column_chart_respects_date_range(client, db_session):
    for release_date in ["2017-12-31", "2018-01-01", "2019-06-15", "2020-01-01"]:
        _add_movie(db_session, f"Movie {release_date}", release_date=release_date)

    response = client.get("/api/v1/charts/column", params={"start_date": "2018-01-01", "end_date": "2019-12-31"})

    assert {row["label"] for row in response.json()["data"]} == {"2018", "2019"}


def test_combined_chart_data(client, db_session, languages):
    _add_movie(db_session, "A", release_date="2021-04-04", language=languages["ko"])

    response = client.get("/api/v1/charts")

    data = response.json()["data"]
    assert data["pie_chart"] == [{"label": "Korean", "value": 1, "code": "ko"}]
    assert data["column_chart"] == [{"label": "2021", "value": 1}]


def test_monthly_chart_has_twelve_buckets(client, db_session):
    for release_date in ["2022-01-10", "2022-01-20", "2022-12-25", "2021-01-01"]:
        _add_movie(db_session, f"Movie {release_date}", release_date=release_date)

    response = client.get("/api/v1/charts/monthly/2022")

    data = response.json()["data"]
    assert [row["label"] for row in data] == [
        "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"
    ]
    assert data[0]["value"] == 2
    assert data[11]["value"] == 1
    assert sum(row["value"] for row in data) == 3


def test_monthly_chart_for_year_without_movies_is_all_zero(client):
    data = client.get("/api/v1/charts/monthly/1999").json()["data"]

    assert len(data) == 12
    assert all(row["value"] == 0 for row in data)


@pytest.mark.parametrize("year", ["1899", "2101"])
def test_monthly_chart_rejects_out_of_range_year(client, year):
    response = client.get(f"/api/v1/charts/monthly/{year}")

    assert response.status_code == 400
    assert response.json()["message"] == f"invalid year: {year}"


def test_monthly_chart_rejects_non_numeric_year(client):
    response = client.get("/api/v1/charts/monthly/twenty")

    assert response.status_code == 400
