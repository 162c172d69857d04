from fastapi import APIRouter, Query, Depends, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.sync import SyncLogResponse
from app.services.sync_service import SyncError, SyncService
from app.services.tmdb_service import TMDBService, get_tmdb_service
from app.utils.response import error_response, success_response

router = APIRouter(prefix="/api/v1/sync", tags=["Sync"])


def get_sync_service(
    db: Session = Depends(get_db),
    tmdb: TMDBService = Depends(get_tmdb_service)
) -> SyncService:
    return SyncService(db, tmdb)


@router.post("/movies")
def sync_movies(
    pages: int = Query(1, description="Number of TMDB popular pages to pull (clamped to 1-10)"),
    service: SyncService = Depends(get_sync_service)
):
    """
    Pull popular movies from TMDB into the catalog

    Runs synchronously. A page-fetch failure stops the run and answers 500
    with the failed sync log as data.
    """
    try:
        sync_log = service.sync_movies(pages=pages)
    except SyncError as e:
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Sync failed: {str(e)}",
            data=SyncLogResponse.model_validate(e.sync_log),
        )

    return success_response(
        status.HTTP_200_OK,
        "Movies synced successfully",
        data=SyncLogResponse.model_validate(sync_log),
    )


@router.get("/last-log")
def get_last_sync_log(service: SyncService = Depends(get_sync_service)):
    sync_log = service.get_last_sync_log()
    if sync_log is None:
        return error_response(status.HTTP_404_NOT_FOUND, "No sync log found")

    return success_response(
        status.HTTP_200_OK,
        "Last sync log retrieved successfully",
        data=SyncLogResponse.model_validate(sync_log),
    )
