"""
Routes for Background Jobs Management
Provides endpoints to monitor and control the scheduled catalog sync

Features:
- Manual job trigger
- Job status monitoring
- Pause/resume jobs
"""

from fastapi import APIRouter, HTTPException, status
from apscheduler.jobstores.base import JobLookupError
from app.services.background_jobs import background_jobs
from app.utils.response import success_response
from datetime import datetime, timezone

router = APIRouter(prefix="/api/v1/jobs", tags=["Background Jobs"])


def _check_job_id(job_id: str):
    valid_jobs = background_jobs.job_ids
    if job_id not in valid_jobs:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid job_id. Must be one of: {', '.join(valid_jobs)}"
        )


@router.get("/status")
def get_jobs_status():
    """
    Get status of all scheduled background jobs

    Returns:
    - Job IDs and names
    - Next run times
    - Last execution times
    - Current status (idle/running/success/failed)
    - Error messages (if any)
    """
    stats = background_jobs.get_job_stats()
    return success_response(
        status.HTTP_200_OK,
        "Job status retrieved successfully",
        data={
            "scheduler_running": stats['scheduler_running'],
            "timezone": stats['timezone'],
            "jobs": stats['jobs'],
            "checked_at": datetime.now(timezone.utc).isoformat()
        },
    )


@router.post("/trigger/sync")
def trigger_sync():
    """
    Manually run the scheduled sync now

    Runs in the request thread and records sync_type 'scheduled'.
    Outcome is reported in the job stats and the sync log.
    """
    background_jobs.trigger_job('sync_popular')
    stats = background_jobs.job_stats['sync_popular']
    return success_response(
        status.HTTP_200_OK,
        "Sync job triggered successfully",
        data={
            "job": "sync_popular",
            "status": stats['status'],
            "error": stats['error'],
            "result": stats['result'],
            "triggered_at": datetime.now(timezone.utc).isoformat()
        },
    )


@router.post("/pause/{job_id}")
def pause_job(job_id: str):
    _check_job_id(job_id)
    try:
        background_jobs.pause_job(job_id)
    except JobLookupError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Job '{job_id}' is not scheduled"
        )

    return success_response(
        status.HTTP_200_OK,
        f"Job '{job_id}' paused successfully",
        data={"job_id": job_id, "paused_at": datetime.now(timezone.utc).isoformat()},
    )


@router.post("/resume/{job_id}")
def resume_job(job_id: str):
    _check_job_id(job_id)
    try:
        background_jobs.resume_job(job_id)
    except JobLookupError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Job '{job_id}' is not scheduled"
        )

    return success_response(
        status.HTTP_200_OK,
        f"Job '{job_id}' resumed successfully",
        data={"job_id": job_id, "resumed_at": datetime.now(timezone.utc).isoformat()},
    )
