"""
Background Jobs Service for catalog synchronization
Periodically pulls popular movies from TMDB into the catalog

Features:
- Scheduled jobs using APScheduler
- Configurable timezone, hour and page count
- Job monitoring and statistics
- Manual trigger, pause and resume
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.jobstores.base import JobLookupError
from sqlalchemy.orm import Session
from app.config import settings
from app.database import SessionLocal
from app.models.sync_log import SYNC_TYPE_SCHEDULED
from app.services.sync_service import SyncService
from app.services.tmdb_service import TMDBService
from datetime import datetime
import logging
from typing import Dict, Optional
from pytz import timezone

logger = logging.getLogger(__name__)

SYNC_JOB_ID = 'sync_popular'


class BackgroundJobService:
    """
    Manages scheduled background jobs for catalog updates

    Jobs:
    - Sync popular movies (daily at SYNC_SCHEDULE_HOUR)

    Usage:
        jobs = BackgroundJobService()
        jobs.start()  # Start all scheduled jobs
        jobs.shutdown()  # Stop all jobs gracefully
    """

    def __init__(self, session_factory=SessionLocal, tmdb_factory=TMDBService):
        """Initialize scheduler with timezone configuration"""
        self.timezone = timezone(settings.TIMEZONE)
        self.scheduler = BackgroundScheduler(timezone=self.timezone)
        self.session_factory = session_factory
        self.tmdb_factory = tmdb_factory

        # Track job execution statistics
        self.job_stats = {
            SYNC_JOB_ID: {'last_run': None, 'status': 'idle', 'error': None, 'result': None},
        }

    @property
    def job_ids(self):
        return list(self.job_stats.keys())

    def start(self):
        """
        Start all scheduled background jobs

        Jobs are only started if ENABLE_BACKGROUND_JOBS=true in environment
        """
        if not settings.ENABLE_BACKGROUND_JOBS:
            logger.info("Background jobs disabled via ENABLE_BACKGROUND_JOBS environment variable")
            return

        if self.scheduler.running:
            return

        self.scheduler.add_job(
            func=self.sync_popular_movies,
            trigger=CronTrigger(hour=settings.SYNC_SCHEDULE_HOUR, minute=0, timezone=self.timezone),
            id=SYNC_JOB_ID,
            name='Sync popular movies from TMDB',
            replace_existing=True,
            max_instances=1  # Prevent concurrent runs
        )
        logger.info(f"✓ Scheduled: Sync popular movies (daily {settings.SYNC_SCHEDULE_HOUR:02d}:00)")

        self.scheduler.start()
        logger.info("=" * 60)
        logger.info("🚀 Background jobs started successfully")
        logger.info(f"   Timezone: {self.timezone}")
        logger.info(f"   Active jobs: {len(self.scheduler.get_jobs())}")
        logger.info("=" * 60)

    def shutdown(self):
        """Shutdown scheduler gracefully"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=True)
            logger.info("Background jobs stopped gracefully")

    def get_job_stats(self) -> Dict:
        """
        Get statistics for all jobs including next run times

        Returns:
            Dict with job information and execution history
        """
        jobs_info = []
        scheduled = {job.id: job for job in self.scheduler.get_jobs()}
        for job_id, stats in self.job_stats.items():
            job = scheduled.get(job_id)
            next_run = job.next_run_time if job else None
            jobs_info.append({
                'id': job_id,
                'name': job.name if job else job_id,
                'scheduled': job is not None,
                'next_run': next_run.isoformat() if next_run else None,
                'last_run': stats.get('last_run'),
                'status': stats.get('status', 'idle'),
                'error': stats.get('error'),
                'result': stats.get('result'),
            })

        return {
            'scheduler_running': self.scheduler.running,
            'timezone': str(self.timezone),
            'jobs': jobs_info
        }

    # ============================================
    # Main Job Methods
    # ============================================

    def sync_popular_movies(self, pages: Optional[int] = None):
        """
        Run the catalog sync pipeline with sync_type 'scheduled'

        Fetches SYNC_PAGES pages of popular movies unless pages is given.
        Failures are recorded in job_stats and the sync log, never raised.
        """
        job_id = SYNC_JOB_ID
        self.job_stats[job_id]['status'] = 'running'
        self.job_stats[job_id]['error'] = None

        db: Session = self.session_factory()
        start_time = datetime.now()
        pages = pages or settings.SYNC_PAGES

        try:
            logger.info(f"[{job_id}] Starting popular movies sync ({pages} pages)...")

            sync_log = SyncService(db, self.tmdb_factory()).sync_movies(
                pages=pages, sync_type=SYNC_TYPE_SCHEDULED
            )

            elapsed = (datetime.now() - start_time).total_seconds()
            logger.info(
                f"[{job_id}] ✓ Completed in {elapsed:.2f}s - "
                f"added={sync_log.movies_added} updated={sync_log.movies_updated}"
            )

            self.job_stats[job_id]['status'] = 'success'
            self.job_stats[job_id]['result'] = {
                'movies_added': sync_log.movies_added,
                'movies_updated': sync_log.movies_updated,
            }

        except Exception as e:
            db.rollback()
            elapsed = (datetime.now() - start_time).total_seconds()
            error_msg = str(e)

            logger.error(f"[{job_id}] ✗ Failed after {elapsed:.2f}s: {error_msg}")

            self.job_stats[job_id]['status'] = 'failed'
            self.job_stats[job_id]['error'] = error_msg

        finally:
            self.job_stats[job_id]['last_run'] = datetime.now().isoformat()
            db.close()

    # ============================================
    # Control Methods
    # ============================================

    def trigger_job(self, job_id: str):
        """Run a job immediately in the calling thread"""
        if job_id == SYNC_JOB_ID:
            self.sync_popular_movies()
        else:
            raise KeyError(job_id)

    def pause_job(self, job_id: str):
        """Pause a scheduled job"""
        try:
            self.scheduler.pause_job(job_id)
            logger.info(f"⏸ Paused job: {job_id}")
        except JobLookupError:
            logger.error(f"✗ Failed to pause job {job_id}: job is not scheduled")
            raise

    def resume_job(self, job_id: str):
        """Resume a paused job"""
        try:
            self.scheduler.resume_job(job_id)
            logger.info(f"▶ Resumed job: {job_id}")
        except JobLookupError:
            logger.error(f"✗ Failed to resume job {job_id}: job is not scheduled")
            raise


# Global singleton instance
background_jobs = BackgroundJobService()
