"""
Sync log model - one append-only row per catalog sync run
"""
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from app.database import Base

SYNC_STATUS_SUCCESS = "success"
SYNC_STATUS_FAILED = "failed"

SYNC_TYPE_MANUAL = "manual"
SYNC_TYPE_SCHEDULED = "scheduled"


class SyncLog(Base):
    """
    Result of a single TMDB sync run

    Attributes:
        sync_type: 'manual' (API triggered) or 'scheduled' (background job)
        status: 'success' or 'failed'
        movies_added / movies_updated: counts accumulated during the run
        error_message: reason a run stopped early, if any
        synced_at: when the run started (UTC)
    """
    __tablename__ = "sync_logs"

    id = Column(Integer, primary_key=True, index=True)
    sync_type = Column(String(20), nullable=False, default=SYNC_TYPE_MANUAL, index=True)
    status = Column(String(20), nullable=False, default=SYNC_STATUS_FAILED, index=True)
    movies_added = Column(Integer, default=0)
    movies_updated = Column(Integer, default=0)
    error_message = Column(Text, nullable=True)
    synced_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<SyncLog(id={self.id}, status={self.status}, added={self.movies_added}, updated={self.movies_updated})>"
