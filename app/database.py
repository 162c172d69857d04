from sqlalchemy import create_engine, pool, event, text
from sqlalchemy.orm import declarative_base, sessionmaker
import logging

from app.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL


def _connect_args(url: str) -> dict:
    """
    Driver-level arguments that bound every statement by DB_QUERY_TIMEOUT.

    PostgreSQL gets a server-side statement_timeout, SQLite a busy timeout.
    """
    timeout = settings.DB_QUERY_TIMEOUT
    if url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": timeout}
    if url.startswith("postgresql"):
        return {
            "options": f"-c statement_timeout={int(timeout * 1000)}",
            "connect_timeout": 10,
        }
    return {}


def _engine_kwargs(url: str) -> dict:
    kwargs = {
        "connect_args": _connect_args(url),
        "pool_pre_ping": True,  # Test connections before using them
        "echo": settings.DB_ECHO,  # Set to true for SQL debugging
    }
    if not url.startswith("sqlite"):
        # QueuePool maintains a pool of connections that can be reused
        kwargs.update(
            poolclass=pool.QueuePool,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,  # Seconds to wait for connection
            pool_recycle=settings.DB_POOL_RECYCLE,
        )
    return kwargs


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))


@event.listens_for(engine, "connect")
def receive_connect(dbapi_conn, connection_record):
    """Log when a new connection is created"""
    logger.debug("Database connection established")


@event.listens_for(engine, "checkout")
def receive_checkout(dbapi_conn, connection_record, connection_proxy):
    """Log when a connection is checked out from the pool"""
    logger.debug(f"Connection checked out from pool: {engine.pool.status()}")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# Dependency for FastAPI routes
def get_db():
    """
    Database session dependency for FastAPI.
    Automatically handles session creation and cleanup.

    Usage:
        @router.get("/endpoint")
        def endpoint(db: Session = Depends(get_db)):
            # Use db here
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables registered on Base (idempotent)"""
    import app.models  # noqa: F401  registers models with Base

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables verified")


def ping() -> bool:
    """Return True when the database answers a trivial query"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {str(e)}")
        return False
