from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from app.config import settings
from app.database import init_db, ping
from app.routes import movies, sync, dashboard, upload, jobs
from app.middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from app.services.background_jobs import background_jobs
from app.services.storage_service import StorageError, get_storage_service
from app.utils.response import error_response, message_from_detail
import logging

API_VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


# ============================================
# Application Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events

    Startup:
    - Log configuration warnings
    - Create tables (AUTO_MIGRATE)
    - Ensure the storage bucket exists with a public-read policy
    - Start background jobs (scheduled catalog sync)

    Shutdown:
    - Stop background jobs gracefully
    """
    # Startup
    logger.info("=" * 60)
    logger.info("🚀 Movie Catalog API Starting...")
    logger.info(f"   Environment: {settings.ENVIRONMENT}")
    logger.info(f"   CORS Origins: {len(allowed_origins)} configured")
    logger.info("=" * 60)

    for warning in settings.validate():
        logger.warning(f"Config: {warning}")

    if settings.AUTO_MIGRATE:
        try:
            init_db()
        except Exception as e:
            logger.error(f"Failed to create database tables: {str(e)}")

    if settings.storage_configured:
        try:
            get_storage_service().ensure_bucket()
        except StorageError as e:
            logger.error(f"Failed to prepare storage bucket: {str(e)}")
    else:
        logger.info("Storage credentials not configured, skipping bucket setup")

    try:
        background_jobs.start()
    except Exception as e:
        logger.error(f"Failed to start background jobs: {str(e)}")

    yield

    # Shutdown
    logger.info("=" * 60)
    logger.info("🛑 Movie Catalog API Shutting Down...")
    try:
        background_jobs.shutdown()
    except Exception as e:
        logger.error(f"Error stopping background jobs: {str(e)}")
    logger.info("=" * 60)


app = FastAPI(
    title="Movie Catalog API",
    description="Movie catalog backed by TMDB sync, with dashboard charts and poster uploads",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ============================================
# Middleware
# ============================================

# CORS - Whitelist allowed origins
allowed_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
]
if settings.FRONTEND_URL:
    allowed_origins.append(settings.FRONTEND_URL)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# ============================================
# Exception Handlers - every error uses the response envelope
# ============================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, message_from_detail(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"Invalid {location}: {first.get('msg')}" if location else f"Invalid request: {first.get('msg')}"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ============================================
# Routes
# ============================================

@app.get("/", tags=["Health"])
async def root():
    """Basic health check"""
    return {
        "message": "Movie Catalog API",
        "version": API_VERSION,
        "status": "healthy",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check for monitoring"""
    database_ok = ping()
    body = {
        "status": "healthy" if database_ok else "unhealthy",
        "api_version": API_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected" if database_ok else "unreachable",
        "background_jobs": "running" if background_jobs.scheduler.running else "stopped",
    }
    return JSONResponse(
        status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body,
    )


app.include_router(movies.router)
app.include_router(sync.router)
app.include_router(dashboard.router)
app.include_router(upload.router)
app.include_router(jobs.router)  # Background jobs management

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
