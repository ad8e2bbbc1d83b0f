"""
Main FastAPI application.
Blog CMS backend: public reading API and admin write API.
"""
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from blog_api.config import settings
from blog_api.database import engine
from blog_api.errors import BlogError, blog_error_handler, validation_error_handler
from blog_api.rate_limiter import limiter

# Log file directory must exist before the FileHandler opens it
Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler(settings.log_file),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)


def run_migrations():
    """
    Run Alembic migrations automatically.
    Critical failure if they can't be applied.
    """
    try:
        base_dir = Path(__file__).resolve().parent.parent
        alembic_cfg = Config(str(base_dir / "alembic.ini"))
        alembic_cfg.set_main_option("script_location", str(base_dir / "alembic"))

        logger.info("Running database migrations...")
        with engine.begin() as connection:
            alembic_cfg.attributes["connection"] = connection
            command.upgrade(alembic_cfg, "head")
        logger.info("Migrations completed successfully")

    except Exception as e:
        logger.critical(f"Failed to run migrations: {e}")
        sys.exit(1)


def check_database_integrity():
    """
    Check SQLite integrity and dangling foreign keys.
    Critical failure if corruption or orphaned association rows are found.
    """
    try:
        db_path = Path(settings.database_path)

        if not db_path.exists():
            logger.info("Database does not exist yet, skipping integrity check")
            return

        with engine.connect() as conn:
            result = conn.execute(text("PRAGMA quick_check;")).fetchone()
            if result[0] != "ok":
                logger.critical(f"Database integrity check failed: {result[0]}")
                sys.exit(1)

            violations = conn.execute(text("PRAGMA foreign_key_check;")).fetchall()
            if violations:
                logger.critical(f"Foreign key check failed: {len(violations)} dangling rows")
                sys.exit(1)

            logger.info("Database integrity check passed")

    except Exception as e:
        logger.critical(f"Failed to check database integrity: {e}")
        sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown.
    Runs critical checks on startup.
    """
    # Startup
    logger.info("Starting blog application")
    logger.info(f"Database: {settings.database_path}")
    logger.info(f"Log level: {settings.log_level}")

    # Make sure the data directory exists
    Path(settings.database_path).parent.mkdir(parents=True, exist_ok=True)

    check_database_integrity()
    run_migrations()

    yield

    # Shutdown
    logger.info("Shutting down blog application")


# Create FastAPI app
app = FastAPI(
    title="Blog API",
    description="Posts and categories for a blog CMS",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Domain errors -> {"error": ...}
app.add_exception_handler(BlogError, blog_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "ok"}


# Include routers
from blog_api.routes import admin, categories, posts
app.include_router(posts.router, prefix="/api")
app.include_router(categories.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
