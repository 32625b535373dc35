import tempfile
from pathlib import Path
from typing import Generator
import structlog
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.orm import Session, sessionmaker
from automation_coverage.config.settings import settings

logger = structlog.get_logger()

FALLBACK_DB_NAME = "automation_coverage_fallback.db"


def _sqlite_file(database_url: str):
    """Absolute path of a file-backed sqlite database, else None"""
    try:
        url = make_url(database_url)
    except ArgumentError:
        logger.warning("Unparseable database url", database_url=database_url)
        return None

    if not url.drivername.startswith("sqlite") or url.database in (None, "", ":memory:"):
        return None
    path = Path(url.database)
    return path if path.is_absolute() else (Path.cwd() / path).resolve()


def _resolve_database_url(database_url: str) -> str:
    """Make sure a sqlite file can be created where the url points.

    The parent directory is created on first use. When it cannot be written
    the store moves to a file in the system temp directory.
    """
    db_file = _sqlite_file(database_url)
    if db_file is None:
        return database_url

    try:
        db_file.parent.mkdir(parents=True, exist_ok=True)
        marker_file = db_file.parent / ".writable"
        marker_file.write_text("ok")
        marker_file.unlink()
    except OSError as e:
        fallback = f"sqlite:///{(Path(tempfile.gettempdir()) / FALLBACK_DB_NAME).as_posix()}"
        logger.error("sqlite directory not writable, using temp file", path=str(db_file), fallback=fallback, error=str(e))
        return fallback

    logger.info("Using sqlite database", path=str(db_file))
    return database_url


database_url = _resolve_database_url(settings.database_url)
engine = create_engine(
    database_url,
    connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_database() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    from automation_coverage.models.database import Base

    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error("Failed to create database tables", error=str(e))
        raise
    logger.info("Database tables ready", tables=len(Base.metadata.tables))
