"""Database session management."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from hotelsearch.backend.core.config import settings
import os


# Create engine with SQLite-specific configuration
if settings.database_url.startswith("sqlite"):
    # Ensure directory exists for SQLite
    db_path = settings.database_url.replace("sqlite:///", "")
    if db_path != ":memory:":
        os.makedirs(os.path.dirname(db_path) if os.path.dirname(db_path) else ".", exist_ok=True)

    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False, "timeout": settings.store_timeout_seconds},
        poolclass=StaticPool,
        echo=False
    )
else:
    engine = create_engine(
        settings.database_url,
        pool_timeout=settings.store_timeout_seconds,
        pool_pre_ping=True,
        echo=False
    )


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Dependency for FastAPI to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
