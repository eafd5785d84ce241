"""
Database configuration and session management.
"""

import logging
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from app.config import settings

logger = logging.getLogger("feedingschedule.database")

# Create SQLAlchemy Base
Base = declarative_base()

# Session factory; bound to the engine on first use
SessionLocal = sessionmaker(autoflush=False, future=True)

_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Create (once) and return the application engine"""
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.postgres_db_url, echo=settings.db_echo, future=True
        )
        SessionLocal.configure(bind=_engine)
        logger.info("Database engine created for %s", _engine.url.render_as_string())
    return _engine


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite only enforces ON DELETE CASCADE with this pragma enabled"""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_database(engine: Optional[Engine] = None):
    """Initialize database schema"""
    engine = engine or get_engine()
    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
    logger.info("Database tables created successfully")


def get_db_session() -> Iterator[Session]:
    """Get database session (for dependency injection by the calling layer)"""
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

