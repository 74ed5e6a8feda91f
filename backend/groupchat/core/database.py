from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from groupchat.core.config import settings

# SQLite needs check_same_thread disabled because FastAPI serves sync
# dependencies from a thread pool
_engine_kwargs = {}
if settings.DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}

# Create database engine - manages connection pool
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

# autocommit=False: Changes require explicit commit
# autoflush=False: Don't auto-flush before queries
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all database models
Base = declarative_base()


def get_db():
    """
    Dependency for getting database session.

    The session is closed after the request completes, even when the
    handler raises.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create tables for every model registered on Base."""
    # Import models so their tables are attached to Base.metadata
    from groupchat.models import message, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
