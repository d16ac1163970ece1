import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel, create_engine

from .config import DATABASE_URL
from .errors import InternalError, ProcedureError

# Import all models to ensure they are registered with SQLModel metadata
from .models import Tag, Task, TaskTagLink, User  # noqa: F401

logger = logging.getLogger(__name__)


def _create_engine():
    if DATABASE_URL.startswith("sqlite"):
        return create_engine(
            DATABASE_URL,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    # Postgres: disable pooling for serverless and enable pre-ping
    return create_engine(
        DATABASE_URL,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )

engine = _create_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def get_session():
    """Get a database session (context manager style).

    This is a convenience function for use outside of FastAPI dependencies.
    Usage:
        with get_session() as session:
            # do something with session
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@contextmanager
def storage_errors(db: Session, failure_message: str):
    """Re-raise storage failures inside the block as ``InternalError``."""
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s: %s", failure_message, exc)
        raise InternalError(failure_message) from exc

@contextmanager
def transaction(db: Session, failure_message: str):
    """Run a unit of work and commit it, or roll everything back.

    Procedure errors raised inside the block propagate unchanged; storage
    errors are logged and re-raised as ``InternalError(failure_message)``.
    """
    with storage_errors(db, failure_message):
        try:
            yield db
            db.commit()
        except ProcedureError:
            db.rollback()
            raise

def create_tables(bind=None):
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=bind or engine)
