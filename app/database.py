from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Postgres pool sizing per API container
POOL_SIZE = 5
MAX_OVERFLOW = 10
POOL_TIMEOUT = 30      # seconds
POOL_RECYCLE = 1800    # seconds

# Created on first use so forked workers do not share connections
_engine = None
_session_local = None

Base = declarative_base()


def _create_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # One shared connection keeps an in-memory database alive across sessions
        logger.info("Using SQLite with a static connection pool")
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.DEBUG,
        )
    logger.info(f"Database pool configured: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, timeout={POOL_TIMEOUT}s")
    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        pool_pre_ping=True,
        echo=settings.DEBUG,
    )


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = _create_engine(settings.DATABASE_URL)
    return _engine


def get_session_local() -> sessionmaker:
    global _session_local
    if _session_local is None:
        # Objects stay readable after commit; streak responses are built from them
        _session_local = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _session_local


def create_tables():
    """Create missing tables for every model (init_db, app startup, tests)."""
    import app.models  # noqa: F401
    Base.metadata.create_all(bind=get_engine())


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency: one session per request.

    Anything left uncommitted when the handler raises is rolled back.
    """
    db = get_session_local()()
    try:
        yield db
    except Exception as e:
        logger.error(f"Rolling back request session after error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for work outside a request, such as the streak reset command."""
    db = get_session_local()()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_pool_status() -> dict:
    """Connection pool counters for the health endpoint."""
    pool = get_engine().pool
    status = {"pool_type": type(pool).__name__}
    if isinstance(pool, QueuePool):
        status.update(
            pool_size=pool.size(),
            checked_in=pool.checkedin(),
            checked_out=pool.checkedout(),
            overflow=pool.overflow(),
        )
    return status
