import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError, TimeoutError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from core.config import settings
from core.errors import ErrorCode, ErrorMessage, constraint_violation, storage_failure
from core.exceptions import AppException

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs):
    """Create the process engine.

    Postgres gets a fixed-size queue pool; SQLite (tests, local runs) keeps
    its own pool class and needs foreign keys switched on per connection.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, echo=settings.DB_ECHO, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        **kwargs,
    )


def build_sessionmaker(bind) -> sessionmaker:
    return sessionmaker(bind=bind, autocommit=False, autoflush=False, expire_on_commit=False)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = build_sessionmaker(engine)


@contextmanager
def transaction(session_factory: sessionmaker = SessionLocal):
    """One unit of work on one pooled connection.

    Commits when the block exits cleanly, rolls back on any exception and
    always returns the connection to the pool. SQLAlchemy errors come out
    classified as ReferentialFailure or StorageFailure.
    """
    db: Session = session_factory()
    try:
        yield db
        db.commit()
    except AppException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning("Constraint violation: %s", e.orig)
        raise constraint_violation({"reason": str(e.orig)[:200]}) from e
    except TimeoutError as e:
        logger.error("Connection pool exhausted: %s", e)
        raise storage_failure(ErrorCode.DB_POOL_EXHAUSTED, ErrorMessage.DB_POOL_EXHAUSTED) from e
    except OperationalError as e:
        _safe_rollback(db)
        logger.exception("Database unavailable")
        raise storage_failure(ErrorCode.DB_UNAVAILABLE, ErrorMessage.DB_UNAVAILABLE) from e
    except SQLAlchemyError as e:
        _safe_rollback(db)
        logger.exception("Database operation failed")
        raise storage_failure() from e
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _safe_rollback(db: Session):
    # the connection may already be gone; the original error is what gets reported
    try:
        db.rollback()
    except SQLAlchemyError:
        logger.warning("Rollback failed after database error", exc_info=True)
