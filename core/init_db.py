import logging
import time

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import sessionmaker

from core.config import settings
from core.database import Base, SessionLocal, engine
from core.models import GameStatistics, STATISTICS_ID

logger = logging.getLogger(__name__)


def ensure_statistics(session_factory: sessionmaker = SessionLocal) -> bool:
    """Create the statistics row if it is missing.

    Returns True when the row was created by this call. An existing row is
    never touched, so running this again keeps every counter as it is.
    """
    db = session_factory()
    try:
        if db.get(GameStatistics, STATISTICS_ID) is not None:
            return False

        db.add(GameStatistics(id=STATISTICS_ID))
        try:
            db.commit()
        except IntegrityError:
            # another process created it between the check and the insert
            db.rollback()
            return False

        logger.info("Statistics record initialized")
        return True
    finally:
        db.close()


def init_db(bind=None, session_factory: sessionmaker | None = None, attempts: int | None = None, sleep=time.sleep):
    bind = bind if bind is not None else engine
    session_factory = session_factory or SessionLocal
    attempts = attempts or settings.INIT_DB_ATTEMPTS

    logger.info("Creating database tables...")

    for attempt in range(1, attempts + 1):
        try:
            Base.metadata.create_all(bind=bind)
            ensure_statistics(session_factory)
            logger.info("Done.")
            return
        except OperationalError as e:
            logger.warning("DB not ready (attempt %s/%s): %s", attempt, attempts, e)
            if attempt < attempts:
                sleep(min(2 * attempt, 10))

    raise RuntimeError("Database not reachable after retries. Startup aborted.")
