import logging
import time

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from fornaccio.core.config import settings

logger = logging.getLogger(__name__)

MAX_RETRIES = 10
WAIT_SECONDS = 3

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

# Repositories return detached rows, so keep loaded attributes after commit.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

Base = declarative_base()


def init_db(max_retries: int = MAX_RETRIES, wait_seconds: float = WAIT_SECONDS) -> bool:
    """
    Creates the tables, retrying while the database container is still booting.
    Returns False when every attempt failed.
    """
    # Models must be imported so they register on Base.metadata.
    from fornaccio.domain import models  # noqa: F401

    for attempt in range(max_retries):
        try:
            logger.info(f"🔄 Attempting DB connection ({attempt + 1}/{max_retries})...")
            Base.metadata.create_all(bind=engine)
            logger.info("✅ DB Connected and Tables Created.")
            return True
        except OperationalError:
            logger.warning(f"⚠️ DB not ready yet. Waiting {wait_seconds}s...")
            time.sleep(wait_seconds)

    logger.error("❌ Could not connect to DB after retries.")
    return False
