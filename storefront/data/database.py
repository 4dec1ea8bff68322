# storefront/data/database.py
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from storefront.utils.retry import db_retry
from storefront.utils.settings import DATABASE_URL, DB_CONNECT_ATTEMPTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

engine = create_engine(DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """One session per request, closed when the request is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@db_retry(attempts=DB_CONNECT_ATTEMPTS)
def init_db(bind=None):
    # models must be imported before create_all so they land in Base.metadata
    import storefront.data.models  # noqa: F401

    bind = bind or engine
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)


def ping(db) -> bool:
    db.execute(text("SELECT 1"))
    return True
