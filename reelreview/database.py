from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
import os
from dotenv import load_dotenv
import logging

load_dotenv()
logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./reelreview.db")

# SQLite connections are shared across FastAPI's worker threads
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,  # Test connections before using them
    echo=os.getenv("DB_ECHO", "false").lower() == "true"  # Set to true for SQL debugging
)

@event.listens_for(engine, "connect")
def receive_connect(dbapi_conn, connection_record):
    """Log when a new connection is created"""
    logger.debug("Database connection established")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def create_tables(bind=None):
    """
    Create all catalog tables that do not exist yet.

    Usage:
        python -m reelreview.database
    """
    # Import all models to ensure they're registered with Base
    import reelreview.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Catalog tables ready: users, movies, reviews, watchlist")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
