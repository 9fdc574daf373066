from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from app.config import get_settings

settings = get_settings()


def normalize_database_url(database_url: str) -> str:
    """
    Normalize database URL for psycopg3 compatibility.

    Replaces 'postgresql://' with 'postgresql+psycopg://' if psycopg driver
    is not already specified.

    Args:
        database_url: Original database URL

    Returns:
        Normalized database URL
    """
    if database_url.startswith('postgresql://') and '+psycopg' not in database_url:
        return database_url.replace('postgresql://', 'postgresql+psycopg://')
    return database_url


database_url = normalize_database_url(settings.get_database_url())

connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
engine = create_engine(database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
