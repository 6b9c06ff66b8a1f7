from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from agency.config import settings

_connect_args = {}
if settings.database_url_fixed.startswith("sqlite"):
    _connect_args = {"check_same_thread": False}

engine = create_engine(settings.database_url_fixed, connect_args=_connect_args, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session and close it after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
