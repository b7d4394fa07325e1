"""
Room storage for the Tile Duel relay.
Rooms live in a SQLite file next to this module unless DATABASE_URL points
elsewhere (a hosted Postgres, or a temporary file in tests).
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

ROOMS_DB_FILENAME = "rooms.db"


def resolve_database_url(raw_url: str | None) -> str:
    """Database URL for the relay; hosted postgres:// URLs are rewritten for SQLAlchemy 2.x."""
    if not raw_url:
        db_dir = os.path.dirname(os.path.abspath(__file__))
        return f"sqlite:///{os.path.join(db_dir, ROOMS_DB_FILENAME)}"
    if raw_url.startswith("postgres://"):
        return "postgresql://" + raw_url[len("postgres://"):]
    return raw_url


DATABASE_URL = resolve_database_url(os.environ.get("DATABASE_URL"))

# The websocket handler hits the DB from threadpool workers, so SQLite
# connections must not be pinned to the thread that opened them
_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Session for one room request, closed when the request finishes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_file_path() -> str | None:
    """Path of the rooms SQLite file, or None when another database is in use."""
    if DATABASE_URL.startswith("sqlite:///"):
        return DATABASE_URL[len("sqlite:///"):]
    return None


def init_db():
    """Create the rooms table if it does not exist yet."""
    Base.metadata.create_all(bind=engine)
