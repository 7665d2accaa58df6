import re
from typing import Any, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Result
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from app.core.config import settings

# Create SQLAlchemy engine
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using them
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

_PLACEHOLDER = re.compile(r"\$(\d+)")
_ILIKE = re.compile(r" ILIKE (\$\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def run_query(db: Session, sql: str, values: Sequence[Any] = ()) -> Result:
    """
    Execute a statement written with positional `$1..$N` placeholders.

    The placeholders are rewritten to SQLAlchemy named binds (`:p1..:pN`) so
    the same statement runs on every dialect; `values[i]` binds to `$i+1`.

    SQLite has no ILIKE; its LIKE is already case-insensitive for ASCII, so the
    operator is swapped there. SQLite LIKE has no default escape character
    either, so the backslash PostgreSQL uses is declared explicitly.
    """
    if db.get_bind().dialect.name == "sqlite":
        sql = _ILIKE.sub(r" LIKE \1 ESCAPE '\\'", sql)

    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    return db.execute(text(_PLACEHOLDER.sub(r":p\1", sql)), params)


def init_db():
    """
    Initialize database.

    We rely on Alembic for table creation, so this only makes sure the models
    are imported and registered on Base.metadata.

    Use "alembic upgrade head" to create/update database schema.
    """
    from app.models import company, job, user  # noqa: F401
