from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from crawler.db.models import Base
from shared.config import settings


def make_engine(url: str | None = None, echo: bool = False) -> Engine:
    """
    Creates an engine for the cache database.
    In-memory SQLite shares one connection so every session sees the same data.
    """
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite") and ":memory:" in url:
        engine = create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(url, echo=echo, pool_pre_ping=True)

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _sqlite_pragmas)
    return engine


def _sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """
    Creates missing tables directly from the ORM metadata.
    Production databases are migrated with alembic instead: alembic upgrade head
    """
    Base.metadata.create_all(engine)
