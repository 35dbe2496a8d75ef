"""Database engine, session factory and declarative base."""

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import get_settings

settings = get_settings()

Base = declarative_base()


def build_engine(database_url: str, statement_timeout_ms: int = 0, **kwargs):
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        return create_engine(database_url, **kwargs)

    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        pool_recycle=3600,
        pool_timeout=30,
        **kwargs,
    )

    if statement_timeout_ms:
        @event.listens_for(engine, "connect")
        def _set_statement_timeout(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute(f"SET statement_timeout = {int(statement_timeout_ms)}")
            cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL, settings.DB_STATEMENT_TIMEOUT_MS)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
