import logging
import os
import time

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DATABASE_URL

logger = logging.getLogger(__name__)

POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "10"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "20"))
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "300"))
LOG_SLOW_QUERIES = os.getenv("DB_LOG_SLOW_QUERIES", "true").lower() == "true"
SLOW_QUERY_THRESHOLD = float(os.getenv("DB_SLOW_QUERY_THRESHOLD", "1.0"))

IS_SQLITE = DATABASE_URL.startswith("sqlite")


def _engine_options() -> dict:
    """Pool options for PostgreSQL, thread settings for SQLite"""
    if IS_SQLITE:
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": POOL_RECYCLE,
        "pool_size": POOL_SIZE,
        "max_overflow": MAX_OVERFLOW,
        "pool_timeout": POOL_TIMEOUT,
    }


try:
    engine = create_engine(DATABASE_URL, echo=False, **_engine_options())
    backend = "SQLite" if IS_SQLITE else f"pool size={POOL_SIZE}, overflow={MAX_OVERFLOW}"
    logger.info(f"✅ Booking database ready ({backend})")
except Exception as e:
    logger.error(f"❌ Could not create booking database engine: {e}")
    raise


def _watch_slow_queries(target_engine, threshold: float) -> None:
    @event.listens_for(target_engine, "before_cursor_execute")
    def _start_timer(conn, _cursor, _statement, _parameters, _context, _executemany):
        conn.info.setdefault("query_started_at", []).append(time.time())

    @event.listens_for(target_engine, "after_cursor_execute")
    def _report_slow(conn, _cursor, statement, _parameters, _context, _executemany):
        elapsed = time.time() - conn.info["query_started_at"].pop()
        if elapsed > threshold:
            logger.warning(f"🐌 Slow query ({elapsed:.2f}s): {statement[:200]}...")


if LOG_SLOW_QUERIES:
    _watch_slow_queries(engine, SLOW_QUERY_THRESHOLD)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """Request-scoped session, closed when the response is sent"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
