from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from sqlalchemy.pool import QueuePool
from app.config import Settings
import logging

logger = logging.getLogger(__name__)


# ─── Base Model ────────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.
    All models in app/models/ should inherit from this class.
    """
    pass


# ─── SQLite: enforce foreign keys ──────────────────────────────────────────────
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ─── Database Resource ─────────────────────────────────────────────────────────
class Database:
    """
    Owns the engine (connection pool) and the session factory.

    Built once at startup and handed to the application; `close()` disposes
    every pooled connection.
    """

    def __init__(self, url: str, **engine_options):
        self.engine: Engine = create_engine(url, **engine_options)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,      # Avoid DetachedInstanceError after commit
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            poolclass=QueuePool,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
            pool_pre_ping=True,          # Detect stale connections before using them
            echo=settings.DATABASE_ECHO,
        )

    def session(self) -> Session:
        return self.SessionLocal()

    def init_schema(self) -> None:
        """Create every table and index that does not exist yet."""
        import app.models  # noqa: F401  registers models on Base.metadata

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ready")

    def check_connection(self) -> bool:
        """Verify database is reachable. Used at startup."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()


# ─── Dependency Injection ──────────────────────────────────────────────────────
def get_db(request: Request):
    """
    FastAPI dependency that provides a database session per request.
    Automatically closes session after request completes.

    Usage:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            ...
    """
    db = request.app.state.database.session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
