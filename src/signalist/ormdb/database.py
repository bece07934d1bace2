"""Database configuration and session management."""

from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.logging import get_logger
from ..config.settings import Settings, get_settings

logger = get_logger(__name__)

# Base class for all ORM models
Base = declarative_base()


def _configure_sqlite_for_performance(dbapi_connection, connection_record):
    """Configure SQLite for better performance and reliability."""
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA temp_store=MEMORY")
    finally:
        cursor.close()


def create_engine_for_url(
    database_url: str,
    echo: bool = False,
    pool_pre_ping: bool = True,
    pool_recycle: int = 3600,
) -> Engine:
    """Create a database engine configured for the given backend."""
    is_sqlite = database_url.startswith("sqlite")

    logger.info(
        "Creating database engine",
        url_type="sqlite" if is_sqlite else "other",
        echo_sql=echo,
    )

    engine_kwargs: Dict[str, Any] = {
        "echo": echo,
        "pool_pre_ping": pool_pre_ping,
        "pool_recycle": pool_recycle,
    }

    if is_sqlite:
        engine_kwargs.update(
            {
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": 30,
                },
                "poolclass": StaticPool,
            }
        )
    else:
        # PostgreSQL/MySQL configuration
        engine_kwargs.update(
            {
                "pool_size": 5,
                "max_overflow": 10,
            }
        )

    engine = create_engine(database_url, **engine_kwargs)

    if is_sqlite:
        event.listen(engine, "connect", _configure_sqlite_for_performance)

    return engine


class Database:
    """
    Engine and session factory for one database.

    Created once at process start and handed to repositories, services and
    scheduled jobs, so tests can substitute an isolated instance.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=engine,
            expire_on_commit=False,  # Keep objects accessible after commit
        )

    @classmethod
    def from_url(cls, database_url: str, **engine_options: Any) -> "Database":
        """Create a database for an explicit URL."""
        return cls(create_engine_for_url(database_url, **engine_options))

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Database":
        """Create a database using application settings."""
        settings = settings or get_settings()
        return cls.from_url(
            settings.get_database_url(),
            echo=settings.database_echo_sql,
            pool_pre_ping=settings.database_pool_pre_ping,
            pool_recycle=settings.database_pool_recycle,
        )

    @property
    def url(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional session scope.

        Yields:
            Session: committed on success, rolled back on error, always closed
        """
        session = self.session_factory()

        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error("Database session rolled back", error=str(e), exc_info=True)
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        """Create all database tables."""
        # Import models so they are registered on the metadata
        from . import models  # noqa: F401

        logger.info("Creating database tables")
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created successfully")

    def check_health(self) -> Dict[str, Any]:
        """
        Check database connectivity and return health information.

        Returns:
            dict: Database health status and metrics
        """
        try:
            with self.session_scope() as session:
                health_check = session.execute(
                    text("SELECT 1 as health_check")
                ).scalar()

            pool = self.engine.pool
            pool_info = {
                "pool_size": getattr(pool, "size", lambda: "N/A")(),
                "checked_out": getattr(pool, "checkedout", lambda: "N/A")(),
            }

            logger.debug("Database health check successful", pool_info=pool_info)

            return {
                "status": "healthy",
                "connectivity": health_check == 1,
                "pool_info": pool_info,
                "database_url": self.url,
            }

        except Exception as e:
            logger.error("Database health check failed", error=str(e), exc_info=True)
            return {
                "status": "unhealthy",
                "error": str(e),
                "connectivity": False,
            }


@lru_cache()
def get_database() -> Database:
    """Get the process-wide database built from settings."""
    database = Database.from_settings()
    logger.info("Database initialized", url=database.url)
    return database
