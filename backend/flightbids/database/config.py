"""
Engine and session management for the bids database.

The URL comes from DATABASE_URL or is assembled from DB_* variables; SQLite
is used when nothing is set. Callers work through get_session_context(), which
commits when the block finishes and rolls back if it raises. The services
below it only ever flush.
"""

import os
import logging
from typing import Optional, Dict, Any
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool, QueuePool
from sqlalchemy.exc import SQLAlchemyError
from contextlib import contextmanager
from pathlib import Path

from .models import create_all_tables

logger = logging.getLogger(__name__)

# DB_TYPE -> (driver scheme, default port, default user, URL suffix)
SERVER_BACKENDS: Dict[str, tuple] = {
    'mysql': ('mysql+pymysql', '3306', 'root', '?charset=utf8mb4'),
    'mariadb': ('mysql+pymysql', '3306', 'root', '?charset=utf8mb4'),
    'postgresql': ('postgresql', '5432', 'postgres', ''),
}

DEFAULT_DB_NAME = 'flightbids'


def _url_from_environment() -> str:
    """
    Resolve the database URL from the environment.

    DATABASE_URL wins outright. Otherwise DB_TYPE selects the backend and
    DB_HOST, DB_PORT, DB_NAME, DB_USER and DB_PASSWORD fill in the rest.
    """
    explicit = os.getenv('DATABASE_URL')
    if explicit:
        return explicit

    db_type = os.getenv('DB_TYPE', 'sqlite').lower()

    if db_type == 'sqlite':
        filename = os.getenv('DB_NAME', f'{DEFAULT_DB_NAME}.db')
        return f"sqlite:///{Path(__file__).parent.parent / filename}"

    if db_type not in SERVER_BACKENDS:
        raise ValueError(f"Unsupported database type: {db_type}")

    scheme, port, user, suffix = SERVER_BACKENDS[db_type]
    return (
        f"{scheme}://{os.getenv('DB_USER', user)}:{os.getenv('DB_PASSWORD', '')}"
        f"@{os.getenv('DB_HOST', 'localhost')}:{os.getenv('DB_PORT', port)}"
        f"/{os.getenv('DB_NAME', DEFAULT_DB_NAME)}{suffix}"
    )


def _configure_sqlite_connection(dbapi_connection, connection_record):
    # pysqlite must not issue its own BEGIN; SAVEPOINT has to nest inside ours
    dbapi_connection.isolation_level = None

    # Deleting a flight or user must take its bids with it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_sqlite_transaction(conn):
    conn.exec_driver_sql("BEGIN")


class DatabaseConfig:
    """
    Owns the engine and session factory for one database.

    Construction is cheap; the engine is only built by initialize(), which
    the other methods call on first use.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        """
        Args:
            database_url: Explicit URL; when omitted it is read from the environment
            echo: Log every SQL statement
        """
        self.database_url = database_url or _url_from_environment()
        self.echo = echo
        self.db_type = self.database_url.split(':', 1)[0].split('+', 1)[0]
        if self.db_type not in ('sqlite', 'mysql', 'postgresql'):
            self.db_type = 'unknown'

        self.engine: Optional[Engine] = None
        self.session_factory: Optional[sessionmaker] = None
        self._is_initialized = False

        logger.info(f"Using {self.db_type} database")

    def _get_engine_kwargs(self) -> Dict[str, Any]:
        """Engine options for the configured backend."""
        kwargs: Dict[str, Any] = {'echo': self.echo}

        if self.db_type == 'sqlite':
            # One shared connection, so ':memory:' outlives individual sessions
            kwargs['poolclass'] = StaticPool
            kwargs['connect_args'] = {'check_same_thread': False, 'timeout': 30}
        elif self.db_type in ('mysql', 'postgresql'):
            kwargs.update(
                poolclass=QueuePool,
                pool_size=int(os.getenv('DB_POOL_SIZE', '5')),
                max_overflow=int(os.getenv('DB_MAX_OVERFLOW', '10')),
                pool_timeout=int(os.getenv('DB_POOL_TIMEOUT', '30')),
                pool_recycle=int(os.getenv('DB_POOL_RECYCLE', '3600')),
                pool_pre_ping=True,
            )

        return kwargs

    def initialize(self) -> None:
        """
        Build the engine, check it answers, and prepare the session factory.

        Raises:
            SQLAlchemyError: The engine could not be created or reached
        """
        if self._is_initialized:
            return

        try:
            engine = create_engine(self.database_url, **self._get_engine_kwargs())
            if self.db_type == 'sqlite':
                event.listen(engine, "connect", _configure_sqlite_connection)
                event.listen(engine, "begin", _begin_sqlite_transaction)

            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Could not open {self.db_type} database: {e}")
            raise SQLAlchemyError(f"Database initialization failed: {e}")

        self.engine = engine
        self.session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        self._is_initialized = True
        logger.info(f"Engine ready ({self.db_type})")

    def create_tables(self) -> None:
        """
        Create any missing tables.

        Raises:
            SQLAlchemyError: If the DDL fails
        """
        self.initialize()

        try:
            create_all_tables(self.engine)
        except Exception as e:
            logger.error(f"Table creation failed: {e}")
            raise SQLAlchemyError(f"Table creation failed: {e}")

        logger.info("Tables created")

    def get_session(self) -> Session:
        """A new, unmanaged session; the caller commits and closes it."""
        self.initialize()
        return self.session_factory()

    @contextmanager
    def get_session_context(self):
        """
        A session scoped to one unit of work.

        Usage:
            with db.get_session_context() as session:
                BidManager(session, settings).add_bid(flight, user)
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database session error, rolled back: {e}")
            raise
        except Exception:
            # Business rejections and CLI exits are the caller's to report
            session.rollback()
            raise
        finally:
            session.close()

    def test_connection(self) -> bool:
        """True if the database answers a trivial query."""
        try:
            self.initialize()
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Connection check failed: {e}")
            return False
        return True

    def get_connection_info(self) -> Dict[str, Any]:
        """Describe the connection with any credentials stripped."""
        _, _, location = self.database_url.rpartition('@')
        return {
            'database_type': self.db_type,
            'database_url': location,
            'is_initialized': self._is_initialized,
            'echo_enabled': self.echo,
        }

    def close(self) -> None:
        """Dispose of the engine's pooled connections."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connections closed")


# Process-wide instance for callers without their own DatabaseConfig
_db_config: Optional[DatabaseConfig] = None


def get_database_config(database_url: Optional[str] = None, echo: bool = False) -> DatabaseConfig:
    """Return the process-wide DatabaseConfig, creating it on first call."""
    global _db_config

    if _db_config is None:
        _db_config = DatabaseConfig(database_url=database_url, echo=echo)

    return _db_config


def initialize_database(database_url: Optional[str] = None, echo: bool = False,
                        create_tables: bool = True) -> DatabaseConfig:
    """Initialize the process-wide database, creating tables unless told not to."""
    db_config = get_database_config(database_url=database_url, echo=echo)
    if create_tables:
        db_config.create_tables()
    else:
        db_config.initialize()
    return db_config


@contextmanager
def get_db_session_context():
    """Unit-of-work session on the process-wide database."""
    with get_database_config().get_session_context() as session:
        yield session


__all__ = [
    'DatabaseConfig',
    'get_database_config',
    'initialize_database',
    'get_db_session_context',
]
